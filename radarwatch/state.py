"""
Outage state machine per datacenter (race-free).
States: HEALTHY, OUTAGE.
Transitions: HEALTHY -> OUTAGE once `threshold` consecutive failures are seen (inclusive);
OUTAGE -> HEALTHY on the first accessible sample. Each transition emits exactly one event.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from radarwatch.config import DEFAULT_OUTAGE_THRESHOLD

logger = logging.getLogger("radarwatch.state")


class State(Enum):
    HEALTHY = "healthy"
    OUTAGE = "outage"


class EventKind(Enum):
    OUTAGE_STARTED = "outage_started"
    OUTAGE_CLEARED = "outage_cleared"


def capitalize_first(s: str) -> str:
    return s[:1].upper() + s[1:]


@dataclass(frozen=True)
class OutageEvent:
    kind: EventKind
    datacenter: str
    service: str

    @property
    def title(self) -> str:
        if self.kind == EventKind.OUTAGE_STARTED:
            return "🔴 Internet Outage"
        return "🟢 Internet Restored"

    @property
    def message(self) -> str:
        service = capitalize_first(self.service)
        if self.kind == EventKind.OUTAGE_STARTED:
            return f"{service} is unreachable from {self.datacenter}"
        return f"{service} is reachable again from {self.datacenter}"


@dataclass(frozen=True)
class DatacenterSnapshot:
    consecutive_failures: int
    in_outage: bool


class DatacenterState:
    """Debounce state for one datacenter. Mutations only under self.lock."""

    def __init__(self) -> None:
        self.consecutive_failures = 0
        self.in_outage = False
        self.lock = asyncio.Lock()

    @property
    def state(self) -> State:
        return State.OUTAGE if self.in_outage else State.HEALTHY

    def snapshot(self) -> DatacenterSnapshot:
        return DatacenterSnapshot(self.consecutive_failures, self.in_outage)


class OutageTracker:
    """
    Owns the datacenter -> DatacenterState map.

    One lock per datacenter: the decision and the notification callback for a
    datacenter are atomic together, while different datacenters never wait on
    each other.
    """

    def __init__(self, threshold: int = DEFAULT_OUTAGE_THRESHOLD, datacenters: tuple[str, ...] = ()):
        if threshold < 1:
            raise ValueError("threshold must be >= 1")
        self.threshold = threshold
        self._states: dict[str, DatacenterState] = {dc: DatacenterState() for dc in datacenters}

    def _state_for(self, datacenter: str) -> DatacenterState:
        st = self._states.get(datacenter)
        if st is None:
            st = DatacenterState()
            self._states[datacenter] = st
        return st

    def _decide(self, st: DatacenterState, datacenter: str, service: str, accessible: bool) -> Optional[OutageEvent]:
        if accessible:
            was_outage = st.in_outage
            st.in_outage = False
            st.consecutive_failures = 0
            if was_outage:
                return OutageEvent(EventKind.OUTAGE_CLEARED, datacenter, service)
            return None

        st.consecutive_failures += 1
        if st.consecutive_failures >= self.threshold and not st.in_outage:
            st.in_outage = True
            return OutageEvent(EventKind.OUTAGE_STARTED, datacenter, service)
        return None

    async def observe(
        self,
        datacenter: str,
        service: str,
        accessible: bool,
        on_event: Optional[Callable[[OutageEvent], None]] = None,
    ) -> Optional[OutageEvent]:
        """
        Feed one classified sample. Returns the transition event, if any.
        `on_event` runs while the datacenter lock is held; the state change is
        already applied, so a failing callback never desyncs flag and events.
        """
        st = self._state_for(datacenter)
        async with st.lock:
            event = self._decide(st, datacenter, service, accessible)
            if event is None:
                logger.debug(
                    "[%s] accessible=%s failures=%d state=%s",
                    datacenter, accessible, st.consecutive_failures, st.state.value,
                )
                return None
            if event.kind == EventKind.OUTAGE_STARTED:
                logger.info("HEALTHY->OUTAGE %s: %s after %d failures", datacenter, service, st.consecutive_failures)
            else:
                logger.info("OUTAGE->HEALTHY %s: %s", datacenter, service)
            if on_event is not None:
                on_event(event)
            return event

    def snapshot(self, datacenter: str) -> DatacenterSnapshot:
        """Read-only copy; no lock to avoid blocking. Unknown datacenters read as initial state."""
        st = self._states.get(datacenter)
        if st is None:
            return DatacenterSnapshot(0, False)
        return st.snapshot()

    def datacenters_in_outage(self) -> list[str]:
        return [dc for dc, st in self._states.items() if st.in_outage]
