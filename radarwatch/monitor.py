"""
Asyncio rounds: every datacenter is checked concurrently, the round is awaited as a whole,
then the monitor sleeps for the configured delay. Next round never overlaps the previous one.
A fetch or notification failure only affects one datacenter for one round.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from radarwatch.config import DATACENTERS, DEFAULT_DELAY_MINUTES
from radarwatch.errors import FetchFailed, NotificationFailed
from radarwatch.fetch import StatsFetcher, is_accessible
from radarwatch.notify import Notifier
from radarwatch.state import OutageEvent, OutageTracker

logger = logging.getLogger("radarwatch.monitor")


@dataclass
class MonitorState:
    service: str
    fetcher: StatsFetcher
    tracker: OutageTracker
    notifier: Notifier
    datacenters: tuple[str, ...] = DATACENTERS
    delay_minutes: int = DEFAULT_DELAY_MINUTES
    align_to_minute: bool = False
    rounds_completed: int = 0

    def deliver(self, event: OutageEvent) -> None:
        """Notification side effect; failures are logged, tracker state already applied."""
        try:
            self.notifier.notify(event.title, event.message)
        except NotificationFailed as e:
            logger.error("Notification: %s from [%s]", e, event.datacenter)


async def check_datacenter(state: MonitorState, datacenter: str) -> Optional[OutageEvent]:
    """Fetch, classify, track and maybe notify for one datacenter."""
    try:
        sample = await state.fetcher.fetch(datacenter, state.service)
    except FetchFailed as e:
        logger.warning("Statistics: %s", e)
        return None

    accessible = is_accessible(sample)
    logger.info("[%s] => Value: %.2f (%s)", datacenter, sample, "OK" if accessible else "DOWN")
    return await state.tracker.observe(datacenter, state.service, accessible, on_event=state.deliver)


async def run_round(state: MonitorState) -> list[Optional[OutageEvent]]:
    """One worker per datacenter, all awaited before returning."""
    logger.info("Round started at %s", datetime.now().strftime("%H:%M:%S"))
    tasks = [asyncio.create_task(check_datacenter(state, dc)) for dc in state.datacenters]
    results = await asyncio.gather(*tasks, return_exceptions=True)
    events: list[Optional[OutageEvent]] = []
    for dc, result in zip(state.datacenters, results):
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            logger.error("Unexpected error checking [%s]: %r", dc, result)
            events.append(None)
        else:
            events.append(result)
    state.rounds_completed += 1
    return events


def seconds_until_next_minute(now: Optional[datetime] = None) -> float:
    now = now or datetime.now()
    next_minute = now.replace(second=0, microsecond=0) + timedelta(minutes=1)
    return (next_minute - now).total_seconds()


async def run_monitor(state: MonitorState, rounds: Optional[int] = None) -> None:
    """Run rounds until cancelled (or `rounds` rounds when given)."""
    logger.info(
        "Monitor started: service=%s datacenters=%d delay=%dm threshold=%d",
        state.service,
        len(state.datacenters),
        state.delay_minutes,
        state.tracker.threshold,
    )
    try:
        if state.align_to_minute:
            await asyncio.sleep(seconds_until_next_minute())
        done = 0
        while rounds is None or done < rounds:
            await run_round(state)
            done += 1
            in_outage = state.tracker.datacenters_in_outage()
            if in_outage:
                logger.info("In outage: %s", ", ".join(in_outage))
            if rounds is not None and done >= rounds:
                break
            await asyncio.sleep(state.delay_minutes * 60)
    except asyncio.CancelledError:
        logger.info("Monitor stopped")
        raise
    logger.info("Monitor finished after %d rounds", state.rounds_completed)
