"""
radarwatch – ArvanCloud radar outage notifier. Entry point.
- Select one service by name or number (--service), list services (--services)
- Poll every datacenter each round, notify on outage / restore (console + desktop tray)
"""
import argparse
import asyncio
import logging
import sys

import httpx

from radarwatch.config import (
    DEFAULT_DELAY_MINUTES,
    DEFAULT_OUTAGE_THRESHOLD,
    DEFAULT_TIMEOUT_S,
    PROGRAM_NAME,
    MonitorConfig,
    format_services,
)
from radarwatch.errors import ConfigError
from radarwatch.fetch import StatsFetcher
from radarwatch.logging_setup import setup_logging
from radarwatch.monitor import MonitorState, run_monitor
from radarwatch.notify import ConsoleNotifier, DesktopNotifier, NotifierGroup
from radarwatch.state import OutageTracker, capitalize_first


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="radarwatch", description="ArvanCloud radar outage notifier")
    p.add_argument("--service", default="", help="Service name or number to monitor (e.g. google, github, 2)")
    p.add_argument("--services", action="store_true", help="Show list of available services")
    p.add_argument("--delay", type=int, default=DEFAULT_DELAY_MINUTES, help="Delay between checks in minutes")
    p.add_argument(
        "--threshold",
        type=int,
        default=DEFAULT_OUTAGE_THRESHOLD,
        help="Consecutive failures before an outage is reported",
    )
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S, help="Per-request timeout in seconds")
    p.add_argument("--no-desktop", action="store_true", help="Disable desktop notifications")
    p.add_argument("--icon", default=None, help="Icon for desktop notifications")
    p.add_argument("--align-minute", action="store_true", help="Wait for the next full minute before the first round")
    p.add_argument("--log-dir", default=None, help="Also write daily rotating logs to this directory")
    p.add_argument("--debug", action="store_true", help="Verbose console logging")
    return p


def config_from_args(args: argparse.Namespace) -> MonitorConfig:
    return MonitorConfig(
        service=args.service,
        delay_minutes=args.delay,
        threshold=args.threshold,
        timeout_s=args.timeout,
        desktop_notifications=not args.no_desktop,
        icon_path=args.icon,
        align_to_minute=args.align_minute,
    )


def build_notifier(config: MonitorConfig) -> NotifierGroup:
    notifiers = [ConsoleNotifier()]
    if config.desktop_notifications:
        notifiers.append(DesktopNotifier(PROGRAM_NAME, config.icon_path))
    return NotifierGroup(notifiers)


async def run(config: MonitorConfig, rounds: int | None = None) -> None:
    """Own the HTTP client for the lifetime of the monitor."""
    async with httpx.AsyncClient(timeout=config.timeout_s, follow_redirects=True) as client:
        state = MonitorState(
            service=config.service,
            fetcher=StatsFetcher(client),
            tracker=OutageTracker(threshold=config.threshold, datacenters=config.datacenters),
            notifier=build_notifier(config),
            datacenters=config.datacenters,
            delay_minutes=config.delay_minutes,
            align_to_minute=config.align_to_minute,
        )
        await run_monitor(state, rounds=rounds)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.services:
        print(format_services())
        return 0

    try:
        config = config_from_args(args)
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    logger = setup_logging(args.log_dir, debug=args.debug)
    print(PROGRAM_NAME)
    print(f"✅ Monitoring service: {capitalize_first(config.service)}\n")
    logger.info("radarwatch started (service=%s)", config.service)
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        pass
    logging.getLogger("radarwatch").info("radarwatch stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
