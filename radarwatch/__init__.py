"""radarwatch - ArvanCloud radar outage notifier."""

__version__ = "0.1.0"
