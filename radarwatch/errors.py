"""
Error taxonomy.
ConfigError is fatal at startup; FetchFailed and NotificationFailed are logged and the loop goes on.
"""


class RadarError(Exception):
    """Base for all radarwatch errors."""


class ConfigError(RadarError):
    pass


class FetchFailed(RadarError):
    """Statistics for one datacenter could not be retrieved this round."""

    def __init__(self, datacenter: str, cause: str):
        super().__init__(f"{cause} from [{datacenter}]")
        self.datacenter = datacenter
        self.cause = cause


class NotificationFailed(RadarError):
    def __init__(self, backend: str, cause: str):
        super().__init__(f"{backend} notification error: {cause}")
        self.backend = backend
        self.cause = cause
