class UciTapError(Exception):
    """Base class for errors that should end a run."""


class OutputError(UciTapError):
    """Raised when the output document cannot be encoded or written."""


class ConfigError(UciTapError):
    """Raised when a tap configuration file is missing fields or unreadable."""
