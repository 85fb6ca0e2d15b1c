class DelverError(Exception):
    """Base exception for the delver project."""


class MalformedGridError(DelverError, ValueError):
    """Raised when a grid is not rectangular or otherwise unusable for a search."""


class ConfigError(DelverError, ValueError):
    """Raised for invalid generation settings (bad env values, unknown strategies)."""
