# errors.py


class CacheSimError(Exception):
    """Base class for every error raised by the simulator."""


class ConfigurationError(CacheSimError):
    """Bad arguments, unreadable documents or an unusable configuration."""


class GeometryError(CacheSimError):
    """Cache geometry that does not yield integral bit counts."""


class TraceFormatError(CacheSimError):
    def __init__(self, message, index=None, line=None):
        if index is not None:
            message = f"trace entry {index}: {message}"
        elif line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.index = index
        self.line = line
