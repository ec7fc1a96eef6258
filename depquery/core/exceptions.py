"""depquery custom exceptions."""


class DepQueryError(Exception):
    """Base exception for depquery errors."""


class DecodeError(DepQueryError):
    """Error decoding the package record stream."""


class DepsFileNotFoundError(DepQueryError, FileNotFoundError):
    """Dependency file does not exist."""
