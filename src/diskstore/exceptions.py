class StoreError(Exception):
    """Base exception for diskstore errors."""


class UnknownFormatError(StoreError):
    """Raised when a requested file format is not supported."""


class SerializationError(StoreError):
    """Raised when a value cannot be encoded for its file format."""


class DeserializationError(StoreError):
    """Raised when a file's contents cannot be decoded."""


class NotFoundError(StoreError, KeyError):
    """Raised when an operation addresses a name with no entry."""


class ConsistencyError(StoreError):
    """Raised when files on disk disagree with the in-memory entries."""
