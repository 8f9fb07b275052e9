"""
Disk-backed key-value storage with one file per value.

The public API centers around :class:`Collection`, which maps names to typed
values stored as individual files in a directory, and :class:`Entry`, the
single file-backed value it manages.
"""

from .collection import Collection
from .entry import Entry
from .exceptions import (
    ConsistencyError,
    DeserializationError,
    NotFoundError,
    SerializationError,
    StoreError,
    UnknownFormatError,
)
from .handlers import FileHandler, JsonHandler, YamlHandler

__all__ = (
    "Collection",
    "ConsistencyError",
    "DeserializationError",
    "Entry",
    "FileHandler",
    "JsonHandler",
    "NotFoundError",
    "SerializationError",
    "StoreError",
    "UnknownFormatError",
    "YamlHandler",
)
