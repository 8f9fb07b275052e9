from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .exceptions import DeserializationError, SerializationError
from .handlers import FileHandler, resolve_handler
from .utils import with_extension

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _adapter_for(model: Any) -> TypeAdapter:
    if isinstance(model, TypeAdapter):
        return model
    return TypeAdapter(model)


class Entry(Generic[T]):
    """A single typed value backed by exactly one file.

    Parameters
    ----------
    path:
        Location of the backing file. The handler's extension is appended
        when the path does not already carry one of its extensions.
    value:
        Initial in-memory value. Nothing is read or written on construction;
        use :meth:`load` to materialize an entry from disk.
    model:
        Type of the value, or a prepared ``TypeAdapter``. Used to validate
        decoded data and to dump the value for the handler.
    format:
        Handler name (``"json"``, ``"yaml"``) or a :class:`FileHandler`.

    The in-memory value is authoritative. The file reflects the value as of
    the last successful :meth:`save`.
    """

    def __init__(
        self,
        path: Path | str,
        value: T,
        *,
        model: Any = Any,
        format: str | FileHandler = "json",
    ) -> None:
        self._handler = resolve_handler(format)
        self._adapter = _adapter_for(model)
        self.path = with_extension(path, self._handler)
        self.value = value

    @classmethod
    def load(
        cls,
        path: Path | str,
        default: T,
        *,
        model: Any = Any,
        format: str | FileHandler = "json",
    ) -> "Entry[T]":
        """Load the entry at ``path``, falling back to ``default``.

        Existing content is read before anything is written. A missing,
        empty or undecodable file yields ``default``, which is then saved so
        the backing file exists afterwards.
        """
        entry = cls(path, default, model=model, format=format)
        try:
            entry.value = entry._read()
        except FileNotFoundError:
            logger.debug("No file at %s, adopting default", entry.path)
        except DeserializationError as exc:
            logger.warning("Replacing unreadable %s with default: %s", entry.path, exc)
        else:
            logger.debug("Loaded %s", entry.path)
            return entry
        entry.save()
        return entry

    def get(self) -> T:
        return self.value

    def save(self) -> None:
        """Overwrite the backing file with the current value.

        The value is dumped in pydantic's python mode, so the handler sees
        native objects such as ``date``. Types the handler cannot encode
        (``set`` or ``Decimal`` for JSON) raise :class:`SerializationError`.
        """
        try:
            data = self._adapter.dump_python(self.value)
        except PydanticSerializationError as exc:
            raise SerializationError(f"Cannot serialize value for {self.path}: {exc}") from exc
        self._handler.write(self.path, data)
        logger.debug("Saved %s", self.path)

    def replace(self, value: T) -> None:
        """Set the in-memory value, then save it."""
        self.value = value
        self.save()

    def delete(self) -> None:
        """Remove the backing file. The in-memory value is left untouched."""
        self.path.unlink()
        logger.debug("Deleted %s", self.path)

    def _read(self) -> T:
        if self.path.stat().st_size == 0:
            raise DeserializationError(f"{self.path} is empty")
        data = self._handler.read(self.path)
        try:
            return self._adapter.validate_python(data)
        except ValidationError as exc:
            raise DeserializationError(f"Invalid data in {self.path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={str(self.path)!r}, value={self.value!r})"
