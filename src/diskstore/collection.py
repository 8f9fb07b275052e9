from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Generic, Iterable, Iterator, List, Optional, TypeVar

from pydantic import TypeAdapter

from .entry import Entry
from .exceptions import ConsistencyError, NotFoundError
from .handlers import FileHandler, resolve_handler
from .utils import check_name, with_extension

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Collection(Generic[T]):
    """Directory of named values, one file per value.

    Parameters
    ----------
    path:
        Root directory where files live. Created automatically if missing.
    model:
        Type every stored value is validated against (``typing.Any`` by
        default). Anything pydantic can validate works, including
        ``BaseModel`` subclasses and containers such as ``dict[str, int]``.
    format:
        Named handler for the files (``"json"`` or ``"yaml"``), or a
        :class:`FileHandler` instance.

    The value type stays available as ``collection.model``.

    Only entries touched during the lifetime of the collection (saved or
    explicitly loaded) are held in memory. Files left in ``path`` by an
    earlier process stay invisible until :meth:`load` adopts them, and
    :meth:`all` reports them as a :class:`ConsistencyError`.
    """

    def __init__(
        self,
        path: Path | str,
        model: Any = Any,
        *,
        format: str | FileHandler = "json",
    ) -> None:
        self.model = model
        self.root = Path(path).expanduser()
        self.root.mkdir(parents=True, exist_ok=True)
        self._handler = resolve_handler(format)
        self._adapter = TypeAdapter(model)
        self._entries: dict[Path, Entry[T]] = {}

    # Name-based operations ---------------------------------------------
    def save(self, name: str, value: T) -> Path:
        """Store ``value`` under ``name``, replacing any previous value."""
        path = self.path_for(name)
        entry = self._entries.get(path)
        if entry is None:
            entry = Entry(path, value, model=self._adapter, format=self._handler)
            entry.save()
            self._entries[path] = entry
        else:
            entry.replace(value)
        return path

    def load(self, name: str, default: T) -> T:
        """Adopt the file for ``name`` from disk, or ``default`` if unreadable.

        An entry already held in memory is returned as is.
        """
        path = self.path_for(name)
        entry = self._entries.get(path)
        if entry is None:
            entry = Entry.load(path, default, model=self._adapter, format=self._handler)
            self._entries[path] = entry
        return entry.get()

    def get(self, name: str) -> Optional[T]:
        entry = self._entries.get(self.path_for(name))
        if entry is None:
            return None
        return entry.get()

    def all(self) -> List[T]:
        """Return the values of every stored file, ordered by file name."""
        values = []
        for path in sorted(self._iter_paths()):
            entry = self._entries.get(path)
            if entry is None:
                raise ConsistencyError(
                    f"File '{path.name}' in {self.root} has no loaded entry. "
                    "Use load() to adopt it."
                )
            values.append(entry.get())
        return values

    def delete(self, name: str) -> None:
        path = self.path_for(name)
        entry = self._entries.get(path)
        if entry is None:
            raise NotFoundError(f"No entry named '{name}' in {self.root}")
        entry.delete()
        del self._entries[path]
        if not any(True for _ in self._iter_paths()):
            shutil.rmtree(self.root)
            logger.info("Removed empty collection directory %s", self.root)

    # Introspection -----------------------------------------------------
    def path_for(self, name: str) -> Path:
        return with_extension(self.root / check_name(name), self._handler)

    def names(self) -> List[str]:
        return sorted(path.stem for path in self._entries)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            return self.path_for(name) in self._entries
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    # Internal helpers --------------------------------------------------
    def _iter_paths(self) -> Iterable[Path]:
        if not self.root.is_dir():
            return
        extensions = self._handler.extensions or (self._handler.extension,)
        for path in self.root.iterdir():
            if path.suffix.lower() in extensions and path.is_file():
                yield path
