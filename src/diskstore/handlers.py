from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import orjson
import yaml

from .exceptions import DeserializationError, SerializationError, UnknownFormatError


class FileHandler(ABC):
    """Abstract interface for translating between files and plain Python data."""

    extension: str
    extensions: tuple[str, ...] | None = None

    @abstractmethod
    def read(self, path: Path) -> Any:
        """Read the file and return the decoded payload."""

    @abstractmethod
    def write(self, path: Path, data: Any) -> None:
        """Persist a payload to disk, replacing any previous content."""


class JsonHandler(FileHandler):
    extension = ".json"
    extensions = (".json",)

    def read(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as fh:
            try:
                return json.load(fh)
            except ValueError as exc:
                raise DeserializationError(f"Invalid JSON in {path}: {exc}") from exc

    def write(self, path: Path, data: Any) -> None:
        try:
            payload = orjson.dumps(data, option=orjson.OPT_INDENT_2)
        except orjson.JSONEncodeError as exc:
            raise SerializationError(f"Cannot encode value for {path} as JSON: {exc}") from exc
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as fh:
            fh.write(payload)
            fh.write(b"\n")


class YamlHandler(FileHandler):
    extension = ".yaml"
    extensions = (".yaml", ".yml")

    def read(self, path: Path) -> Any:
        try:
            text = path.read_text(encoding="utf-8")
            loader = yaml.SafeLoader(text)
            try:
                # Comments or whitespace only: no document, unlike an explicit ``null``
                node = loader.get_single_node()
                if node is None:
                    raise DeserializationError(f"{path} holds no YAML document")
                return loader.construct_document(node)
            finally:
                loader.dispose()
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise DeserializationError(f"Invalid YAML in {path}: {exc}") from exc

    def write(self, path: Path, data: Any) -> None:
        try:
            text = yaml.safe_dump(data, allow_unicode=True, sort_keys=False)
        except yaml.YAMLError as exc:
            raise SerializationError(f"Cannot encode value for {path} as YAML: {exc}") from exc
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            fh.write(text)


FORMAT_REGISTRY: Mapping[str, type[FileHandler]] = {
    "json": JsonHandler,
    ".json": JsonHandler,
    "yaml": YamlHandler,
    "yml": YamlHandler,
    ".yaml": YamlHandler,
    ".yml": YamlHandler,
}


def resolve_handler(format: str | FileHandler) -> FileHandler:
    """Return a handler instance for a format name, or the handler itself."""
    if isinstance(format, FileHandler):
        return format
    try:
        handler_cls = FORMAT_REGISTRY[format.lower()]
    except KeyError as exc:
        raise UnknownFormatError(f"Unsupported format '{format}'") from exc
    return handler_cls()
