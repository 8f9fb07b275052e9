from __future__ import annotations

from pathlib import Path

from .handlers import FileHandler


def with_extension(path: Path | str, handler: FileHandler) -> Path:
    """Return ``path`` carrying one of the handler's extensions, lower-cased."""
    path = Path(path)
    extensions = handler.extensions or (handler.extension,)
    if path.suffix.lower() in extensions:
        return path.with_suffix(path.suffix.lower())
    return path.with_name(path.name + handler.extension)


def check_name(name: str) -> str:
    """Reject names that are not a single file name inside a directory."""
    if not name or name in (".", "..") or Path(name).name != name or "\\" in name:
        raise ValueError(f"Invalid entry name {name!r}")
    return name
