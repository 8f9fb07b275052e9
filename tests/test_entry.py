from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pytest
from pydantic import BaseModel

from diskstore import Entry
from diskstore.exceptions import SerializationError


class Settings(BaseModel):
    name: str
    started: date
    retries: int = 3
    tags: list[str] = []


def test_entry_appends_extension(tmp_path: Path) -> None:
    assert Entry(tmp_path / "config", 1).path == tmp_path / "config.json"
    assert Entry(tmp_path / "config.json", 1).path == tmp_path / "config.json"
    assert Entry(tmp_path / "v1.2", 1).path == tmp_path / "v1.2.json"
    assert Entry(tmp_path / "config", 1, format="yaml").path == tmp_path / "config.yaml"
    assert Entry(tmp_path / "config.yml", 1, format="yaml").path == tmp_path / "config.yml"


def test_constructor_does_not_touch_disk(tmp_path: Path) -> None:
    entry = Entry(tmp_path / "config", {"a": 1})
    assert entry.get() == {"a": 1}
    assert not entry.path.exists()


def test_load_missing_file_adopts_default_and_creates_file(tmp_path: Path) -> None:
    entry = Entry.load(tmp_path / "config", {"debug": True})

    assert entry.get() == {"debug": True}
    assert entry.path.exists()
    assert json.loads(entry.path.read_text()) == {"debug": True}


def test_load_preserves_existing_content(tmp_path: Path) -> None:
    Entry(tmp_path / "greeting", "hello").save()

    entry = Entry.load(tmp_path / "greeting", "fallback", model=str)

    assert entry.get() == "hello"
    assert json.loads(entry.path.read_text()) == "hello"


def test_load_empty_file_adopts_default(tmp_path: Path) -> None:
    path = tmp_path / "counter.json"
    path.touch()

    entry = Entry.load(path, 0, model=int)

    assert entry.get() == 0
    assert json.loads(path.read_text()) == 0


def test_load_corrupt_file_adopts_default_with_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "counter.json"
    path.write_text("{not json")

    with caplog.at_level(logging.WARNING, logger="diskstore.entry"):
        entry = Entry.load(path, 7, model=int)

    assert entry.get() == 7
    assert json.loads(path.read_text()) == 7
    assert any("counter.json" in record.getMessage() for record in caplog.records)


def test_load_invalid_data_for_model_adopts_default(tmp_path: Path) -> None:
    path = tmp_path / "counter.json"
    path.write_text('"not a number"')

    entry = Entry.load(path, 5, model=int)

    assert entry.get() == 5


def test_load_validates_pydantic_model(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"name": "prod", "started": "2025-11-09", "tags": ["a"]}))
    default = Settings(name="default", started=date(2000, 1, 1))

    entry = Entry.load(path, default, model=Settings)

    value = entry.get()
    assert isinstance(value, Settings)
    assert value.name == "prod"
    assert value.started == date(2025, 11, 9)
    assert value.retries == 3
    assert value.tags == ["a"]


def test_replace_overwrites_file(tmp_path: Path) -> None:
    default = Settings(name="dev", started=date(2025, 1, 1))
    entry = Entry.load(tmp_path / "settings", default, model=Settings)

    entry.replace(Settings(name="prod", started=date(2025, 11, 9), retries=5))

    assert entry.get().name == "prod"
    data = json.loads(entry.path.read_text())
    assert data == {"name": "prod", "started": "2025-11-09", "retries": 5, "tags": []}

    reloaded = Entry.load(entry.path, default, model=Settings)
    assert reloaded.get() == entry.get()


def test_save_failure_keeps_previous_file(tmp_path: Path) -> None:
    entry = Entry.load(tmp_path / "items", [1, 2])

    with pytest.raises(SerializationError):
        entry.replace({1, 2, object()})

    assert json.loads(entry.path.read_text()) == [1, 2]


def test_delete_removes_file_but_keeps_value(tmp_path: Path) -> None:
    entry = Entry.load(tmp_path / "doomed", "bye")

    entry.delete()

    assert not entry.path.exists()
    assert entry.get() == "bye"

    with pytest.raises(FileNotFoundError):
        entry.delete()


def test_yaml_entry_roundtrip(tmp_path: Path) -> None:
    default = Settings(name="yaml", started=date(2025, 11, 9))
    entry = Entry.load(tmp_path / "settings", default, model=Settings, format="yaml")

    assert entry.path.suffix == ".yaml"
    assert "started: 2025-11-09" in entry.path.read_text()

    other = Settings(name="other", started=date(2000, 1, 1))
    reloaded = Entry.load(tmp_path / "settings", other, model=Settings, format="yaml")
    assert reloaded.get() == default


def test_load_non_utf8_yaml_adopts_default(tmp_path: Path) -> None:
    path = tmp_path / "counter.yaml"
    path.write_bytes(b"\xff\xfe\x00bad")

    entry = Entry.load(path, 7, model=int, format="yaml")

    assert entry.get() == 7
    assert path.read_text(encoding="utf-8").startswith("7")


def test_load_comment_only_yaml_adopts_default(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("# nothing here\n\n")

    entry = Entry.load(path, {"a": 1}, format="yaml")

    assert entry.get() == {"a": 1}


def test_load_explicit_yaml_null_is_kept(tmp_path: Path) -> None:
    Entry(tmp_path / "maybe", None, format="yaml").save()

    entry = Entry.load(tmp_path / "maybe", 5, model=Optional[int], format="yaml")

    assert entry.get() is None


def test_save_decimal_as_json_raises(tmp_path: Path) -> None:
    entry = Entry(tmp_path / "price", Decimal("1.50"))

    with pytest.raises(SerializationError):
        entry.save()
    assert not entry.path.exists()
