"""Tests for dataset writing and save/reload round trips."""

import io
import json
from datetime import date

import pytest
import yaml

from tui_jql.errors import UnsupportedFileType
from tui_jql.models import (
    ColumnSchema,
    Database,
    Date,
    EnumEntry,
    Integer,
    String,
    Table,
)
from tui_jql.parser import load_database
from tui_jql.storage import JSONStore
from tui_jql.writer import dump, encode, write_database


def make_db() -> Database:
    people = Table(
        name="people",
        columns=[
            ColumnSchema("name", "string", primary=True),
            ColumnSchema("age", "int"),
            ColumnSchema("status", "enum", values=("new", "done")),
            ColumnSchema("joined", "date"),
        ],
    )
    people.entries["Bo"] = [String("Bo"), Integer(25), EnumEntry("done", ("new", "done")), Date(None)]
    people.entries["Al"] = [String("Al"), Integer(30), EnumEntry("new", ("new", "done")), Date(date(2024, 1, 5))]
    return Database(tables={"people": people})


class TestEncode:
    def test_schemata(self):
        raw = encode(make_db())
        assert raw["_schemata"] == {
            "people.name": {"type": "string", "primary": True},
            "people.age": {"type": "int"},
            "people.status": {"type": "enum", "values": ["new", "done"]},
            "people.joined": {"type": "date"},
        }

    def test_rows_in_primary_key_order(self):
        raw = encode(make_db())
        assert list(raw["people"]) == ["Al", "Bo"]
        assert raw["people"]["Al"] == {"age": 30, "status": "new", "joined": "2024-01-05"}
        assert raw["people"]["Bo"]["joined"] is None

    def test_dump_json(self):
        buf = io.StringIO()
        dump(make_db(), buf, JSONStore())
        assert buf.getvalue().endswith("}\n")
        assert json.loads(buf.getvalue())["people"]["Bo"]["age"] == 25


class TestWriteDatabase:
    def test_json_round_trip(self, tmp_path):
        path = tmp_path / "data.json"
        db = make_db()
        write_database(db, path)
        assert load_database(path) == db

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / "data.yaml"
        db = make_db()
        write_database(db, path)
        assert yaml.safe_load(path.read_text(encoding="utf-8"))["people"]["Al"]["age"] == 30
        assert load_database(path) == db

    def test_no_temp_files_left(self, tmp_path):
        path = tmp_path / "data.json"
        write_database(make_db(), path)
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_backup(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("old", encoding="utf-8")
        write_database(make_db(), path, backup=True)
        assert (tmp_path / "data.json.bak").read_text(encoding="utf-8") == "old"

    def test_unknown_suffix(self, tmp_path):
        with pytest.raises(UnsupportedFileType):
            write_database(make_db(), tmp_path / "data.txt")
