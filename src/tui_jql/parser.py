"""Decode stored datasets into a Database."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any

from tui_jql.errors import InvalidValue, LoadError
from tui_jql.models import ENTRY_TYPES, ColumnSchema, Database, Table
from tui_jql.storage import Store, get_store

logger = logging.getLogger(__name__)

# Top-level key holding "table.column" -> column description
SCHEMATA_KEY = "_schemata"


def _parse_column(qualified: str, spec: Any) -> tuple[str, ColumnSchema]:
    """Parse one ``_schemata`` item into (table name, column)."""
    table_name, sep, column_name = qualified.partition(".")
    if not sep or not table_name or not column_name:
        raise LoadError(f"invalid schema key: {qualified!r} (use table.column)")
    if spec is None:
        spec = {}
    if not isinstance(spec, dict):
        raise LoadError(f"schema for {qualified} must be a mapping")

    type_name = str(spec.get("type", "string"))
    if type_name not in ENTRY_TYPES:
        raise LoadError(f"unknown type {type_name!r} for {qualified}")

    values = spec.get("values", [])
    if not isinstance(values, list):
        raise LoadError(f"values for {qualified} must be a list")
    if type_name == "enum" and not values:
        raise LoadError(f"enum column {qualified} needs values")

    column = ColumnSchema(
        name=column_name,
        type=type_name,
        primary=bool(spec.get("primary", False)),
        values=tuple(str(v) for v in values),
    )
    return table_name, column


def _parse_rows(table: Table, rows: Any) -> None:
    if rows is None:
        return
    if not isinstance(rows, dict):
        raise LoadError(f"rows of table {table.name} must be a mapping")

    primary = table.primary
    for pk, cells in rows.items():
        if cells is None:
            cells = {}
        if not isinstance(cells, dict):
            raise LoadError(f"{table.name}[{pk}] must be a mapping")
        unknown = set(cells) - set(table.column_names)
        if unknown:
            logger.warning(
                "Ignoring unknown columns in %s[%s]: %s",
                table.name, pk, ", ".join(sorted(map(str, unknown))),
            )
        row = []
        try:
            for idx, col in enumerate(table.columns):
                if idx == primary:
                    row.append(col.parse(str(pk)))
                else:
                    row.append(col.from_raw(cells.get(col.name)))
        except InvalidValue as e:
            raise LoadError(f"{table.name}[{pk}]: {e}") from e
        key = row[primary].format()
        if key in table.entries:
            raise LoadError(f"{table.name}: duplicate primary key {key!r}")
        table.entries[key] = row


def decode(raw: Any) -> Database:
    """Build a Database from a decoded document."""
    if not isinstance(raw, dict):
        raise LoadError("dataset must be a mapping of tables")
    schemata = raw.get(SCHEMATA_KEY) or {}
    if not isinstance(schemata, dict):
        raise LoadError(f"{SCHEMATA_KEY} must be a mapping")

    db = Database()
    for qualified, spec in schemata.items():
        table_name, column = _parse_column(str(qualified), spec)
        table = db.tables.setdefault(table_name, Table(name=table_name))
        if column.name in table.column_names:
            raise LoadError(f"duplicate column {qualified}")
        table.columns.append(column)

    for table in db.tables.values():
        primaries = [col.name for col in table.columns if col.primary]
        if len(primaries) != 1:
            raise LoadError(
                f"table {table.name} must have exactly one primary column"
            )
        _parse_rows(table, raw.get(table.name))

    for name in raw:
        if name != SCHEMATA_KEY and name not in db.tables:
            logger.warning("Ignoring table without schema: %s", name)

    return db


def load(stream: IO[str], store: Store) -> Database:
    """Read a Database from a text stream using ``store``."""
    return decode(store.read(stream))


def load_database(path: Path) -> Database:
    """Load the dataset at ``path``; the store is picked from the file suffix."""
    store = get_store(path)
    with open(path, encoding="utf-8") as f:
        db = load(f, store)
    logger.info("Loaded %s (%d tables)", path, len(db.tables))
    return db
