"""Encode a Database and write it back to its dataset file."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import IO, Any

from tui_jql.models import Database, Table
from tui_jql.parser import SCHEMATA_KEY
from tui_jql.storage import Store, get_store

logger = logging.getLogger(__name__)


def _encode_schemata(db: Database) -> dict[str, Any]:
    schemata: dict[str, Any] = {}
    for table in db.tables.values():
        for col in table.columns:
            spec: dict[str, Any] = {"type": col.type}
            if col.primary:
                spec["primary"] = True
            if col.values:
                spec["values"] = list(col.values)
            schemata[f"{table.name}.{col.name}"] = spec
    return schemata


def _encode_rows(table: Table) -> dict[str, Any]:
    """Encode rows keyed by primary key, in primary key order."""
    primary = table.primary
    rows = sorted(table.entries.items(), key=lambda item: item[1][primary].sort_key())
    encoded: dict[str, Any] = {}
    for pk, row in rows:
        encoded[pk] = {
            col.name: col.to_raw(entry)
            for idx, (col, entry) in enumerate(zip(table.columns, row))
            if idx != primary
        }
    return encoded


def encode(db: Database) -> dict[str, Any]:
    """Build the plain document stored for ``db``."""
    raw: dict[str, Any] = {SCHEMATA_KEY: _encode_schemata(db)}
    for name in sorted(db.tables):
        raw[name] = _encode_rows(db.tables[name])
    return raw


def dump(db: Database, stream: IO[str], store: Store) -> None:
    """Write ``db`` to a text stream using ``store``."""
    store.write(encode(db), stream)


def write_database(db: Database, path: Path, backup: bool = False) -> None:
    """Write ``db`` to ``path`` with optional backup and atomic replace.

    1. Copy the current file to ``<path>.bak`` (if requested and present)
    2. Dump to a temp file in the same directory
    3. Atomic rename (os.replace) temp -> target
    """
    target = Path(path)
    store = get_store(target)

    if backup and target.exists():
        bak_path = target.with_suffix(target.suffix + ".bak")
        try:
            bak_path.write_text(target.read_text(encoding="utf-8"), encoding="utf-8")
        except OSError:
            logger.warning("Could not write backup %s", bak_path, exc_info=True)

    target_dir = target.parent
    target_dir.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=target_dir, suffix=".tmp", prefix=".tui-jql-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            dump(db, f, store)
        os.replace(tmp_path, target)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
    logger.info("Wrote %s", target)
