"""Data models for TUI JQL: typed entries, tables and query parameters."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, ClassVar

from tui_jql.errors import (
    DuplicateKey,
    InvalidValue,
    UnknownColumn,
    UnknownEntry,
    UnknownTable,
    UnsupportedOperation,
)


class Entry(ABC):
    """A single typed cell value. Immutable: operations return new entries."""

    type_name: ClassVar[str] = ""

    @abstractmethod
    def format(self, style: str = "") -> str:
        """Render the value for display."""

    @abstractmethod
    def sort_key(self) -> tuple:
        """Key used to order rows by this entry."""

    def add(self, delta: int) -> Entry:
        raise UnsupportedOperation(f"cannot add to a {self.type_name} value")


@dataclass(frozen=True)
class String(Entry):
    value: str = ""

    type_name: ClassVar[str] = "string"

    def format(self, style: str = "") -> str:
        return self.value

    def sort_key(self) -> tuple:
        return (self.value,)


@dataclass(frozen=True)
class Integer(Entry):
    value: int = 0

    type_name: ClassVar[str] = "int"

    def format(self, style: str = "") -> str:
        return str(self.value)

    def sort_key(self) -> tuple:
        return (self.value,)

    def add(self, delta: int) -> Integer:
        return Integer(self.value + delta)


@dataclass(frozen=True)
class Date(Entry):
    """A calendar date. ``style`` is an optional strftime format."""

    value: date | None = None

    type_name: ClassVar[str] = "date"

    def format(self, style: str = "") -> str:
        if self.value is None:
            return ""
        if style:
            return self.value.strftime(style)
        return self.value.isoformat()

    def sort_key(self) -> tuple:
        # Empty dates sort first
        return (self.value is not None, self.value or date.min)

    def add(self, delta: int) -> Date:
        if self.value is None:
            raise UnsupportedOperation("cannot add to an empty date")
        return Date(self.value + timedelta(days=delta))


@dataclass(frozen=True)
class EnumEntry(Entry):
    """One choice out of a column's declared values, ordered by declaration."""

    choice: str
    choices: tuple[str, ...] = ()

    type_name: ClassVar[str] = "enum"

    def format(self, style: str = "") -> str:
        return self.choice

    def sort_key(self) -> tuple:
        try:
            return (self.choices.index(self.choice),)
        except ValueError:
            return (len(self.choices),)

    def add(self, delta: int) -> EnumEntry:
        if not self.choices:
            raise UnsupportedOperation("enum has no values to cycle through")
        try:
            index = self.choices.index(self.choice)
        except ValueError:
            index = -1 if delta > 0 else 0
        return EnumEntry(self.choices[(index + delta) % len(self.choices)], self.choices)


ENTRY_TYPES: dict[str, type[Entry]] = {
    String.type_name: String,
    Integer.type_name: Integer,
    Date.type_name: Date,
    EnumEntry.type_name: EnumEntry,
}


@dataclass(frozen=True)
class ColumnSchema:
    """Static description of a table column."""

    name: str
    type: str = "string"
    primary: bool = False
    values: tuple[str, ...] = ()  # allowed choices for enum columns

    def default(self) -> Entry:
        """Value used for cells missing from storage and for new entries."""
        if self.type == "int":
            return Integer(0)
        if self.type == "date":
            return Date(None)
        if self.type == "enum":
            return EnumEntry(self.values[0] if self.values else "", self.values)
        return String("")

    def parse(self, text: str) -> Entry:
        """Parse user-entered text into an entry of this column's type."""
        if self.type == "int":
            try:
                return Integer(int(text.strip()))
            except ValueError:
                raise InvalidValue(f"{self.name}: not an integer: {text!r}") from None
        if self.type == "date":
            text = text.strip()
            if not text:
                return Date(None)
            try:
                return Date(date.fromisoformat(text))
            except ValueError:
                raise InvalidValue(
                    f"{self.name}: invalid date {text!r} (use YYYY-MM-DD)"
                ) from None
        if self.type == "enum":
            if text not in self.values:
                raise InvalidValue(
                    f"{self.name}: {text!r} is not one of {', '.join(self.values)}"
                )
            return EnumEntry(text, self.values)
        return String(text)

    def from_raw(self, raw: Any) -> Entry:
        """Convert a value decoded by a store into an entry."""
        if raw is None:
            return self.default()
        if self.type == "int":
            if isinstance(raw, bool):
                raise InvalidValue(f"{self.name}: not an integer: {raw!r}")
            if isinstance(raw, int):
                return Integer(raw)
        elif self.type == "date":
            # YAML decodes unquoted dates and timestamps on its own
            if isinstance(raw, datetime):
                return Date(raw.date())
            if isinstance(raw, date):
                return Date(raw)
        return self.parse(str(raw))

    def to_raw(self, entry: Entry) -> Any:
        """Convert an entry into a value a store can encode."""
        if isinstance(entry, Integer):
            return entry.value
        if isinstance(entry, Date):
            return entry.format() or None
        return entry.format()


@dataclass(frozen=True)
class QueryParams:
    """Ordering applied to a table query. Empty ``order_by`` means primary key order."""

    order_by: str = ""
    descending: bool = False


@dataclass
class Table:
    """A named table of rows keyed by their formatted primary key."""

    name: str
    columns: list[ColumnSchema] = field(default_factory=list)
    entries: dict[str, list[Entry]] = field(default_factory=dict)

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    @property
    def primary(self) -> int:
        """Index of the primary key column."""
        for idx, col in enumerate(self.columns):
            if col.primary:
                return idx
        return 0

    def column_index(self, name: str) -> int:
        for idx, col in enumerate(self.columns):
            if col.name == name:
                return idx
        raise UnknownColumn(f"unknown column: {name}")

    def query(self, params: QueryParams) -> list[list[Entry]]:
        """Return copies of all rows ordered by ``params``.

        Ties on the ordering column are broken by primary key, so descending
        order is always the exact reverse of ascending order.
        """
        primary = self.primary
        index = self.column_index(params.order_by) if params.order_by else primary
        rows = sorted(
            self.entries.values(),
            key=lambda row: (row[index].sort_key(), row[primary].sort_key()),
            reverse=params.descending,
        )
        return [list(row) for row in rows]

    def _row(self, pk: str) -> list[Entry]:
        try:
            return self.entries[pk]
        except KeyError:
            raise UnknownEntry(f"no entry with primary key {pk!r}") from None

    def get(self, pk: str, column: str) -> Entry:
        return self._row(pk)[self.column_index(column)]

    def update(self, pk: str, column: str, text: str) -> None:
        """Parse ``text`` with the column's type and store it."""
        col = self.columns[self.column_index(column)]
        self.update_entry(pk, column, col.parse(text))

    def update_entry(self, pk: str, column: str, entry: Entry) -> None:
        """Store ``entry`` in a cell. Updating the primary column re-keys the row."""
        row = self._row(pk)
        idx = self.column_index(column)
        new_row = list(row)
        new_row[idx] = entry
        if idx != self.primary:
            self.entries[pk] = new_row
            return
        new_pk = entry.format()
        if new_pk != pk and new_pk in self.entries:
            raise DuplicateKey(f"entry with primary key {new_pk!r} already exists")
        del self.entries[pk]
        self.entries[new_pk] = new_row

    def insert(self, pk: str) -> str:
        """Add a row with default values keyed by ``pk``. Returns the stored key."""
        primary = self.primary
        key_entry = self.columns[primary].parse(pk)
        key = key_entry.format()
        if key in self.entries:
            raise DuplicateKey(f"entry with primary key {key!r} already exists")
        row = [col.default() for col in self.columns]
        row[primary] = key_entry
        self.entries[key] = row
        return key


@dataclass
class Database:
    """All tables loaded from a single dataset file."""

    tables: dict[str, Table] = field(default_factory=dict)

    def table(self, name: str) -> Table:
        try:
            return self.tables[name]
        except KeyError:
            raise UnknownTable(f"unknown table: {name}") from None


# ── Configuration ──

DEFAULT_COLUMN_WIDTH = 20
DEFAULT_HIDDEN_PREFIX = "_"


def default_open_command() -> str:
    """Platform command that opens a file or URL with its default handler."""
    if sys.platform == "darwin":
        return "open"
    if sys.platform == "win32":
        return "explorer"
    return "xdg-open"


@dataclass
class TableConfig:
    """Per-table display settings."""

    order_by: str = ""
    descending: bool = False
    column_widths: dict[str, int] = field(default_factory=dict)

    @property
    def params(self) -> QueryParams:
        return QueryParams(order_by=self.order_by, descending=self.descending)


@dataclass
class EditorConfig:
    """Editor settings stored next to the dataset."""

    column_width: int = DEFAULT_COLUMN_WIDTH
    open_command: str = field(default_factory=default_open_command)
    hidden_prefix: str = DEFAULT_HIDDEN_PREFIX
    backup: bool = False
    tables: dict[str, TableConfig] = field(default_factory=dict)

    def table(self, name: str) -> TableConfig:
        return self.tables.get(name) or TableConfig()

    def column_width_for(self, table: str, column: str) -> int:
        return self.table(table).column_widths.get(column, self.column_width)
