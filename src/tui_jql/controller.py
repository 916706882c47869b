"""Modal interaction controller.

The controller is the single owner of the interaction state: the current
mode, the query parameters, the view projection and the entries snapshot.
Renderers read that state once per frame and hand keys back through
``dispatch``; prompt completions come back through ``prompt_exit``.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from tui_jql.errors import CommandError, JQLError, NoSelection, UnknownTable
from tui_jql.models import Database, EditorConfig, Entry, QueryParams, Table
from tui_jql.parser import load_database
from tui_jql.prompt import CREATE_ENTRY, SWITCH_TABLE, parse_command
from tui_jql.table_view import Direction, TableView
from tui_jql.writer import write_database

logger = logging.getLogger(__name__)

ASCENDING_MARKER = " ▲"
DESCENDING_MARKER = " ▼"
NEW_ENTRY_STUB = f"{CREATE_ENTRY} "

# Errors a command may raise; each one ends up as a failure alert
COMMAND_ERRORS = (JQLError, OSError, subprocess.SubprocessError)


class Mode(Enum):
    """Which component interprets input."""

    TABLE = "table"  # navigation and single-key commands
    PROMPT = "prompt"  # free-text command entry
    ALERT = "alert"  # message shown; any key returns to TABLE
    EDIT = "edit"  # editing the value of a single cell


class AlertKind(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Alert:
    """A message for the alert line, tagged with its outcome."""

    kind: AlertKind
    message: str

    @classmethod
    def success(cls, message: str) -> Alert:
        return cls(AlertKind.SUCCESS, message)

    @classmethod
    def failure(cls, message: str) -> Alert:
        return cls(AlertKind.FAILURE, message)

    @property
    def is_failure(self) -> bool:
        return self.kind is AlertKind.FAILURE


ARROW_KEYS: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}

# character -> (method, args) for TABLE mode
TABLE_COMMANDS: dict[str, tuple[str, tuple]] = {
    "b": ("open_selected", ()),
    ":": ("open_prompt", ()),
    "o": ("order_by_selected", (False,)),
    "O": ("order_by_selected", (True,)),
    "i": ("increment", (1,)),
    "I": ("increment", (-1,)),
    "s": ("save_contents", ()),
    "n": ("new_entry", ()),
}


class MainController:
    """State machine mediating between keys, the view projection and a table."""

    def __init__(
        self,
        path: Path,
        database: Database,
        table_name: str,
        config: EditorConfig | None = None,
    ) -> None:
        self.path = Path(path)
        self.database = database
        self.config = config or EditorConfig()
        self.mode = Mode.TABLE
        self.params = QueryParams()
        self.view = TableView()
        self.entries: list[list[Entry]] = []
        self.alert: Alert | None = None
        self.prompt_text = ""
        self.switching = False  # set on mode change until the next render pass
        self.modified = False
        self.revision = 0  # bumped on every successful refresh
        self._columns: list[tuple[int, str]] = []  # (table index, name) of visible columns
        self._edit_target: tuple[str, str] | None = None
        self.table: Table
        self.load_table(table_name)

    @classmethod
    def open(
        cls,
        path: Path,
        table_name: str | None = None,
        config: EditorConfig | None = None,
    ) -> MainController:
        """Load the dataset at ``path`` and show ``table_name`` (first table if None)."""
        database = load_database(Path(path))
        if table_name is None:
            if not database.tables:
                raise UnknownTable("dataset has no tables")
            table_name = next(iter(database.tables))
        return cls(path, database, table_name, config)

    # ── Table & query ──

    @property
    def column_names(self) -> list[str]:
        """Names of the visible columns, in display order."""
        return [name for _, name in self._columns]

    @property
    def sorted_column(self) -> int | None:
        """Display index of the active sort column, if it is visible."""
        for idx, (_, name) in enumerate(self._columns):
            if name == self.params.order_by:
                return idx
        return None

    def load_table(self, name: str) -> None:
        """Show table ``name``. Hidden columns are filtered out here, once."""
        table = self.database.table(name)
        prefix = self.config.hidden_prefix
        columns = [
            (idx, col.name)
            for idx, col in enumerate(table.columns)
            if not (prefix and col.name.startswith(prefix))
        ]
        params = self.config.table(name).params
        if params.order_by and params.order_by not in table.column_names:
            logger.warning("Ignoring unknown order_by column %r for %s", params.order_by, name)
            params = QueryParams()
        rows = table.query(params)

        self.table = table
        self._columns = columns
        self.view = TableView(widths=[self.config.column_width_for(name, c) for _, c in columns])
        self._apply(params, rows)
        logger.debug("Loaded table %s (%d rows)", name, len(rows))

    def refresh(self, params: QueryParams | None = None) -> None:
        """Re-run the query and rebuild the view projection.

        Nothing is assigned unless the query succeeds.
        """
        params = self.params if params is None else params
        rows = self.table.query(params)
        self._apply(params, rows)

    def _apply(self, params: QueryParams, rows: list[list[Entry]]) -> None:
        header = []
        for _, name in self._columns:
            if name == params.order_by:
                name += DESCENDING_MARKER if params.descending else ASCENDING_MARKER
            header.append(name)
        values = [[row[idx].format() for idx, _ in self._columns] for row in rows]
        self.params = params
        self.entries = rows
        self.view.set_contents(header, values)
        self.revision += 1

    def _selected_key(self) -> tuple[str, str]:
        """Primary key and column name of the selected cell, from the entries snapshot."""
        if not self.entries or not self._columns:
            raise NoSelection("no entry selected")
        row, col = self.view.get_selected()
        pk = self.entries[row][self.table.primary].format()
        return pk, self._columns[col][1]

    def _select_entry(self, pk: str) -> None:
        primary = self.table.primary
        for row_idx, row in enumerate(self.entries):
            if row[primary].format() == pk:
                _, col = self.view.get_selected()
                self.view.select(row_idx, col)
                return

    # ── Modes & transient state ──

    def switch_mode(self, mode: Mode) -> None:
        """Change mode and flag the transition for the next render pass."""
        self.switching = True
        self.mode = mode

    def consume_switch(self) -> bool:
        """Return and clear the transition flag. Called once per render pass."""
        switching = self.switching
        self.switching = False
        return switching

    def take_prompt_text(self) -> str:
        """Return the text to pre-fill into the prompt line and forget it."""
        text = self.prompt_text
        self.prompt_text = ""
        return text

    def _fail(self, error: BaseException) -> None:
        message = str(error) or type(error).__name__
        logger.info("Alert: %s", message)
        self.alert = Alert.failure(message)
        self.switch_mode(Mode.ALERT)

    # ── Input ──

    def dispatch(self, key: str, character: str | None = None) -> bool:
        """Handle one key event. Returns True if the event was consumed.

        In ALERT mode the key first dismisses the alert and is then handled
        again in TABLE mode. PROMPT and EDIT mode input belongs to the prompt
        line and is not consumed here.
        """
        if self.mode is Mode.ALERT:
            self.switch_mode(Mode.TABLE)
            self.dispatch(key, character)
            return True
        if self.mode is not Mode.TABLE:
            return False
        try:
            return self._handle_table_key(key, character)
        except COMMAND_ERRORS as e:
            self._fail(e)
            return True

    def _handle_table_key(self, key: str, character: str | None) -> bool:
        direction = ARROW_KEYS.get(key)
        if direction is not None:
            self.view.move(direction)
            return True
        if key == "enter":
            self.start_edit()
            return True
        command = TABLE_COMMANDS.get(character or "")
        if command is None:
            return False
        method, args = command
        getattr(self, method)(*args)
        return True

    # ── Table mode commands (raise on failure; dispatch turns that into an alert) ──

    def open_selected(self) -> None:
        """Open the selected cell's text with the configured external command."""
        value = self.view.selected_value()
        if value is None:
            raise NoSelection("no entry selected")
        command = shlex.split(self.config.open_command)
        if not command:
            raise CommandError("no open command configured")
        logger.info("Running %s", [*command, value])
        subprocess.run([*command, value], capture_output=True, check=True)

    def open_prompt(self) -> None:
        self.prompt_text = ""
        self.switch_mode(Mode.PROMPT)

    def order_by_selected(self, descending: bool) -> None:
        if not self._columns:
            raise NoSelection("no column selected")
        _, col = self.view.get_selected()
        self.refresh(QueryParams(order_by=self._columns[col][1], descending=descending))

    def increment(self, delta: int) -> None:
        """Add ``delta`` to the selected entry. Written only if the type supports it."""
        pk, column = self._selected_key()
        entry = self.table.get(pk, column).add(delta)
        self.table.update_entry(pk, column, entry)
        self.modified = True
        self.refresh()
        if column == self.table.column_names[self.table.primary]:
            self._select_entry(entry.format())

    def start_edit(self) -> None:
        """Enter EDIT mode on the selected cell, remembering which entry it is."""
        self._edit_target = self._selected_key()
        self.prompt_text = self.view.selected_value() or ""
        self.switch_mode(Mode.EDIT)

    def save_contents(self) -> None:
        self.alert = self.save()
        self.switch_mode(Mode.ALERT)

    def new_entry(self) -> None:
        """Prompt for the primary key of a new entry."""
        self.prompt_text = NEW_ENTRY_STUB
        self.switch_mode(Mode.PROMPT)

    # ── Persistence ──

    def save(self) -> Alert:
        """Write the whole database back to its file."""
        try:
            write_database(self.database, self.path, backup=self.config.backup)
        except (OSError, JQLError) as e:
            logger.warning("Saving %s failed: %s", self.path, e)
            return Alert.failure(str(e))
        self.modified = False
        return Alert.success(f"Wrote {self.path}")

    # ── Prompt completion ──

    def prompt_exit(
        self, text: str, committed: bool, error: BaseException | None = None
    ) -> None:
        """Handle the end of prompt entry.

        Uncommitted text is ignored. Otherwise the text is written to the
        edit target (EDIT) or run as a command (PROMPT); the mode becomes
        TABLE, or ALERT if anything failed.
        """
        if not committed or self.mode not in (Mode.PROMPT, Mode.EDIT):
            return
        if error is not None:
            self._fail(error)
            return
        try:
            if self.mode is Mode.EDIT:
                self._commit_edit(text)
            else:
                self._run_command(text)
        except COMMAND_ERRORS as e:
            self._fail(e)
            return
        self.switch_mode(Mode.TABLE)

    def cancel_prompt(self) -> None:
        """Leave PROMPT or EDIT mode without doing anything."""
        if self.mode not in (Mode.PROMPT, Mode.EDIT):
            return
        self._edit_target = None
        self.prompt_text = ""
        self.switch_mode(Mode.TABLE)

    def _commit_edit(self, text: str) -> None:
        target, self._edit_target = self._edit_target, None
        if target is None:
            raise NoSelection("no entry selected")
        pk, column = target
        self.table.update(pk, column, text)
        self.modified = True
        self.refresh()
        if column == self.table.column_names[self.table.primary]:
            self._select_entry(self.table.columns[self.table.primary].parse(text).format())

    def _run_command(self, text: str) -> None:
        command = parse_command(text)
        if command.name == CREATE_ENTRY:
            self.create_entry(*command.args)
        elif command.name == SWITCH_TABLE:
            self.load_table(*command.args)

    def create_entry(self, pk: str) -> None:
        key = self.table.insert(pk)
        self.modified = True
        self.refresh()
        self._select_entry(key)
