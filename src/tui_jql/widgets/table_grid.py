"""Table grid widget based on DataTable."""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import DataTable

from tui_jql.table_view import TableView


class TableGrid(DataTable, inherit_bindings=False):
    """Read-only rendering of a TableView.

    The grid never moves its own cursor: keys are forwarded as KeyPressed
    messages and the cursor follows the view projection on each render pass.
    """

    DEFAULT_CSS = """
    TableGrid {
        height: 1fr;
    }
    """

    class KeyPressed(Message):
        """Emitted for every key pressed while the grid has focus."""

        def __init__(self, key: str, character: str | None) -> None:
            super().__init__()
            self.key = key
            self.character = character

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id, cursor_type="cell", zebra_stripes=True)
        self._revision = -1

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.post_message(self.KeyPressed(event.key, event.character))

    def on_click(self, event: events.Click) -> None:
        # Selection is owned by the controller
        event.prevent_default()

    def show(self, view: TableView, revision: int, sorted_column: int | None = None) -> None:
        """Draw ``view``. Rows are rebuilt only when ``revision`` changed."""
        if revision != self._revision:
            self._revision = revision
            self.clear(columns=True)
            for idx, (label, width) in enumerate(zip(view.header, view.widths)):
                style = "bold reverse" if idx == sorted_column else "bold"
                self.add_column(Text(label, style=style), width=width, key=str(idx))
            for row in view.values:
                self.add_row(*row)

        if not view.values:
            return
        row, col = view.get_selected()
        if (self.cursor_row, self.cursor_column) != (row, col):
            self.move_cursor(row=row, column=col, animate=False)
