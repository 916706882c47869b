"""Key reference shown as a selectable list."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

# (key display, description, key replayed into the table when selected)
HELP_ITEMS: list[tuple[str, str, str]] = [
    ("↑ ↓ ← →", "Move the selection", ""),
    ("Enter", "Edit the selected cell", "enter"),
    ("o", "Order by the selected column, ascending", "o"),
    ("O", "Order by the selected column, descending", "O"),
    ("i", "Increment the selected value", "i"),
    ("I", "Decrement the selected value", "I"),
    ("n", "Create a new entry", "n"),
    (":", "Open the command prompt", ":"),
    ("b", "Open the selected value externally", "b"),
    ("s", "Save the dataset", "s"),
    ("Esc", "Leave the prompt without changes", ""),
    ("F1", "This help", ""),
    ("Ctrl+Q", "Quit", ""),
    (":create-new-entry KEY", "Insert an entry with primary key KEY", ""),
    (":switch-table NAME", "Show another table", ""),
]


class HelpScreen(ModalScreen[str]):
    """Dismisses with the key of the selected item, or "" if none applies."""

    BINDINGS = [("escape", "close", "Close")]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }
    #help-container {
        width: 72;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #help-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    #help-list {
        height: auto;
        max-height: 100%;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="help-container"):
            yield Static("[bold]Keys[/bold]  (Enter to run)", id="help-title")
            options = [
                Option(f"  {key_display:<24} {desc}", id=f"help-{idx}")
                for idx, (key_display, desc, _) in enumerate(HELP_ITEMS)
            ]
            yield OptionList(*options, id="help-list")

    def on_mount(self) -> None:
        self.query_one("#help-list", OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(HELP_ITEMS[event.option_index][2])

    def action_close(self) -> None:
        self.dismiss("")
