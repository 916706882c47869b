"""Single-line prompt used for commands and cell edits."""

from __future__ import annotations

from textual.binding import Binding
from textual.message import Message
from textual.suggester import SuggestFromList
from textual.widgets import Input

from tui_jql.prompt import command_suggestions


class PromptBar(Input):
    """Input with command completion. Enter submits, Escape cancels."""

    DEFAULT_CSS = """
    PromptBar {
        height: 1;
        border: none;
        padding: 0 1;
    }
    PromptBar:focus {
        border: none;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    class Cancelled(Message):
        """Emitted when the user abandons the prompt."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *, placeholder: str = "", id: str | None = None) -> None:
        super().__init__(
            placeholder=placeholder,
            suggester=SuggestFromList(command_suggestions(), case_sensitive=True),
            id=id,
        )
        # Pre-filled text is continued, not replaced
        self.select_on_focus = False

    def fill(self, text: str) -> None:
        """Replace the contents and put the cursor at the end."""
        self.value = text
        self.cursor_position = len(text)

    def action_cancel(self) -> None:
        self.post_message(self.Cancelled(self.value))
