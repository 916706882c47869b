"""Main Textual App for tui-jql."""

from __future__ import annotations

import os

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Input, Static

from tui_jql.commands import JQLCommandProvider
from tui_jql.controller import MainController, Mode
from tui_jql.screens.confirm_screen import ConfirmScreen
from tui_jql.screens.help_screen import HelpScreen
from tui_jql.widgets.prompt_bar import PromptBar
from tui_jql.widgets.table_grid import TableGrid


class JQLApp(App):
    """Renders a MainController and feeds it keys."""

    TITLE = "tui-jql"
    CSS = """
    #alert-bar {
        height: 1;
        padding: 0 1;
        display: none;
    }
    #alert-bar.-visible {
        display: block;
    }
    #alert-bar.-success {
        background: $success;
        color: $text;
    }
    #alert-bar.-failure {
        background: $error;
        color: $text;
    }
    """

    COMMANDS = App.COMMANDS | {JQLCommandProvider}

    BINDINGS = [
        Binding("f1", "help", "Help", priority=True),
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(self, controller: MainController, no_color: bool = False) -> None:
        if no_color:
            os.environ["NO_COLOR"] = "1"
        super().__init__()
        self.controller = controller
        self.no_color = no_color

    def compose(self) -> ComposeResult:
        yield Header()
        yield TableGrid(id="grid")
        yield Static("", id="alert-bar")
        yield PromptBar(placeholder="Press : for commands", id="prompt-bar")
        yield Footer()

    def on_mount(self) -> None:
        self._sync_layout()

    # ── Render pass ──

    def _sync_layout(self) -> None:
        """Bring every widget in line with the controller state."""
        controller = self.controller
        prompt = self.query_one("#prompt-bar", PromptBar)
        grid = self.query_one("#grid", TableGrid)
        alert_bar = self.query_one("#alert-bar", Static)

        if controller.consume_switch():
            prompt.value = ""

        grid.show(controller.view, controller.revision, controller.sorted_column)

        alert = controller.alert if controller.mode is Mode.ALERT else None
        alert_bar.set_class(alert is not None, "-visible")
        alert_bar.set_class(alert is not None and not alert.is_failure, "-success")
        alert_bar.set_class(alert is not None and alert.is_failure, "-failure")
        alert_bar.update(alert.message if alert else "")

        if controller.mode in (Mode.PROMPT, Mode.EDIT):
            text = controller.take_prompt_text()
            if text:
                prompt.fill(text)
            prompt.disabled = False
            prompt.focus()
        else:
            prompt.disabled = True
            grid.focus()

        marker = " [*]" if controller.modified else ""
        self.sub_title = f"{controller.path.name} · {controller.table.name}{marker}"

    # ── Input ──

    def on_table_grid_key_pressed(self, event: TableGrid.KeyPressed) -> None:
        self.log(f"key {event.key!r} in {self.controller.mode.value}")
        self.controller.dispatch(event.key, event.character)
        self._sync_layout()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "prompt-bar":
            return
        event.stop()
        self.controller.prompt_exit(event.value, True)
        self._sync_layout()

    def on_prompt_bar_cancelled(self, event: PromptBar.Cancelled) -> None:
        event.stop()
        self.controller.cancel_prompt()
        self._sync_layout()

    # ── Actions ──

    def action_send_key(self, key: str) -> None:
        """Run a table key as if it had been typed on the grid."""
        self.controller.dispatch(key, key if len(key) == 1 else None)
        self._sync_layout()

    def action_help(self) -> None:
        if isinstance(self.screen, HelpScreen):
            self.screen.dismiss("")
            return
        self.push_screen(HelpScreen(), callback=self._on_help_action)

    def _on_help_action(self, key: str | None) -> None:
        if key:
            self.action_send_key(key)

    def action_quit(self) -> None:
        if isinstance(self.screen, ConfirmScreen):
            return
        if self.controller.modified:
            self.push_screen(
                ConfirmScreen("Unsaved changes. Quit anyway?"),
                callback=self._on_quit_confirmed,
            )
        else:
            self.exit()

    def _on_quit_confirmed(self, confirmed: bool | None) -> None:
        if confirmed:
            self.exit()
        else:
            self.notify("Press s to save", severity="information")
