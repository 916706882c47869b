"""Command Palette provider for tui-jql."""

from __future__ import annotations

from dataclasses import dataclass

from textual.command import Hit, Hits, Provider


@dataclass(frozen=True)
class CommandDef:
    """A single command entry for the palette."""

    display: str
    action: str
    help: str = ""
    category: str = ""


COMMANDS: list[CommandDef] = [
    # -- File --
    CommandDef("Save", "send_key('s')", "Write the dataset back to disk (s)", "File"),
    CommandDef("Quit", "quit", "Quit application (Ctrl+Q)", "File"),
    # -- Edit --
    CommandDef("Edit Cell", "send_key('enter')", "Edit the selected cell (Enter)", "Edit"),
    CommandDef("New Entry", "send_key('n')", "Create an entry with a new primary key (n)", "Edit"),
    CommandDef("Increment", "send_key('i')", "Increment the selected value (i)", "Edit"),
    CommandDef("Decrement", "send_key('I')", "Decrement the selected value (I)", "Edit"),
    # -- View --
    CommandDef("Order Ascending", "send_key('o')", "Order by the selected column (o)", "View"),
    CommandDef("Order Descending", "send_key('O')", "Order by the selected column, reversed (O)", "View"),
    CommandDef("Command Prompt", "send_key(':')", "Open the command prompt (:)", "View"),
    CommandDef("Open Value", "send_key('b')", "Open the selected value externally (b)", "View"),
    CommandDef("Help", "help", "Show keys (F1)", "View"),
]


class JQLCommandProvider(Provider):
    """Textual Command Palette provider for table actions."""

    async def discover(self) -> Hits:
        """Yield every command."""
        for cmd in COMMANDS:
            yield Hit(1.0, cmd.display, self._make_callback(cmd.action), help=cmd.help)

    async def search(self, query: str) -> Hits:
        """Search commands with fuzzy matching."""
        query = query.lower()
        for cmd in COMMANDS:
            searchable = f"{cmd.display} {cmd.help} {cmd.category}".lower()
            if self._fuzzy_match(query, searchable):
                yield Hit(
                    self._score(query, cmd.display.lower()),
                    cmd.display,
                    self._make_callback(cmd.action),
                    help=cmd.help,
                )

    def _make_callback(self, action: str):
        async def callback() -> None:
            await self.app.run_action(action)
        return callback

    @staticmethod
    def _fuzzy_match(query: str, text: str) -> bool:
        """Check if all characters of query appear in order in text."""
        it = iter(text)
        return all(ch in it for ch in query)

    @staticmethod
    def _score(query: str, text: str) -> float:
        """Score a match: higher is better (closer to 1.0)."""
        if not query:
            return 0.5
        if text == query:
            return 1.0
        if text.startswith(query):
            return 0.9
        if query in text:
            return 0.8
        return 0.7
