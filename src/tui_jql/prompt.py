"""Prompt line command grammar: ``<command> [args...]`` separated by whitespace."""

from __future__ import annotations

from dataclasses import dataclass

from tui_jql.errors import CommandError

CREATE_ENTRY = "create-new-entry"
SWITCH_TABLE = "switch-table"


@dataclass(frozen=True)
class CommandSpec:
    name: str
    arity: int
    usage: str


PROMPT_COMMANDS: dict[str, CommandSpec] = {
    CREATE_ENTRY: CommandSpec(CREATE_ENTRY, 1, f"{CREATE_ENTRY} <primary-key>"),
    SWITCH_TABLE: CommandSpec(SWITCH_TABLE, 1, f"{SWITCH_TABLE} <table>"),
}


@dataclass(frozen=True)
class Command:
    """A validated prompt command."""

    name: str
    args: tuple[str, ...]


def parse_command(text: str) -> Command:
    """Split and validate a committed prompt line.

    Raises CommandError for unknown commands (including an empty line) and
    for the wrong number of arguments.
    """
    parts = text.split()
    spec = PROMPT_COMMANDS.get(parts[0]) if parts else None
    if spec is None:
        raise CommandError(f"unknown command: {text}")
    args = tuple(parts[1:])
    if len(args) != spec.arity:
        plural = "" if spec.arity == 1 else "s"
        raise CommandError(f"{spec.name} takes {spec.arity} arg{plural}")
    return Command(spec.name, args)


def command_suggestions() -> list[str]:
    """Command stubs offered as completions on the prompt line."""
    return [f"{name} " for name in PROMPT_COMMANDS]
