"""Exception hierarchy for TUI JQL."""

from __future__ import annotations


class JQLError(Exception):
    """Base class for all recoverable and construction errors."""


# ── Validation ──


class CommandError(JQLError):
    """A prompt command was unknown or got the wrong number of arguments."""


class UnsupportedOperation(JQLError):
    """An entry type does not support the requested operation."""


class InvalidValue(JQLError):
    """Text could not be parsed into an entry of the column's type."""


class NoSelection(JQLError):
    """A command needs a selected entry but the table is empty."""


# ── Table engine ──


class UnknownTable(JQLError):
    pass


class UnknownColumn(JQLError):
    pass


class UnknownEntry(JQLError):
    pass


class DuplicateKey(JQLError):
    pass


# ── Storage ──


class UnsupportedFileType(JQLError):
    pass


class LoadError(JQLError):
    """The dataset could not be decoded into a database."""
