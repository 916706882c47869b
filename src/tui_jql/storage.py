"""Byte-level stores that read and write decoded dataset documents."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any

import yaml

from tui_jql.errors import LoadError, UnsupportedFileType


class Store(ABC):
    """Reads and writes a plain document (dicts, lists, scalars) to a text stream."""

    suffixes: tuple[str, ...] = ()

    @abstractmethod
    def read(self, stream: IO[str]) -> Any:
        """Decode a document from ``stream``."""

    @abstractmethod
    def write(self, data: Any, stream: IO[str]) -> None:
        """Encode ``data`` to ``stream``."""


class JSONStore(Store):
    suffixes = (".json",)

    def read(self, stream: IO[str]) -> Any:
        try:
            return json.load(stream)
        except json.JSONDecodeError as e:
            raise LoadError(f"invalid JSON: {e}") from e

    def write(self, data: Any, stream: IO[str]) -> None:
        json.dump(data, stream, indent=4, ensure_ascii=False)
        stream.write("\n")


class YAMLStore(Store):
    suffixes = (".yaml", ".yml")

    def read(self, stream: IO[str]) -> Any:
        try:
            return yaml.safe_load(stream)
        except yaml.YAMLError as e:
            raise LoadError(f"invalid YAML: {e}") from e

    def write(self, data: Any, stream: IO[str]) -> None:
        yaml.safe_dump(data, stream, sort_keys=False, allow_unicode=True)


STORES: list[Store] = [JSONStore(), YAMLStore()]


def get_store(path: Path | str) -> Store:
    """Pick the store for a dataset path by its suffix."""
    suffix = Path(path).suffix.lower()
    for store in STORES:
        if suffix in store.suffixes:
            return store
    raise UnsupportedFileType("unknown file type")
