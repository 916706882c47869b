"""Editor configuration management using tomlkit."""

from __future__ import annotations

import logging
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from tui_jql.models import DEFAULT_COLUMN_WIDTH, EditorConfig, TableConfig

logger = logging.getLogger(__name__)

CONFIG_DIR = ".tui-jql"
CONFIG_FILE = "config.toml"


def get_config_path(dataset_path: Path) -> Path:
    """Config lives in ``.tui-jql/config.toml`` next to the dataset file."""
    return Path(dataset_path).resolve().parent / CONFIG_DIR / CONFIG_FILE


def _to_int(value: object, default: int) -> int:
    try:
        return max(1, int(value))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def load_config(dataset_path: Path) -> EditorConfig:
    """Load editor configuration for a dataset. Missing or broken files give defaults."""
    config_path = get_config_path(dataset_path)
    config = EditorConfig()

    if not config_path.exists():
        return config

    try:
        doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
    except (OSError, TOMLKitError):
        logger.warning("Ignoring unreadable config %s", config_path, exc_info=True)
        return config

    # [editor]
    editor = doc.get("editor", {})
    if isinstance(editor, dict):
        config.column_width = _to_int(editor.get("column_width"), DEFAULT_COLUMN_WIDTH)
        if "open_command" in editor:
            config.open_command = str(editor["open_command"])
        if "hidden_prefix" in editor:
            config.hidden_prefix = str(editor["hidden_prefix"])
        backup = editor.get("backup", False)
        if isinstance(backup, bool):
            config.backup = backup
        else:
            logger.warning("Ignoring non-boolean backup setting %r", backup)

    # [tables.<name>]
    tables = doc.get("tables", {})
    if isinstance(tables, dict):
        for name, data in tables.items():
            if isinstance(data, dict):
                config.tables[str(name)] = _parse_table(data, config.column_width)

    return config


def _parse_table(data: dict, column_width: int) -> TableConfig:
    table = TableConfig(
        order_by=str(data.get("order_by", "")),
        descending=bool(data.get("descending", False)),
    )
    widths = data.get("column_widths")
    if isinstance(widths, dict):
        table.column_widths = {
            str(k): _to_int(v, column_width) for k, v in widths.items()
        }
    return table


def save_config(dataset_path: Path, config: EditorConfig) -> Path:
    """Save editor configuration next to the dataset. Returns the written path."""
    config_path = get_config_path(dataset_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    doc = tomlkit.document()

    editor = tomlkit.table()
    editor.add("column_width", config.column_width)
    editor.add("open_command", config.open_command)
    editor.add("hidden_prefix", config.hidden_prefix)
    editor.add("backup", config.backup)
    doc.add("editor", editor)

    if config.tables:
        tables = tomlkit.table()
        for name, table_config in config.tables.items():
            table = tomlkit.table()
            table.add("order_by", table_config.order_by)
            table.add("descending", table_config.descending)
            if table_config.column_widths:
                widths = tomlkit.inline_table()
                for k, v in table_config.column_widths.items():
                    widths.append(k, v)
                table.add("column_widths", widths)
            tables.add(name, table)
        doc.add("tables", tables)

    config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
    return config_path
