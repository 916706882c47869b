"""Integration tests for the TUI app using Textual Pilot."""

import json

import pytest

from tui_jql.app import JQLApp
from tui_jql.controller import MainController, Mode
from tui_jql.parser import load_database
from tui_jql.screens.confirm_screen import ConfirmScreen
from tui_jql.screens.help_screen import HelpScreen
from tui_jql.widgets.prompt_bar import PromptBar
from tui_jql.widgets.table_grid import TableGrid


PAUSE = 0.1


@pytest.fixture
def dataset(tmp_path):
    path = tmp_path / "people.json"
    path.write_text(
        json.dumps({
            "_schemata": {
                "people.name": {"type": "string", "primary": True},
                "people.age": {"type": "int"},
                "pets.tag": {"type": "string", "primary": True},
            },
            "people": {"Al": {"age": 30}, "Bo": {"age": 25}},
            "pets": {"rex": {}},
        }),
        encoding="utf-8",
    )
    return path


def make_app(dataset) -> JQLApp:
    return JQLApp(MainController.open(dataset))


@pytest.mark.asyncio
async def test_app_starts(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        grid = app.query_one("#grid", TableGrid)
        assert grid.row_count == 2
        assert len(grid.columns) == 2
        assert grid.has_focus
        assert app.query_one("#prompt-bar", PromptBar).disabled
        assert "people" in app.sub_title


@pytest.mark.asyncio
async def test_arrow_keys_move_cursor(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("down", "right")
        await pilot.pause(delay=PAUSE)
        assert app.controller.view.get_selected() == (1, 1)
        grid = app.query_one("#grid", TableGrid)
        assert (grid.cursor_row, grid.cursor_column) == (1, 1)


@pytest.mark.asyncio
async def test_order_descending(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("right", "O")
        await pilot.pause(delay=PAUSE)
        grid = app.query_one("#grid", TableGrid)
        assert grid.get_row_at(0) == ["Al", "30"]
        assert str(grid.ordered_columns[1].label).startswith("age")


@pytest.mark.asyncio
async def test_edit_cell(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("right", "enter")
        await pilot.pause(delay=PAUSE)
        prompt = app.query_one("#prompt-bar", PromptBar)
        assert app.controller.mode is Mode.EDIT
        assert prompt.has_focus
        assert prompt.value == "30"
        prompt.value = "44"
        await pilot.press("enter")
        await pilot.pause(delay=PAUSE)
        assert app.controller.mode is Mode.TABLE
        assert app.query_one("#grid", TableGrid).get_row_at(0) == ["Al", "44"]
        assert app.sub_title.endswith("[*]")


@pytest.mark.asyncio
async def test_escape_cancels_edit(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("right", "enter")
        await pilot.pause(delay=PAUSE)
        app.query_one("#prompt-bar", PromptBar).value = "99"
        await pilot.press("escape")
        await pilot.pause(delay=PAUSE)
        assert app.controller.mode is Mode.TABLE
        assert app.query_one("#grid", TableGrid).get_row_at(0) == ["Al", "30"]
        assert app.query_one("#prompt-bar", PromptBar).value == ""


@pytest.mark.asyncio
async def test_new_entry_from_prompt(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("n")
        await pilot.pause(delay=PAUSE)
        prompt = app.query_one("#prompt-bar", PromptBar)
        assert prompt.value == "create-new-entry "
        await pilot.press("C", "y", "enter")
        await pilot.pause(delay=PAUSE)
        grid = app.query_one("#grid", TableGrid)
        assert grid.row_count == 3
        assert grid.cursor_row == 2


@pytest.mark.asyncio
async def test_failure_alert_shown_then_dismissed(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press(":")
        await pilot.pause(delay=PAUSE)
        app.query_one("#prompt-bar", PromptBar).value = "switch-table cars"
        await pilot.press("enter")
        await pilot.pause(delay=PAUSE)
        alert_bar = app.query_one("#alert-bar")
        assert app.controller.mode is Mode.ALERT
        assert alert_bar.has_class("-visible")
        assert alert_bar.has_class("-failure")
        await pilot.press("down")
        await pilot.pause(delay=PAUSE)
        assert app.controller.mode is Mode.TABLE
        assert not alert_bar.has_class("-visible")
        assert app.controller.view.get_selected() == (1, 0)


@pytest.mark.asyncio
async def test_switch_table(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press(":")
        await pilot.pause(delay=PAUSE)
        app.query_one("#prompt-bar", PromptBar).value = "switch-table pets"
        await pilot.press("enter")
        await pilot.pause(delay=PAUSE)
        grid = app.query_one("#grid", TableGrid)
        assert grid.get_row_at(0) == ["rex"]
        assert "pets" in app.sub_title


@pytest.mark.asyncio
async def test_save_shows_success(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("right", "i", "s")
        await pilot.pause(delay=PAUSE)
        assert app.query_one("#alert-bar").has_class("-success")
        assert load_database(dataset).table("people").get("Al", "age").format() == "31"


@pytest.mark.asyncio
async def test_help_modal(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("f1")
        await pilot.pause(delay=PAUSE)
        assert isinstance(app.screen, HelpScreen)
        app.screen.dismiss("O")
        await pilot.pause(delay=PAUSE)
        assert app.controller.params.descending is True


@pytest.mark.asyncio
async def test_quit_with_changes_asks(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("right", "i")
        await pilot.pause(delay=PAUSE)
        await pilot.press("ctrl+q")
        await pilot.pause(delay=PAUSE)
        assert isinstance(app.screen, ConfirmScreen)
        app.screen.dismiss(False)
        await pilot.pause(delay=PAUSE)
        assert not isinstance(app.screen, ConfirmScreen)
        assert app.is_running


@pytest.mark.asyncio
async def test_click_does_not_move_selection(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.click("#grid", offset=(2, 2))
        await pilot.pause(delay=PAUSE)
        assert app.controller.view.get_selected() == (0, 0)


@pytest.mark.asyncio
async def test_typing_continues_prefilled_value(dataset):
    app = make_app(dataset)
    async with app.run_test(size=(120, 40)) as pilot:
        await pilot.pause(delay=PAUSE)
        await pilot.press("right", "enter")
        await pilot.pause(delay=PAUSE)
        await pilot.press("1")
        await pilot.pause(delay=PAUSE)
        assert app.query_one("#prompt-bar", PromptBar).value == "301"
        await pilot.press("enter")
        await pilot.pause(delay=PAUSE)
        assert app.query_one("#grid", TableGrid).get_row_at(0) == ["Al", "301"]
