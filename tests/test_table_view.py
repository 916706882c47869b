"""Tests for the view projection."""

from tui_jql.table_view import Direction, TableView


def make_view() -> TableView:
    return TableView(
        header=["name", "age"],
        values=[["Al", "30"], ["Bo", "25"], ["Cy", "41"]],
        widths=[20, 20],
    )


class TestMove:
    def test_moves_one_cell(self):
        view = make_view()
        assert view.move(Direction.DOWN)
        assert view.move(Direction.RIGHT)
        assert view.get_selected() == (1, 1)
        assert view.selected_value() == "25"

    def test_edges_are_noops(self):
        view = make_view()
        assert not view.move(Direction.UP)
        assert not view.move(Direction.LEFT)
        view.select(2, 1)
        assert not view.move(Direction.DOWN)
        assert not view.move(Direction.RIGHT)
        assert view.get_selected() == (2, 1)

    def test_empty_view(self):
        view = TableView(header=["name"], values=[], widths=[20])
        for direction in Direction:
            assert not view.move(direction)
        assert view.get_selected() == (0, 0)
        assert view.selected_value() is None


class TestContents:
    def test_select_clamps(self):
        view = make_view()
        view.select(10, -3)
        assert view.get_selected() == (2, 0)

    def test_set_contents_clamps(self):
        view = make_view()
        view.select(2, 1)
        view.set_contents(["name", "age"], [["Al", "30"]])
        assert view.get_selected() == (0, 1)
        assert view.row_count == 1
        assert view.column_count == 2

    def test_set_contents_empty(self):
        view = make_view()
        view.select(1, 1)
        view.set_contents(["name", "age"], [])
        assert view.get_selected() == (0, 0)
