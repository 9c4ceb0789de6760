"""Unit tests for the grid layout and node placement."""

import math

import pytest

from query_workbench.core.layout import (
    GraphLayoutEngine,
    grid_dimensions,
    initial_layout,
)
from query_workbench.models.config import LayoutConfig
from query_workbench.models.schema import RelationshipEdge, SchemaColumn, SchemaTable

pytestmark = pytest.mark.unit


def _tables(*names: str) -> list[SchemaTable]:
    return [
        SchemaTable(name=name, columns=[SchemaColumn(name="id", type="INTEGER")])
        for name in names
    ]


def _edge(source: str, target: str) -> RelationshipEdge:
    return RelationshipEdge(from_table=source, to_table=target)


class TestGridDimensions:
    @pytest.mark.parametrize("count", range(1, 65))
    def test_matches_ceil_sqrt(self, count: int):
        columns, rows = grid_dimensions(count)

        assert columns == math.ceil(math.sqrt(count))
        assert rows == math.ceil(count / columns)
        assert columns * rows >= count

    def test_known_sizes(self):
        assert grid_dimensions(1) == (1, 1)
        assert grid_dimensions(2) == (2, 1)
        assert grid_dimensions(4) == (2, 2)
        assert grid_dimensions(5) == (3, 2)
        assert grid_dimensions(10) == (4, 3)

    def test_empty(self):
        assert grid_dimensions(0) == (0, 0)


class TestInitialLayout:
    @pytest.mark.parametrize("count", [1, 2, 3, 5, 9, 10, 17, 40])
    def test_distinct_positions(self, count: int, layout_config: LayoutConfig):
        names = [f"t{i}" for i in range(count)]

        positions = initial_layout(names, layout_config)

        assert len(positions) == count
        assert len(set(positions.values())) == count

    def test_single_table_box_is_centered(self, layout_config: LayoutConfig):
        positions = initial_layout(["only"], layout_config)

        # Canvas center (600, 400) minus half the 200x200 node
        assert positions["only"] == (500.0, 300.0)

    def test_four_tables_fill_two_by_two(self, layout_config: LayoutConfig):
        positions = initial_layout(["a", "b", "c", "d"], layout_config)

        assert positions["a"] == (200.0, 100.0)
        assert positions["b"] == (800.0, 100.0)
        assert positions["c"] == (200.0, 500.0)
        assert positions["d"] == (800.0, 500.0)

    def test_row_major_order(self, layout_config: LayoutConfig):
        positions = initial_layout(["a", "b", "c", "d", "e"], layout_config)

        # 3 columns x 2 rows: a b c / d e
        assert positions["a"][1] == positions["b"][1] == positions["c"][1]
        assert positions["d"][1] == positions["e"][1]
        assert positions["d"][0] == positions["a"][0]
        assert positions["d"][1] > positions["a"][1]

    def test_no_tables(self, layout_config: LayoutConfig):
        assert initial_layout([], layout_config) == {}


class TestGraphLayoutEngine:
    def test_refresh_lays_out_once(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)

        nodes = engine.refresh(_tables("a", "b", "c"), [])

        assert [n.table for n in nodes] == ["a", "b", "c"]
        assert engine.has_layout

    def test_empty_schema_has_no_layout(self):
        engine = GraphLayoutEngine()

        assert engine.refresh([], []) == []
        assert not engine.has_layout

    def test_positions_survive_refresh(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a", "b"), [])
        moved = engine.move("a", 40, -15)

        engine.refresh(_tables("a", "b"), [])

        assert engine.position_of("a") == moved

    def test_new_table_stays_unpositioned(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a", "b"), [])
        before = {n.table: (n.x, n.y) for n in engine.nodes()}

        nodes = engine.refresh(_tables("a", "b", "c"), [])

        assert {n.table: (n.x, n.y) for n in nodes} == before
        assert engine.unpositioned() == ["c"]
        assert engine.position_of("c") is None

    def test_removed_table_is_pruned(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a", "b", "c"), [])

        nodes = engine.refresh(_tables("a", "c"), [])

        assert [n.table for n in nodes] == ["a", "c"]
        assert engine.position_of("b") is None

        # Coming back does not restore the old position
        engine.refresh(_tables("a", "b", "c"), [])
        assert engine.unpositioned() == ["b"]

    def test_full_replacement_relays_out(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a", "b"), [])

        nodes = engine.refresh(_tables("x", "y", "z"), [])

        assert [n.table for n in nodes] == ["x", "y", "z"]
        assert engine.unpositioned() == []

    def test_clear_relays_out(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a", "b"), [])
        engine.move("a", 100, 100)
        engine.refresh(_tables("a", "b", "c"), [])

        engine.clear()
        assert not engine.has_layout
        nodes = engine.refresh(_tables("a", "b", "c"), [])

        expected = initial_layout(["a", "b", "c"], layout_config)
        assert {n.table: (n.x, n.y) for n in nodes} == expected

    def test_move_accumulates_each_event(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a"), [])
        start = engine.position_of("a")
        assert start is not None

        engine.move("a", 10, 5)
        mid = engine.position_of("a")
        engine.move("a", -3, 2)
        end = engine.position_of("a")

        assert mid is not None and end is not None
        assert (mid.x, mid.y) == (start.x + 10, start.y + 5)
        assert (end.x, end.y) == (start.x + 7, start.y + 7)

    def test_move_unknown_table(self):
        engine = GraphLayoutEngine()
        engine.refresh(_tables("a"), [])

        with pytest.raises(ValueError, match="ghost"):
            engine.move("ghost", 1, 1)


class TestEdgeSegments:
    def test_anchor_points(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a", "b", "c", "d"), [_edge("a", "d")])

        (segment,) = engine.edge_segments()

        # a at (200, 100), d at (800, 500); anchors at x + 100, y + 20
        assert (segment.x1, segment.y1) == (300.0, 120.0)
        assert (segment.x2, segment.y2) == (900.0, 520.0)
        assert segment.to_contract()["from"] == "a"

    def test_segments_follow_moves(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a", "b"), [_edge("a", "b")])
        before = engine.edge_segments()[0]

        engine.move("b", 25, 0)
        after = engine.edge_segments()[0]

        assert after.x2 == before.x2 + 25
        assert after.x1 == before.x1

    def test_unpositioned_endpoint_skipped(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        engine.refresh(_tables("a", "b"), [])

        engine.refresh(
            _tables("a", "b", "c"), [_edge("a", "b"), _edge("c", "a")]
        )

        segments = engine.edge_segments()
        assert [(s.from_table, s.to_table) for s in segments] == [("a", "b")]

    def test_duplicates_and_self_loops_drawn(self, layout_config: LayoutConfig):
        engine = GraphLayoutEngine(layout_config)
        edges = [_edge("a", "b"), _edge("a", "b"), _edge("a", "a")]

        engine.refresh(_tables("a", "b"), edges)

        segments = engine.edge_segments()
        assert len(segments) == 3
        loop = segments[2]
        assert (loop.x1, loop.y1) == (loop.x2, loop.y2)
