"""Grid layout and incremental node placement for the relationship graph."""

import logging
import math
from typing import Optional, Sequence

from query_workbench.models.config import LayoutConfig
from query_workbench.models.graph import EdgeSegment, GraphNode
from query_workbench.models.schema import RelationshipEdge, SchemaTable

logger = logging.getLogger(__name__)


def grid_dimensions(count: int) -> tuple[int, int]:
    """
    Grid size for ``count`` nodes.

    Returns:
        (columns, rows) with columns = ceil(sqrt(count)) and
        rows = ceil(count / columns); (0, 0) for no nodes
    """
    if count <= 0:
        return (0, 0)

    columns = math.isqrt(count)
    if columns * columns < count:
        columns += 1
    rows = math.ceil(count / columns)
    return (columns, rows)


def initial_layout(
    table_names: Sequence[str], config: LayoutConfig
) -> dict[str, tuple[float, float]]:
    """
    Place tables on a grid spanning the canvas.

    Each node's box (not its anchor) is centered in its cell, so positions are
    the cell center minus half the node footprint.

    Args:
        table_names: Tables in display order
        config: Canvas and node geometry

    Returns:
        Mapping of table name to (x, y)
    """
    columns, rows = grid_dimensions(len(table_names))
    if columns == 0:
        return {}

    cell_width = config.canvas_width / columns
    cell_height = config.canvas_height / rows

    positions = {}
    for index, name in enumerate(table_names):
        col = index % columns
        row = index // columns
        positions[name] = (
            col * cell_width + cell_width / 2 - config.node_width / 2,
            row * cell_height + cell_height / 2 - config.node_height / 2,
        )
    return positions


class GraphLayoutEngine:
    """Holds node positions for the schema graph across refreshes.

    The grid layout runs only while no position is known. After that,
    surviving nodes keep wherever they were placed or moved; positions of
    tables that disappear from the schema are dropped on refresh.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()
        self._tables: list[str] = []
        self._edges: list[RelationshipEdge] = []
        self._positions: dict[str, tuple[float, float]] = {}

    @property
    def has_layout(self) -> bool:
        return bool(self._positions)

    def refresh(
        self, tables: Sequence[SchemaTable], edges: Sequence[RelationshipEdge]
    ) -> list[GraphNode]:
        """
        Take in a new table and edge set.

        Args:
            tables: Current schema
            edges: Current inferred relationships

        Returns:
            Positioned nodes after the refresh
        """
        self._tables = [table.name for table in tables]
        self._edges = list(edges)

        current = set(self._tables)
        stale = [name for name in self._positions if name not in current]
        for name in stale:
            del self._positions[name]
        if stale:
            logger.debug(f"Pruned {len(stale)} stale node positions: {stale}")

        if not self.has_layout and self._tables:
            self._positions = initial_layout(self._tables, self.config)
            columns, rows = grid_dimensions(len(self._tables))
            logger.debug(
                f"Laid out {len(self._tables)} tables on a {columns}x{rows} grid"
            )

        return self.nodes()

    def clear(self) -> None:
        """Forget all positions; the next refresh lays the grid out again."""
        self._positions.clear()

    def move(self, table: str, dx: float, dy: float) -> GraphNode:
        """
        Apply one drag displacement to a node and commit it immediately.

        Args:
            table: Table being dragged
            dx: Horizontal displacement since the previous event
            dy: Vertical displacement since the previous event

        Returns:
            The node at its new position

        Raises:
            ValueError: If the table has no position
        """
        if table not in self._positions:
            raise ValueError(f"Table has no position: {table}")

        x, y = self._positions[table]
        self._positions[table] = (x + dx, y + dy)
        return self._node(table)

    def position_of(self, table: str) -> Optional[GraphNode]:
        """Get the node for a table, or None if unpositioned."""
        if table not in self._positions:
            return None
        return self._node(table)

    def nodes(self) -> list[GraphNode]:
        """Positioned nodes in schema order."""
        return [self._node(name) for name in self._tables if name in self._positions]

    def unpositioned(self) -> list[str]:
        """Tables in the schema that have no position yet."""
        return [name for name in self._tables if name not in self._positions]

    def edge_segments(self) -> list[EdgeSegment]:
        """
        Lines for edges whose endpoints are both positioned.

        Edges touching an unpositioned table are skipped.
        """
        half_width = self.config.node_width / 2
        anchor_y = self.config.edge_anchor_y

        segments = []
        for edge in self._edges:
            start = self._positions.get(edge.from_table)
            end = self._positions.get(edge.to_table)
            if start is None or end is None:
                continue
            segments.append(
                EdgeSegment(
                    from_table=edge.from_table,
                    to_table=edge.to_table,
                    x1=start[0] + half_width,
                    y1=start[1] + anchor_y,
                    x2=end[0] + half_width,
                    y2=end[1] + anchor_y,
                )
            )
        return segments

    def _node(self, table: str) -> GraphNode:
        x, y = self._positions[table]
        return GraphNode(table=table, x=x, y=y)
