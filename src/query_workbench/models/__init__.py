"""Pydantic models for workbench results, schema and layout."""

from .config import LayoutConfig, WorkbenchConfig
from .graph import EdgeSegment, GraphNode
from .query import Cell, QueryResult
from .schema import RelationshipEdge, SchemaColumn, SchemaTable

__all__ = [
    "WorkbenchConfig",
    "LayoutConfig",
    "Cell",
    "QueryResult",
    "SchemaTable",
    "SchemaColumn",
    "RelationshipEdge",
    "GraphNode",
    "EdgeSegment",
]
