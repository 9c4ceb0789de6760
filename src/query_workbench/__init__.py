"""
query_workbench - ephemeral SQLite query workbench

Runs statements against an in-memory SQLite database, reflects its schema,
infers table relationships from *_id column names and keeps a movable layout
of the relationship graph.
"""

__version__ = "0.1.0"

from query_workbench.core import (
    EngineSession,
    GraphLayoutEngine,
    RelationshipInferencer,
    SchemaReflector,
    StatementExecutor,
    Workbench,
)
from query_workbench.exceptions import (
    EngineInitError,
    QueryExecutionError,
    ReflectionError,
    SnapshotError,
    WorkbenchError,
)
from query_workbench.models import (
    GraphNode,
    QueryResult,
    RelationshipEdge,
    SchemaColumn,
    SchemaTable,
    WorkbenchConfig,
)

__all__ = [
    "Workbench",
    "EngineSession",
    "StatementExecutor",
    "SchemaReflector",
    "RelationshipInferencer",
    "GraphLayoutEngine",
    "WorkbenchConfig",
    "QueryResult",
    "SchemaTable",
    "SchemaColumn",
    "RelationshipEdge",
    "GraphNode",
    "WorkbenchError",
    "EngineInitError",
    "QueryExecutionError",
    "ReflectionError",
    "SnapshotError",
]
