"""Core workbench functionality."""

from .executor import StatementExecutor
from .layout import GraphLayoutEngine, grid_dimensions, initial_layout
from .library import QueryLibrary
from .reflector import SchemaReflector
from .relationships import RelationshipInferencer
from .session import EngineSession
from .workbench import Workbench

__all__ = [
    "EngineSession",
    "StatementExecutor",
    "SchemaReflector",
    "RelationshipInferencer",
    "GraphLayoutEngine",
    "grid_dimensions",
    "initial_layout",
    "QueryLibrary",
    "Workbench",
]
