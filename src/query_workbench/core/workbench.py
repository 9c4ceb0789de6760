"""Facade tying the session, executor, reflector, inferencer and layout together."""

from typing import Optional

from query_workbench.core.executor import StatementExecutor
from query_workbench.core.layout import GraphLayoutEngine
from query_workbench.core.library import QueryLibrary
from query_workbench.core.reflector import SchemaReflector
from query_workbench.core.relationships import RelationshipInferencer
from query_workbench.core.session import EngineSession
from query_workbench.models.config import WorkbenchConfig
from query_workbench.models.graph import GraphNode
from query_workbench.models.query import QueryResult
from query_workbench.models.schema import RelationshipEdge, SchemaTable


class Workbench:
    """One workbench: a session plus everything derived from it."""

    def __init__(self, config: Optional[WorkbenchConfig] = None):
        self.config = config or WorkbenchConfig()
        self.session = EngineSession(self.config)
        self.executor = StatementExecutor(self.session)
        self.reflector = SchemaReflector(self.session)
        self.inferencer = RelationshipInferencer()
        self.layout = GraphLayoutEngine(self.config.layout)
        self.library = QueryLibrary()

    async def initialize(self) -> None:
        await self.session.initialize()

    async def execute(self, statement: str) -> QueryResult:
        return await self.executor.execute(statement)

    async def get_schema(self) -> list[SchemaTable]:
        return await self.reflector.get_schema()

    async def get_relationships(self) -> list[RelationshipEdge]:
        return self.inferencer.infer(await self.reflector.get_schema())

    async def refresh_graph(self) -> list[GraphNode]:
        """Re-read the schema and feed tables and edges to the layout."""
        tables = await self.reflector.get_schema()
        edges = self.inferencer.infer(tables)
        return self.layout.refresh(tables, edges)

    async def dispose(self) -> None:
        await self.session.dispose()

    async def __aenter__(self) -> "Workbench":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.dispose()
