"""Query workbench MCP server

A Model Context Protocol (MCP) server exposing an ephemeral, in-memory SQLite
workbench: statement execution, schema reflection, inferred table
relationships and a movable relationship graph.
"""

import asyncio
import base64
import binascii
import logging
import os
from typing import Any, Awaitable, Callable

from dotenv import load_dotenv
from mcp.server import Server
from mcp.types import TextContent, Tool

from query_workbench.core import Workbench
from query_workbench.exceptions import SnapshotError, WorkbenchError
from query_workbench.models.config import LayoutConfig, WorkbenchConfig
from query_workbench.utils import dumps

logger = logging.getLogger(__name__)

# Response size limits (in characters) for MCP tool responses
MAX_RESPONSE_SCHEMA = 8000
MAX_RESPONSE_RELATIONSHIPS = 3000
MAX_RESPONSE_GRAPH = 5000
MAX_RESPONSE_LIBRARY = 10000
MAX_RESPONSE_EXECUTE_QUERY = 10000
MAX_RESPONSE_STATUS = 2000

ToolHandler = Callable[[dict[str, Any]], Awaitable[list[TextContent]]]


def truncate_json_response(data: str, max_length: int) -> str:
    """
    Truncate JSON response to a maximum length.

    Args:
        data: JSON string to truncate
        max_length: Maximum length in characters

    Returns:
        Truncated JSON string with truncation notice if needed
    """
    if len(data) <= max_length:
        return data

    truncation_msg = (
        f"\n\n... [Response truncated: {len(data)} chars -> {max_length} chars]"
    )
    available_length = max_length - len(truncation_msg)

    if available_length < 100:
        return dumps(
            {
                "error": "Response too large",
                "original_size": len(data),
                "limit": max_length,
            },
            indent=True,
        )

    truncated = data[:available_length]

    # Prefer cutting at a line end near the limit
    last_newline = truncated.rfind("\n")
    if last_newline > available_length * 0.8:
        truncated = truncated[:last_newline]

    return truncated + truncation_msg


def _text(payload: Any, max_length: int) -> list[TextContent]:
    return [
        TextContent(
            type="text",
            text=truncate_json_response(dumps(payload, indent=True), max_length),
        )
    ]


def _object_schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


class WorkbenchMCPServer:
    """MCP server around a single workbench session."""

    def __init__(self, config: WorkbenchConfig):
        """
        Initialize workbench MCP server.

        Args:
            config: Workbench configuration
        """
        self.config = config
        self.workbench = Workbench(config)
        self.server = Server("query-workbench")

    async def initialize(self) -> None:
        """Start the engine and lay out the seed schema."""
        await self.workbench.initialize()
        nodes = await self.workbench.refresh_graph()
        logger.info(f"Initialized query workbench ({len(nodes)} tables)")

    def list_tools(self) -> list[Tool]:
        """Tools offered by this server."""
        return [
            Tool(
                name="execute_query",
                description="Execute one SQL statement against the workbench database",
                inputSchema=_object_schema(
                    {"query": {"type": "string", "description": "SQL statement"}},
                    ["query"],
                ),
            ),
            Tool(
                name="get_schema",
                description="List user tables with their columns",
                inputSchema=_object_schema({}, []),
            ),
            Tool(
                name="get_relationships",
                description="Table relationships inferred from *_id column names",
                inputSchema=_object_schema({}, []),
            ),
            Tool(
                name="get_graph",
                description="Positioned table nodes and drawable relationship edges",
                inputSchema=_object_schema({}, []),
            ),
            Tool(
                name="move_table",
                description="Move a table node by a displacement",
                inputSchema=_object_schema(
                    {
                        "table": {"type": "string", "description": "Table name"},
                        "dx": {"type": "number", "description": "Horizontal shift"},
                        "dy": {"type": "number", "description": "Vertical shift"},
                    },
                    ["table", "dx", "dy"],
                ),
            ),
            Tool(
                name="reset_layout",
                description="Discard node positions and lay the graph out again",
                inputSchema=_object_schema({}, []),
            ),
            Tool(
                name="export_snapshot",
                description="Export the whole database as base64 text",
                inputSchema=_object_schema({}, []),
            ),
            Tool(
                name="import_snapshot",
                description="Replace the database with a base64 snapshot",
                inputSchema=_object_schema(
                    {
                        "snapshot": {
                            "type": "string",
                            "description": "Base64 text from export_snapshot",
                        }
                    },
                    ["snapshot"],
                ),
            ),
            Tool(
                name="reset_database",
                description="Drop every user table",
                inputSchema=_object_schema({}, []),
            ),
            Tool(
                name="list_library_queries",
                description="Sample statements for the demonstration dataset",
                inputSchema=_object_schema(
                    {
                        "search": {
                            "type": "string",
                            "description": "Filter by name or description (optional)",
                        }
                    },
                    [],
                ),
            ),
        ]

    @property
    def handlers(self) -> dict[str, ToolHandler]:
        return {
            "execute_query": self.handle_execute_query,
            "get_schema": self.handle_get_schema,
            "get_relationships": self.handle_get_relationships,
            "get_graph": self.handle_get_graph,
            "move_table": self.handle_move_table,
            "reset_layout": self.handle_reset_layout,
            "export_snapshot": self.handle_export_snapshot,
            "import_snapshot": self.handle_import_snapshot,
            "reset_database": self.handle_reset_database,
            "list_library_queries": self.handle_list_library_queries,
        }

    async def dispatch(self, name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Route a tool call, reporting workbench errors as text."""
        handler = self.handlers.get(name)
        if handler is None:
            raise ValueError(f"Unknown tool: {name}")

        try:
            return await handler(arguments or {})
        except WorkbenchError as e:
            logger.warning(f"{name} failed: {e}")
            return _text(
                {"error": type(e).__name__, "message": str(e)}, MAX_RESPONSE_STATUS
            )

    # Tool handlers
    async def handle_execute_query(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle execute_query request."""
        result = await self.workbench.execute(arguments["query"])

        # Statements may change the schema; keep the graph in step
        if result.is_mutation:
            await self.workbench.refresh_graph()

        return _text(result.to_contract(), MAX_RESPONSE_EXECUTE_QUERY)

    async def handle_get_schema(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle get_schema request."""
        tables = await self.workbench.get_schema()
        return _text([t.to_contract() for t in tables], MAX_RESPONSE_SCHEMA)

    async def handle_get_relationships(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle get_relationships request."""
        edges = await self.workbench.get_relationships()
        return _text([e.to_contract() for e in edges], MAX_RESPONSE_RELATIONSHIPS)

    async def handle_get_graph(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle get_graph request."""
        nodes = await self.workbench.refresh_graph()
        return _text(self._graph_payload(nodes), MAX_RESPONSE_GRAPH)

    async def handle_move_table(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle move_table request."""
        layout = self.workbench.layout
        try:
            node = layout.move(
                arguments["table"], float(arguments["dx"]), float(arguments["dy"])
            )
        except ValueError as e:
            return _text({"error": "ValueError", "message": str(e)}, MAX_RESPONSE_STATUS)

        return _text(
            {
                "node": node.to_contract(),
                "edges": [s.to_contract() for s in layout.edge_segments()],
            },
            MAX_RESPONSE_GRAPH,
        )

    async def handle_reset_layout(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle reset_layout request."""
        self.workbench.layout.clear()
        nodes = await self.workbench.refresh_graph()
        return _text(self._graph_payload(nodes), MAX_RESPONSE_GRAPH)

    async def handle_export_snapshot(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle export_snapshot request."""
        data = await self.workbench.session.export_snapshot()
        if data is None:
            return _text({"snapshot": None, "size_bytes": 0}, MAX_RESPONSE_STATUS)

        # Snapshots can be large; never truncate them
        payload = {
            "snapshot": base64.b64encode(data).decode("ascii"),
            "size_bytes": len(data),
        }
        return [TextContent(type="text", text=dumps(payload))]

    async def handle_import_snapshot(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle import_snapshot request."""
        try:
            data = base64.b64decode(arguments["snapshot"], validate=True)
        except (binascii.Error, ValueError) as e:
            raise SnapshotError(f"Snapshot is not valid base64: {e}") from e

        await self.workbench.session.import_snapshot(data)
        nodes = await self.workbench.refresh_graph()
        return _text(
            {"imported_bytes": len(data), "tables": [n.table for n in nodes]},
            MAX_RESPONSE_STATUS,
        )

    async def handle_reset_database(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle reset_database request."""
        dropped = await self.workbench.session.reset()
        await self.workbench.refresh_graph()
        return _text({"dropped": dropped}, MAX_RESPONSE_STATUS)

    async def handle_list_library_queries(
        self, arguments: dict[str, Any]
    ) -> list[TextContent]:
        """Handle list_library_queries request."""
        categories = self.workbench.library.search(arguments.get("search") or "")
        return _text([c.model_dump() for c in categories], MAX_RESPONSE_LIBRARY)

    def _graph_payload(self, nodes) -> dict[str, Any]:
        layout = self.workbench.layout
        return {
            "nodes": [n.to_contract() for n in nodes],
            "edges": [s.to_contract() for s in layout.edge_segments()],
            "unpositioned": layout.unpositioned(),
        }

    async def cleanup(self) -> None:
        """Cleanup resources."""
        await self.workbench.dispose()
        logger.info("Query workbench MCP server cleaned up")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> WorkbenchConfig:
    """Build configuration from WORKBENCH_* environment variables."""
    layout = LayoutConfig(
        canvas_width=float(os.getenv("WORKBENCH_CANVAS_WIDTH", "1200")),
        canvas_height=float(os.getenv("WORKBENCH_CANVAS_HEIGHT", "800")),
    )
    return WorkbenchConfig(
        url=os.getenv("WORKBENCH_DATABASE_URL", "sqlite://"),
        load_seed=_env_flag("WORKBENCH_LOAD_SEED", True),
        echo_sql=_env_flag("WORKBENCH_ECHO_SQL", False),
        layout=layout,
    )


async def main() -> None:
    """Main entry point for the MCP server."""
    load_dotenv()
    logging.basicConfig(level=os.getenv("WORKBENCH_LOG_LEVEL", "INFO").upper())

    mcp_server = WorkbenchMCPServer(load_config())

    try:
        await mcp_server.initialize()

        @mcp_server.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            return mcp_server.list_tools()

        @mcp_server.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return await mcp_server.dispatch(name, arguments)

        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await mcp_server.server.run(
                read_stream,
                write_stream,
                mcp_server.server.create_initialization_options(),
            )

    finally:
        await mcp_server.cleanup()


def cli_entry() -> None:
    """
    Synchronous entry point for console script.

    This function is called by the 'query-workbench' console script.
    """
    if os.name == "nt":
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())  # type: ignore[attr-defined]

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    cli_entry()
