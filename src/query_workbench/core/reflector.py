"""Schema reflection using SQLAlchemy's inspector and SQLite pragmas."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy import Connection
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError

from query_workbench.exceptions import ReflectionError
from query_workbench.models.schema import SchemaColumn, SchemaTable

if TYPE_CHECKING:
    from query_workbench.core.session import EngineSession

logger = logging.getLogger(__name__)


class SchemaReflector:
    """Reads user tables and their columns from the session's catalog.

    Fail-safe: any error during traversal yields an empty schema, never a
    partial one.
    """

    def __init__(self, session: "EngineSession"):
        """
        Initialize schema reflector.

        Args:
            session: Engine session to read the catalog from
        """
        self.session = session

    async def get_schema(self) -> list[SchemaTable]:
        """
        List user tables with their columns.

        Returns:
            Tables ordered by name, columns in declaration order; empty if the
            session is not initialized or reflection fails
        """
        if not self.session.is_ready:
            return []

        try:
            async with self.session.get_connection() as conn:
                return await conn.run_sync(self._reflect_tables)
        except Exception as e:
            logger.error(f"Error getting schema: {e}")
            return []

    async def get_table_names(self) -> list[str]:
        """
        List user table names only.

        Returns:
            Sorted table names; empty if not initialized or reflection fails
        """
        if not self.session.is_ready:
            return []

        try:
            async with self.session.get_connection() as conn:
                return await conn.run_sync(self._reflect_table_names)
        except Exception as e:
            logger.error(f"Error listing tables: {e}")
            return []

    def _reflect_table_names(self, sync_conn: Connection) -> list[str]:
        try:
            # sqlite_* internal tables are already excluded by the dialect
            inspector = sa_inspect(sync_conn)
            return sorted(inspector.get_table_names())
        except SQLAlchemyError as e:
            raise ReflectionError(str(e)) from e

    def _reflect_tables(self, sync_conn: Connection) -> list[SchemaTable]:
        tables = []
        for table_name in self._reflect_table_names(sync_conn):
            columns = self._reflect_columns(sync_conn, table_name)
            if columns:
                tables.append(SchemaTable(name=table_name, columns=columns))
        return tables

    def _reflect_columns(
        self, sync_conn: Connection, table_name: str
    ) -> list[SchemaColumn]:
        """Read columns via PRAGMA table_info to keep declared types verbatim."""
        quoted = sync_conn.dialect.identifier_preparer.quote_identifier(table_name)
        try:
            rows = sync_conn.exec_driver_sql(f"PRAGMA table_info({quoted})").fetchall()
        except SQLAlchemyError as e:
            raise ReflectionError(f"{table_name}: {e}") from e

        # (cid, name, type, notnull, dflt_value, pk); pk is the 1-based
        # position within the primary key, 0 when not part of it
        return [
            SchemaColumn(
                name=row[1],
                type=row[2] or "",
                not_null=bool(row[3]),
                primary_key=bool(row[5]),
            )
            for row in rows
        ]
