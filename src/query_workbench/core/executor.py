"""Statement classification, execution and result normalization."""

import re
import time
from typing import Any, Optional, Sequence

from sqlalchemy import Connection
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from query_workbench.core.session import EngineSession
from query_workbench.exceptions import QueryExecutionError
from query_workbench.models.query import STATUS_COLUMN, STATUS_MESSAGE, QueryResult
from query_workbench.utils import coerce_rows

_PROJECTION_PATTERN = re.compile(r"^SELECT\b", re.IGNORECASE)


class StatementExecutor:
    """Runs one statement at a time against the session."""

    def __init__(self, session: EngineSession):
        """
        Initialize statement executor.

        Args:
            session: Engine session to run statements against
        """
        self.session = session

    @staticmethod
    def is_projection(statement: str) -> bool:
        """A statement whose leading keyword is SELECT returns a result set."""
        return bool(_PROJECTION_PATTERN.match(statement.strip()))

    async def execute(self, statement: str) -> QueryResult:
        """
        Execute a statement, starting the session first if needed.

        Args:
            statement: SQL text in SQLite's dialect

        Returns:
            Rows for SELECT statements; a one-row status result with
            rows_affected for everything else

        Raises:
            QueryExecutionError: If the engine rejects the statement
        """
        sql = statement.strip()
        if not sql:
            raise QueryExecutionError("Statement is empty")

        projection = self.is_projection(sql)

        if not self.session.is_ready:
            await self.session.initialize()

        try:
            async with self.session.get_connection() as conn:
                if projection:
                    return await conn.run_sync(self._run_projection, sql)
                return await conn.run_sync(self._run_mutation, sql)
        except SQLAlchemyError as e:
            raise QueryExecutionError(self._engine_message(e)) from e

    def _run_projection(self, sync_conn: Connection, sql: str) -> QueryResult:
        start_time = time.perf_counter()
        result = sync_conn.exec_driver_sql(sql)
        if result.returns_rows:
            columns: Optional[list[str]] = list(result.keys())
            rows = result.fetchall()
        else:
            columns, rows = None, []
        execution_time = (time.perf_counter() - start_time) * 1000

        return self.build_projection_result(columns, rows, execution_time)

    def _run_mutation(self, sync_conn: Connection, sql: str) -> QueryResult:
        total_before = self._total_changes(sync_conn)

        start_time = time.perf_counter()
        sync_conn.exec_driver_sql(sql).close()
        execution_time = (time.perf_counter() - start_time) * 1000

        # changes() keeps the last DML count across DDL, so only trust it
        # when this statement modified rows
        rows_affected = 0
        if self._total_changes(sync_conn) != total_before:
            rows_affected = int(
                sync_conn.exec_driver_sql("SELECT changes()").scalar() or 0
            )

        return QueryResult(
            columns=[STATUS_COLUMN],
            rows=[[STATUS_MESSAGE]],
            rows_affected=rows_affected,
            execution_time_ms=execution_time,
        )

    @staticmethod
    def _total_changes(sync_conn: Connection) -> int:
        return int(sync_conn.exec_driver_sql("SELECT total_changes()").scalar() or 0)

    @staticmethod
    def build_projection_result(
        columns: Optional[list[str]],
        rows: Sequence[Sequence[Any]],
        execution_time_ms: float,
    ) -> QueryResult:
        """
        Normalize a projection's output.

        ``columns`` is None when the engine produced no result set at all,
        which is reported as an empty result rather than zero rows of
        known columns.
        """
        if columns is None:
            return QueryResult(columns=[], rows=[], execution_time_ms=execution_time_ms)

        return QueryResult(
            columns=columns,
            rows=coerce_rows(rows),
            execution_time_ms=execution_time_ms,
        )

    @staticmethod
    def _engine_message(error: SQLAlchemyError) -> str:
        """Extract the engine's own message from a wrapped driver error."""
        if isinstance(error, DBAPIError) and error.orig is not None:
            return str(error.orig) or "Query execution failed"
        return str(error) or "Query execution failed"
