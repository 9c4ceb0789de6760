"""Embedded SQLite engine lifecycle with SQLAlchemy."""

import asyncio
import functools
import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Callable, Optional, TypeVar

from sqlalchemy import Connection, Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from query_workbench.core.reflector import SchemaReflector
from query_workbench.core.seed import SEED_SQL, SEED_TABLES
from query_workbench.exceptions import EngineInitError, SnapshotError
from query_workbench.models.config import WorkbenchConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionConnection:
    """Connection handle that runs blocking engine calls on the session thread."""

    def __init__(self, sync_conn: Connection, executor: ThreadPoolExecutor):
        """Initialize with a sync connection and the session's worker."""
        self.sync_conn = sync_conn
        self._executor = executor

    async def run_sync(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``fn(sync_conn, *args, **kwargs)`` on the session worker.

        This mimics the SQLAlchemy AsyncConnection.run_sync method.
        """
        loop = asyncio.get_running_loop()
        call = functools.partial(fn, self.sync_conn, *args, **kwargs)
        return await loop.run_in_executor(self._executor, call)


def _driver_connection(sync_conn: Connection) -> sqlite3.Connection:
    return sync_conn.connection.driver_connection


def _serialize(sync_conn: Connection) -> bytes:
    return _driver_connection(sync_conn).serialize()


def _drop_table(sync_conn: Connection, table_name: str) -> None:
    quoted = sync_conn.dialect.identifier_preparer.quote_identifier(table_name)
    sync_conn.exec_driver_sql(f"DROP TABLE IF EXISTS {quoted}")


def _load_snapshot(engine: Engine, data: bytes) -> int:
    """Deserialize into ``engine`` and prove the result is a readable database."""
    raw = engine.raw_connection()
    try:
        driver = raw.driver_connection
        driver.deserialize(data)
        row = driver.execute("SELECT count(*) FROM sqlite_master").fetchone()
        return int(row[0])
    finally:
        raw.close()


class EngineSession:
    """Owns the embedded engine and the single active database.

    Every operation touching the database goes through ``get_connection()``,
    which holds one lock and runs engine calls on one worker thread, so the
    handle only ever has a single user at a time.
    """

    def __init__(self, config: Optional[WorkbenchConfig] = None):
        """
        Initialize the session.

        Args:
            config: Workbench configuration (defaults to in-memory SQLite)
        """
        self.config = config or WorkbenchConfig()
        self.engine: Optional[Engine] = None
        self._lock = asyncio.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def is_ready(self) -> bool:
        """Check if engine is initialized."""
        return self.engine is not None

    def _worker(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="query-workbench"
            )
        return self._executor

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._worker(), fn, *args)

    def _create_engine(self) -> Engine:
        """Create a one-connection engine and make sure it can be used."""
        engine: Optional[Engine] = None
        try:
            engine = create_engine(
                self.config.url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                isolation_level="AUTOCOMMIT",
                echo=self.config.echo_sql,
            )
            with engine.connect() as conn:
                conn.exec_driver_sql("SELECT 1")
                driver = _driver_connection(conn)
                if not hasattr(driver, "serialize"):
                    raise EngineInitError(
                        "SQLite build does not support serialize/deserialize"
                    )
            return engine
        except EngineInitError:
            if engine is not None:
                engine.dispose()
            raise
        except (SQLAlchemyError, sqlite3.Error, ImportError) as e:
            if engine is not None:
                engine.dispose()
            raise EngineInitError(f"Failed to start SQLite engine: {e}") from e

    def _load_seed(self, engine: Engine) -> None:
        raw = engine.raw_connection()
        try:
            raw.driver_connection.executescript(SEED_SQL)
            logger.info(f"Loaded sample data: {', '.join(SEED_TABLES)}")
        except sqlite3.Error as e:
            logger.error(f"Error loading sample data: {e}")
        finally:
            raw.close()

    def _start(self) -> Engine:
        engine = self._create_engine()
        if self.config.load_seed:
            self._load_seed(engine)
        return engine

    async def initialize(self) -> None:
        """Start the engine and load the seed dataset. No-op when ready.

        Raises:
            EngineInitError: If the engine cannot be started
        """
        if self.engine is not None:
            return

        async with self._lock:
            if self.engine is not None:
                return
            self.engine = await self._run(self._start)

        logger.info(
            f"Initialized SQLite session ({self.config.url}, "
            f"seed={'on' if self.config.load_seed else 'off'})"
        )

    async def dispose(self) -> None:
        """Dispose of the engine and return to the uninitialized state."""
        async with self._lock:
            if self.engine is not None:
                await self._run(self.engine.dispose)
                self.engine = None
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[SessionConnection, None]:
        """
        Get exclusive access to the database as an async context manager.

        Yields:
            SessionConnection for executing statements

        Raises:
            EngineInitError: If the session is not initialized
        """
        async with self._lock:
            if self.engine is None:
                raise EngineInitError(
                    "EngineSession not initialized. Call initialize() first."
                )
            sync_conn = await self._run(self.engine.connect)
            try:
                yield SessionConnection(sync_conn, self._worker())
            finally:
                await self._run(sync_conn.close)

    async def reset(self) -> list[str]:
        """
        Drop every user table, continuing past tables that fail to drop.

        Returns:
            Names of the tables that were dropped
        """
        if not self.is_ready:
            return []

        table_names = await SchemaReflector(self).get_table_names()
        dropped = []

        for table_name in table_names:
            try:
                async with self.get_connection() as conn:
                    await conn.run_sync(_drop_table, table_name)
                dropped.append(table_name)
            except SQLAlchemyError as e:
                logger.error(f"Error dropping table {table_name}: {e}")

        logger.info(f"Reset session: dropped {len(dropped)}/{len(table_names)} tables")
        return dropped

    async def export_snapshot(self) -> Optional[bytes]:
        """
        Serialize the whole database.

        Returns:
            Snapshot bytes, or None if the session is not initialized
        """
        if not self.is_ready:
            return None

        async with self.get_connection() as conn:
            data = await conn.run_sync(_serialize)

        logger.info(f"Exported snapshot ({len(data)} bytes)")
        return data

    async def import_snapshot(self, data: bytes) -> None:
        """
        Replace the current database with one loaded from snapshot bytes.

        The new database is fully loaded and checked before the current one is
        swapped out, so a bad snapshot leaves the session as it was.

        Args:
            data: Bytes produced by export_snapshot()

        Raises:
            SnapshotError: If the bytes are not a loadable database
            EngineInitError: If the engine cannot be started
        """
        if not data:
            raise SnapshotError("Snapshot is empty")

        async with self._lock:
            engine = await self._run(self._create_engine)
            try:
                object_count = await self._run(_load_snapshot, engine, bytes(data))
            except (sqlite3.Error, SQLAlchemyError, ValueError, OverflowError) as e:
                await self._run(engine.dispose)
                raise SnapshotError(f"Invalid snapshot: {e}") from e

            previous, self.engine = self.engine, engine
            if previous is not None:
                await self._run(previous.dispose)

        logger.info(
            f"Imported snapshot ({len(data)} bytes, {object_count} catalog entries)"
        )

    async def __aenter__(self) -> "EngineSession":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.dispose()
