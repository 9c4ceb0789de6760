"""Module Tests for SchemaReflector

Tests catalog reflection against the seed dataset.
Validates:
- Table listing order and exclusion of sqlite_* tables
- Column metadata in declaration order with raw declared types
- Empty schema when uninitialized or when reflection fails
"""

import pytest

from query_workbench.core import EngineSession, SchemaReflector, StatementExecutor
from query_workbench.exceptions import ReflectionError

pytestmark = pytest.mark.integration


class TestSchema:
    async def test_tables_sorted(self, reflector: SchemaReflector):
        tables = await reflector.get_schema()

        assert [t.name for t in tables] == [
            "categories",
            "order_items",
            "orders",
            "products",
            "users",
        ]

    async def test_internal_tables_excluded(self, reflector: SchemaReflector):
        # AUTOINCREMENT columns create sqlite_sequence
        names = await reflector.get_table_names()

        assert not any(name.startswith("sqlite_") for name in names)

    async def test_columns_in_declaration_order(self, reflector: SchemaReflector):
        tables = {t.name: t for t in await reflector.get_schema()}

        assert tables["products"].column_names == [
            "id",
            "name",
            "description",
            "price",
            "category_id",
            "stock",
            "created_at",
        ]

    async def test_column_metadata(self, reflector: SchemaReflector):
        tables = {t.name: t for t in await reflector.get_schema()}
        users = tables["users"]

        columns = {c.name: c for c in users.columns}
        id_col = columns["id"]
        username = columns["username"]
        full_name = columns["full_name"]
        created_at = columns["created_at"]

        assert id_col.type == "INTEGER"
        assert id_col.primary_key
        assert username.type == "TEXT"
        assert username.not_null
        assert not username.primary_key
        assert not full_name.not_null
        assert created_at.type == "DATETIME"

    async def test_raw_declared_types(self, empty_session: EngineSession):
        await StatementExecutor(empty_session).execute(
            "CREATE TABLE odd (a VARCHAR(20), b, c DECIMAL(10,2), d WHATEVER)"
        )

        (table,) = await SchemaReflector(empty_session).get_schema()

        assert [c.type for c in table.columns] == [
            "VARCHAR(20)",
            "",
            "DECIMAL(10,2)",
            "WHATEVER",
        ]

    async def test_composite_primary_key(self, empty_session: EngineSession):
        await StatementExecutor(empty_session).execute(
            "CREATE TABLE pairs (a INTEGER, b INTEGER, note TEXT, PRIMARY KEY (a, b))"
        )

        (table,) = await SchemaReflector(empty_session).get_schema()

        assert [c.name for c in table.columns if c.primary_key] == ["a", "b"]

    async def test_quoted_table_names(self, empty_session: EngineSession):
        await StatementExecutor(empty_session).execute(
            'CREATE TABLE "order details" ("line no" INTEGER)'
        )

        (table,) = await SchemaReflector(empty_session).get_schema()

        assert table.name == "order details"
        assert table.column_names == ["line no"]

    async def test_views_excluded(self, session: EngineSession):
        await StatementExecutor(session).execute(
            "CREATE VIEW cheap AS SELECT * FROM products WHERE price < 20"
        )

        names = await SchemaReflector(session).get_table_names()

        assert "cheap" not in names


class TestFailSafe:
    async def test_uninitialized_is_empty(self, fresh_session: EngineSession):
        reflector = SchemaReflector(fresh_session)

        assert await reflector.get_schema() == []
        assert await reflector.get_table_names() == []
        assert not fresh_session.is_ready

    async def test_failure_mid_traversal_is_empty_not_partial(
        self, reflector: SchemaReflector, monkeypatch: pytest.MonkeyPatch
    ):
        original = SchemaReflector._reflect_columns

        def failing_columns(self, sync_conn, table_name):
            if table_name == "orders":
                raise ReflectionError("catalog read failed")
            return original(self, sync_conn, table_name)

        monkeypatch.setattr(SchemaReflector, "_reflect_columns", failing_columns)

        assert await reflector.get_schema() == []

    async def test_unexpected_error_is_empty(
        self,
        reflector: SchemaReflector,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ):
        def broken_worker(self, sync_conn):
            raise RuntimeError("cannot schedule new futures after shutdown")

        monkeypatch.setattr(SchemaReflector, "_reflect_table_names", broken_worker)
        monkeypatch.setattr(SchemaReflector, "_reflect_tables", broken_worker)

        assert await reflector.get_table_names() == []
        assert await reflector.get_schema() == []
        assert "cannot schedule new futures" in caplog.text

    async def test_failure_is_logged(
        self,
        reflector: SchemaReflector,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ):
        def failing_names(self, sync_conn):
            raise ReflectionError("catalog unavailable")

        monkeypatch.setattr(SchemaReflector, "_reflect_table_names", failing_names)

        assert await reflector.get_table_names() == []
        assert "catalog unavailable" in caplog.text
