"""Relationship inference from *_id column naming.

SQLite does not reliably expose declared foreign keys for tables created ad
hoc, so links are guessed from column names instead. The result is advisory
and is never used to enforce anything.
"""

from typing import Iterable, Optional, Sequence

from query_workbench.models.schema import RelationshipEdge, SchemaTable

ID_SUFFIX = "_id"


class RelationshipInferencer:
    """Derives directed table edges from foreign-key-like column names."""

    # Tried in order against the stripped root: user -> user, users, useres
    PLURAL_SUFFIXES = ("", "s", "es")

    def infer(self, tables: Sequence[SchemaTable]) -> list[RelationshipEdge]:
        """
        Infer edges for every *_id column that names an existing table.

        Duplicates and self references are kept as found.

        Args:
            tables: Reflected schema

        Returns:
            Edges in table order, then column order
        """
        table_names = {table.name for table in tables}
        edges = []

        for table in tables:
            for column_name in table.column_names:
                target = self.match_target(column_name, table_names)
                if target is not None:
                    edges.append(
                        RelationshipEdge(
                            from_table=table.name,
                            to_table=target,
                            column=column_name,
                        )
                    )

        return edges

    def match_target(
        self, column_name: str, table_names: Iterable[str]
    ) -> Optional[str]:
        """
        Resolve the table a column name points at.

        Args:
            column_name: Column to test
            table_names: Existing table names (matched exactly)

        Returns:
            Target table name, or None if the column is not FK-like or no
            candidate exists
        """
        if not column_name.lower().endswith(ID_SUFFIX):
            return None

        root = column_name[: -len(ID_SUFFIX)]
        if not root:
            return None

        names = set(table_names)
        for suffix in self.PLURAL_SUFFIXES:
            candidate = root + suffix
            if candidate in names:
                return candidate
        return None

