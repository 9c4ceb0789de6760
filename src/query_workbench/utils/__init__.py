"""Utility modules for the query workbench."""

from query_workbench.utils.serialization import (
    coerce_cell,
    coerce_row,
    coerce_rows,
    dumps,
)

__all__ = [
    "coerce_cell",
    "coerce_row",
    "coerce_rows",
    "dumps",
]
