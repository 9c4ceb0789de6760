"""Statement execution result models."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_validator

# Closed set of values a result cell may hold
Cell = Union[bool, int, float, str, None]

STATUS_COLUMN = "Status"
STATUS_MESSAGE = "Query executed successfully"


class QueryResult(BaseModel):
    """Normalized result of one statement."""

    columns: list[str] = Field(
        default_factory=list, description="Column names in order"
    )
    rows: list[list[Cell]] = Field(
        default_factory=list, description="Result rows as ordered value lists"
    )
    rows_affected: Optional[int] = Field(
        None, description="Rows changed (mutation/definition statements only)"
    )
    execution_time_ms: float = Field(
        ..., ge=0, description="Engine round-trip time in milliseconds"
    )

    @model_validator(mode="after")
    def check_row_width(self) -> "QueryResult":
        """Every row must carry exactly one value per column."""
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} values, expected {width}"
                )
        return self

    @property
    def is_mutation(self) -> bool:
        """Whether this result came from a mutation/definition statement."""
        return self.rows_affected is not None

    def to_contract(self) -> dict[str, Any]:
        """Serialize using the camelCase keys consumers expect."""
        data: dict[str, Any] = {
            "columns": list(self.columns),
            "rows": [list(row) for row in self.rows],
            "executionTimeMs": self.execution_time_ms,
        }
        if self.rows_affected is not None:
            data["rowsAffected"] = self.rows_affected
        return data

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "columns": ["id", "username"],
                    "rows": [[1, "john_doe"], [2, "jane_smith"]],
                    "rows_affected": None,
                    "execution_time_ms": 0.42,
                }
            ]
        }
    }
