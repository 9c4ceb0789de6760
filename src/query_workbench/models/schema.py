"""Table, column and relationship models."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SchemaColumn(BaseModel):
    """A column as declared in the catalog."""

    name: str = Field(..., description="Column name")
    type: str = Field(
        default="", description="Declared type exactly as written (may be empty)"
    )
    not_null: bool = Field(default=False, description="Whether NOT NULL is declared")
    primary_key: bool = Field(
        default=False, description="Whether column is part of the primary key"
    )

    def to_contract(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "notNull": self.not_null,
            "primaryKey": self.primary_key,
        }


class SchemaTable(BaseModel):
    """A user table and its columns in declaration order."""

    name: str = Field(..., description="Table name")
    columns: list[SchemaColumn] = Field(
        default_factory=list, description="Columns in declaration order"
    )

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    def to_contract(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": [col.to_contract() for col in self.columns],
        }


class RelationshipEdge(BaseModel):
    """Directed, inferred link from a referencing table to a referenced one.

    Advisory only: nothing enforces it against the data.
    """

    from_table: str = Field(..., description="Table owning the *_id column")
    to_table: str = Field(..., description="Table the column appears to reference")
    column: Optional[str] = Field(
        None, description="Column the edge was inferred from"
    )

    def to_contract(self) -> dict[str, Any]:
        return {"from": self.from_table, "to": self.to_table}
