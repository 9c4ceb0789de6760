"""Graph node and edge geometry models."""

from typing import Any

from pydantic import BaseModel, Field


class GraphNode(BaseModel):
    """A positioned table node (top-left corner of its box)."""

    table: str = Field(..., description="Table name")
    x: float = Field(..., description="Horizontal position")
    y: float = Field(..., description="Vertical position")

    def to_contract(self) -> dict[str, Any]:
        return {"table": self.table, "x": self.x, "y": self.y}


class EdgeSegment(BaseModel):
    """A drawable relationship line between two positioned nodes."""

    from_table: str = Field(..., description="Source table")
    to_table: str = Field(..., description="Target table")
    x1: float = Field(..., description="Start x")
    y1: float = Field(..., description="Start y")
    x2: float = Field(..., description="End x")
    y2: float = Field(..., description="End y")

    def to_contract(self) -> dict[str, Any]:
        return {
            "from": self.from_table,
            "to": self.to_table,
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
        }
