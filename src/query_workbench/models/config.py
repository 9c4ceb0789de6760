"""Workbench configuration models."""

from pydantic import BaseModel, Field, field_validator
from sqlalchemy.engine.url import make_url


class LayoutConfig(BaseModel):
    """Geometry used by the graph layout engine."""

    canvas_width: float = Field(
        default=1200.0, gt=0, description="Width of the drawing area"
    )
    canvas_height: float = Field(
        default=800.0, gt=0, description="Height of the drawing area"
    )
    node_width: float = Field(
        default=200.0, gt=0, description="Visual width of a table node"
    )
    node_height: float = Field(
        default=200.0, gt=0, description="Visual height of a table node"
    )
    edge_anchor_y: float = Field(
        default=20.0,
        ge=0,
        description="Vertical offset of edge endpoints from the node's top edge",
    )


class WorkbenchConfig(BaseModel):
    """Configuration for the embedded engine session."""

    url: str = Field(
        default="sqlite://",
        description="SQLite connection URL (in-memory by default)",
    )
    load_seed: bool = Field(
        default=True,
        description="Populate the demonstration dataset on first initialize",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo SQL statements to stdout",
    )
    layout: LayoutConfig = Field(
        default_factory=LayoutConfig, description="Graph layout geometry"
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only SQLite URLs can be serialized and deserialized in-process."""
        try:
            url = make_url(v)
        except Exception as e:
            raise ValueError(f"Invalid database URL: {e}")

        dialect = url.drivername.split("+")[0]
        if dialect != "sqlite":
            raise ValueError(
                f"Unsupported database dialect: {dialect}. Supported: sqlite"
            )
        return v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "sqlite://",
                    "load_seed": True,
                    "echo_sql": False,
                    "layout": {"canvas_width": 1200, "canvas_height": 800},
                }
            ]
        }
    }
