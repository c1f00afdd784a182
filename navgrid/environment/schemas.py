"""Pydantic schemas for the grid environment.

These models mirror the live dataclasses in ``grid.py`` but ensure every
record handed to the shell or renderer remains serializable. Field aliases
follow the camelCase names the renderer reads.
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class GridPointState(BaseModel):
    """Discrete cell coordinates."""

    gx: int = Field(..., description="Column index, 0 <= gx < width")
    gz: int = Field(..., description="Row index, 0 <= gz < height")


class WorldPoint(BaseModel):
    """Continuous ground-plane coordinates centered on the grid midpoint."""

    x: float
    z: float


class GridProps(BaseModel):
    """Grid dimensions and robot footprint reported at startup."""

    model_config = ConfigDict(populate_by_name=True)

    width: int
    height: int
    character_occupy_width: int = Field(..., alias="characterOccupyWidth")
    character_occupy_height: int = Field(..., alias="characterOccupyHeight")


class Pillar(BaseModel):
    """World-space center and side length of a pillar footprint."""

    x: float = Field(..., description="World X of the footprint center")
    z: float = Field(..., description="World Z of the footprint center")
    size: float = Field(..., description="Side length in cells (2 means 2x2)")


class Rock(BaseModel):
    """World-space center and per-axis scale of a rock footprint."""

    position: Tuple[float, float, float] = Field(
        ..., description="(x, y, z) center; y is always 0",
    )
    scale: Tuple[float, float, float] = Field(
        ..., description="(cells along x, 1, cells along z)",
    )
