"""
Pydantic schemas for navgrid boundary records.

Every value returned across the command surface is one of these models (or one of
the grid records in ``navgrid.environment.schemas``), so the shell can serialize it
with ``model_dump(by_alias=True)`` without knowing about the live objects.

Design Philosophy:
- Live state (Grid, Robot) stays in plain Python objects owned by the orchestrator
- Records are snapshots: mutating one never changes the grid or the robot
- Aliases match the camelCase keys the renderer reads (isMoving, rotationY)
"""

from pydantic import BaseModel, ConfigDict, Field

from navgrid.environment import GridPointState, GridProps, Pillar, Rock, WorldPoint


# ============================================================================
# Robot Schemas
# ============================================================================


class Vec3State(BaseModel):
    """World position of the robot. ``y`` is the vertical axis and stays 0 on the ground plane."""

    x: float
    y: float = 0.0
    z: float


class RobotState(BaseModel):
    """Motion snapshot returned after every tick.

    The renderer interpolates the robot model from ``position`` and turns it by
    ``rotation_y`` around the vertical axis. ``is_moving`` flips to False on the
    tick the final waypoint is reached.
    """

    model_config = ConfigDict(populate_by_name=True)

    position: Vec3State = Field(..., description="Current world position")
    is_moving: bool = Field(..., alias="isMoving", description="True while following a path")
    rotation_y: float = Field(
        ..., alias="rotationY", description="Heading in radians, atan2(dx, dz) of the last step",
    )
    action: str = Field("idle", description="Display action tag")
    emote: str = Field("none", description="Display emote tag")


__all__ = [
    "GridPointState",
    "GridProps",
    "Pillar",
    "Rock",
    "WorldPoint",
    "Vec3State",
    "RobotState",
]
