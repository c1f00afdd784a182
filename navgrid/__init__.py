"""
Navgrid - grid navigation core for a single autonomous robot.

Maintains a discretized surface with rocks, pillars and a marker flag, finds
8-connected A* paths across it and steps a robot along them one tick at a time.

No window, renderer or IPC required. No global state.
The grid and robot are owned by an Orchestrator and guarded per operation.
"""

__version__ = "0.1.0"

# Main command surface
from .orchestrator import Orchestrator, parse_action, parse_emote

# Core objects
from .config import Config
from .environment import (
    Grid,
    GridCell,
    GridPoint,
    PillarPlacementError,
    astar,
    grid_neighbors,
    path_cost,
)
from .robot import Robot, RobotAction, RobotEmote, Vec3
from .shared import (
    SharedResource,
    SharedResourceError,
    ResourcePoisonedError,
    ResourceLockTimeout,
)

# Boundary records
from .schemas import (
    GridPointState,
    GridProps,
    Pillar,
    Rock,
    RobotState,
    Vec3State,
    WorldPoint,
)

__all__ = [
    # Main class
    "Orchestrator",
    "parse_action",
    "parse_emote",
    "Config",
    # Grid
    "Grid",
    "GridCell",
    "GridPoint",
    "PillarPlacementError",
    "astar",
    "grid_neighbors",
    "path_cost",
    # Robot
    "Robot",
    "RobotAction",
    "RobotEmote",
    "Vec3",
    # Shared resources
    "SharedResource",
    "SharedResourceError",
    "ResourcePoisonedError",
    "ResourceLockTimeout",
    # Records
    "GridPointState",
    "GridProps",
    "Pillar",
    "Rock",
    "RobotState",
    "Vec3State",
    "WorldPoint",
]
