"""Grid environment: cell storage, obstacles and pathfinding."""

from .grid import Grid, GridCell, GridPoint, PillarPlacementError, PILLAR_BLOCK
from .schemas import GridPointState, GridProps, Pillar, Rock, WorldPoint
from .helpers import (
    astar,
    astar_cells,
    grid_neighbors,
    heuristic,
    path_cost,
)

__all__ = [
    "Grid",
    "GridCell",
    "GridPoint",
    "PillarPlacementError",
    "PILLAR_BLOCK",
    "GridPointState",
    "GridProps",
    "Pillar",
    "Rock",
    "WorldPoint",
    "astar",
    "astar_cells",
    "grid_neighbors",
    "heuristic",
    "path_cost",
]
