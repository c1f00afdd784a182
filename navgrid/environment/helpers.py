"""Pathfinding utilities for the navigation grid."""

from __future__ import annotations

import heapq
import math
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .grid import Grid

Cell = Tuple[int, int]
WorldXZ = Tuple[float, float]

SQRT2 = math.sqrt(2.0)

# (dx, dz, move_cost): four orthogonal steps, then four diagonals
DIRECTIONS: Tuple[Tuple[int, int, float], ...] = (
    (1, 0, 1.0),
    (-1, 0, 1.0),
    (0, 1, 1.0),
    (0, -1, 1.0),
    (1, 1, SQRT2),
    (-1, -1, SQRT2),
    (1, -1, SQRT2),
    (-1, 1, SQRT2),
)


def heuristic(a: Cell, b: Cell) -> float:
    """Euclidean distance between cell centers. Never overestimates an 8-connected path."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def grid_neighbors(grid: Grid, cell: Cell) -> Iterable[Tuple[Cell, float]]:
    """Yield ``(neighbor, move_cost)`` for the walkable 8-connected neighbors of ``cell``.

    A neighbor is skipped when it lies outside the grid or is blocked. Diagonal
    steps are also skipped when either orthogonal cell of the corner is blocked,
    so paths never squeeze between two touching obstacles.
    """
    x, z = cell
    width, height = grid.width, grid.height
    for dx, dz, cost in DIRECTIONS:
        nx, nz = x + dx, z + dz
        if not (0 <= nx < width and 0 <= nz < height):
            continue
        if grid.is_blocked(nx, nz):
            continue
        if dx != 0 and dz != 0 and (grid.is_blocked(nx, z) or grid.is_blocked(x, nz)):
            continue
        yield (nx, nz), cost


def _reconstruct(came_from: Dict[Cell, Cell], goal: Cell) -> List[Cell]:
    path = [goal]
    current = goal
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def astar_cells(grid: Grid, start: Cell, goal: Cell) -> Optional[List[Cell]]:
    """A* over cell indices. Returns the cell sequence from start to goal inclusive.

    Returns None when the goal is blocked or the open set runs dry (goal or start
    sealed off). The start cell itself is allowed to be blocked so an agent
    standing on a freshly placed obstacle can still walk off it.
    """
    if grid.is_blocked(*goal):
        return None

    # Heap entries are (f, tie, cell); the counter keeps tuples comparable
    tie = 0
    open_heap: List[Tuple[float, int, Cell]] = [(heuristic(start, goal), tie, start)]
    g_score: Dict[Cell, float] = {start: 0.0}
    came_from: Dict[Cell, Cell] = {}
    closed: Set[Cell] = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        # Stale heap entries for cells already expanded with a better g
        if current in closed:
            continue
        if current == goal:
            return _reconstruct(came_from, goal)
        closed.add(current)

        current_g = g_score[current]
        for neighbor, cost in grid_neighbors(grid, current):
            if neighbor in closed:
                continue
            tentative = current_g + cost
            if tentative < g_score.get(neighbor, math.inf):
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                tie += 1
                heapq.heappush(open_heap, (tentative + heuristic(neighbor, goal), tie, neighbor))

    return None


def astar(grid: Grid, start: WorldXZ, goal: WorldXZ) -> Optional[List[WorldXZ]]:
    """Shortest 8-connected path between two world positions.

    Both endpoints are resolved with ``grid.world_to_cell``; an endpoint outside
    the grid yields None, as does a blocked or unreachable goal. On success the
    cells are converted back with ``grid.cell_to_world`` so the first waypoint is
    the start cell and the last is the goal cell.
    """
    start_cell = grid.world_to_cell(*start)
    goal_cell = grid.world_to_cell(*goal)
    if start_cell is None or goal_cell is None:
        return None

    cells = astar_cells(grid, (start_cell.gx, start_cell.gz), (goal_cell.gx, goal_cell.gz))
    if cells is None:
        return None
    return [grid.cell_to_world(gx, gz) for gx, gz in cells]


def path_cost(points: Sequence[Tuple[float, float]]) -> float:
    """Sum of Euclidean step lengths along ``points`` (cells or world waypoints)."""
    return sum(
        math.hypot(b[0] - a[0], b[1] - a[1]) for a, b in zip(points, points[1:])
    )
