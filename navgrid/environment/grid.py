"""Spatial grid for Tier 2 navigation.

The grid is a flat, row-major sequence of ``width * height`` cells addressed by
``index = gz * width + gx``. World coordinates are continuous ``(x, z)`` values
centered on the grid midpoint, so world origin maps to the center cell::

    world_to_cell(x, z) = (floor(x + width / 2), floor(z + height / 2))
    cell_to_world(gx, gz) = (gx - width / 2, gz - height / 2)

Obstacles mutate cell flags: rocks mark cells ``occupied`` (decorative, not
blocking), pillars mark cells ``blocked`` with ``blocked_type="pillar"`` and a
single flag may sit on one free cell. The Pillar and Rock records are
projections of those flags, appended in the same call that flips them.
"""

from __future__ import annotations

import copy
import math
import random
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Tuple

from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt, stop_never

from navgrid.config import Config
from navgrid.logging_utils import log_deterministic, log_error

from .schemas import Pillar, Rock

PILLAR_BLOCK = "pillar"
ROCK_MIN_SIZE = 1
ROCK_MAX_SIZE = 5


class PillarPlacementError(RuntimeError):
    """Raised when a pillar cannot be placed within the configured attempt budget.

    The grid is rolled back to the pillar layout it had before the failing call.
    """


class _FootprintTaken(Exception):
    """A randomly chosen pillar anchor overlaps a blocked, occupied or flagged cell."""


@dataclass
class GridCell:
    """Flags carried by a single cell."""

    occupied: bool = False    # covered by a rock
    has_flag: bool = False    # carries the marker flag
    blocked: bool = False     # impassable (wall, pillar)
    blocked_type: str = ""    # mechanism that set ``blocked``; only it may clear it

    def is_free(self) -> bool:
        return not (self.blocked or self.occupied or self.has_flag)


@dataclass(frozen=True)
class GridPoint:
    """Integer cell coordinates, valid iff ``0 <= gx < width`` and ``0 <= gz < height``."""

    gx: int
    gz: int


class Grid:
    """Fixed-size cell storage with world/cell transforms and obstacle placement."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        rng: Optional[random.Random] = None,
        pillar_size: Optional[int] = None,
        pillar_max_attempts: Optional[int] = None,
    ):
        self._width = width
        self._height = height
        self._cells: List[GridCell] = [GridCell() for _ in range(width * height)]
        self._rng = rng or random.Random()
        self._pillar_size = Config.PILLAR_SIZE if pillar_size is None else pillar_size
        self._pillar_max_attempts = (
            Config.PILLAR_MAX_ATTEMPTS if pillar_max_attempts is None else pillar_max_attempts
        )
        self._pillars: List[Pillar] = []
        # Top-left anchors of the current pillars, parallel to _pillars
        self._pillar_anchors: List[Tuple[int, int]] = []
        self._rocks: List[Rock] = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def pillar_size(self) -> int:
        return self._pillar_size

    @property
    def pillar_max_attempts(self) -> int:
        """Random anchors tried per pillar; 0 retries until one fits."""
        return self._pillar_max_attempts

    @property
    def pillars(self) -> List[Pillar]:
        return list(self._pillars)

    @property
    def rocks(self) -> List[Rock]:
        return list(self._rocks)

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def index(self, gx: int, gz: int) -> int:
        """Row-major index: row ``gz`` starts at ``gz * width``."""
        return gz * self._width + gx

    def in_bounds(self, gx: int, gz: int) -> bool:
        return 0 <= gx < self._width and 0 <= gz < self._height

    def cell(self, gx: int, gz: int) -> GridCell:
        """Return the cell at ``(gx, gz)``. Caller guarantees the indices are in bounds."""
        return self._cells[self.index(gx, gz)]

    def is_blocked(self, gx: int, gz: int) -> bool:
        return self._cells[gz * self._width + gx].blocked

    def iter_cells(self) -> Iterator[Tuple[GridPoint, GridCell]]:
        for i, cell in enumerate(self._cells):
            yield GridPoint(i % self._width, i // self._width), cell

    def snapshot(self) -> Grid:
        """Copy of the current cell layout and records that later mutations do not reach.

        The copy shares the random source, so it is meant for read-only use such as
        path searches.
        """
        clone = copy.copy(self)
        clone._cells = [replace(cell) for cell in self._cells]
        clone._pillars = list(self._pillars)
        clone._pillar_anchors = list(self._pillar_anchors)
        clone._rocks = list(self._rocks)
        return clone

    # ------------------------------------------------------------------
    # Coordinate transforms
    # ------------------------------------------------------------------

    def world_to_cell(self, x: float, z: float) -> Optional[GridPoint]:
        """Map a world coordinate to its cell, or None when it falls outside the grid."""
        if not (math.isfinite(x) and math.isfinite(z)):
            return None
        gx = math.floor(x + self._width / 2)
        gz = math.floor(z + self._height / 2)
        if not self.in_bounds(gx, gz):
            return None
        return GridPoint(gx, gz)

    def cell_to_world(self, gx: int, gz: int) -> Tuple[float, float]:
        """Map cell indices to world coordinates. Indices must already be validated."""
        return gx - self._width / 2, gz - self._height / 2

    # ------------------------------------------------------------------
    # Flag
    # ------------------------------------------------------------------

    def place_flag(self, x: float, z: float) -> bool:
        """Move the single flag to the cell under ``(x, z)``.

        Out-of-bounds coordinates return False without touching the grid. Otherwise
        the previous flag is always cleared first, and the new one is only planted
        when the target cell is neither blocked nor occupied.
        """
        point = self.world_to_cell(x, z)
        if point is None:
            return False

        self.clear_flag()

        cell = self.cell(point.gx, point.gz)
        if cell.has_flag or cell.blocked or cell.occupied:
            return False

        cell.has_flag = True
        return True

    def clear_flag(self) -> None:
        for cell in self._cells:
            cell.has_flag = False

    def flag_cell(self) -> Optional[GridPoint]:
        for point, cell in self.iter_cells():
            if cell.has_flag:
                return point
        return None

    # ------------------------------------------------------------------
    # Blocking
    # ------------------------------------------------------------------

    def block(self, gx: int, gz: int, blocked_type: str) -> None:
        """Mark a cell impassable, tagged with the mechanism that blocked it."""
        cell = self.cell(gx, gz)
        cell.blocked = True
        cell.blocked_type = blocked_type

    def clear_blocked(self, blocked_type: str) -> int:
        """Unblock every cell blocked by ``blocked_type``; other mechanisms are untouched."""
        cleared = 0
        for cell in self._cells:
            if cell.blocked and cell.blocked_type == blocked_type:
                cell.blocked = False
                cell.blocked_type = ""
                cleared += 1
        return cleared

    def _footprint_free(self, gx: int, gz: int, width: int, height: int) -> bool:
        for dz in range(height):
            for dx in range(width):
                if not self.cell(gx + dx, gz + dz).is_free():
                    return False
        return True

    # ------------------------------------------------------------------
    # Pillars
    # ------------------------------------------------------------------

    def clear_pillars(self) -> None:
        self._pillars.clear()
        self._pillar_anchors.clear()
        self.clear_blocked(PILLAR_BLOCK)

    def _mark_pillar(self, gx: int, gz: int) -> Pillar:
        size = self.pillar_size
        for dz in range(size):
            for dx in range(size):
                self.block(gx + dx, gz + dz, PILLAR_BLOCK)

        # Footprint center in world space: anchor corner plus half the side length
        world_x, world_z = self.cell_to_world(gx, gz)
        pillar = Pillar(x=world_x + size / 2, z=world_z + size / 2, size=float(size))
        self._pillars.append(pillar)
        self._pillar_anchors.append((gx, gz))
        return pillar

    def _random_free_anchor(self) -> Tuple[int, int]:
        size = self.pillar_size
        gx = self._rng.randint(0, self._width - size)
        gz = self._rng.randint(0, self._height - size)
        if not self._footprint_free(gx, gz, size, size):
            raise _FootprintTaken((gx, gz))
        return gx, gz

    def _place_pillar(self) -> Pillar:
        size = self.pillar_size
        if size > self._width or size > self._height:
            raise PillarPlacementError(
                f"{size}x{size} pillar does not fit in a {self._width}x{self._height} grid"
            )

        stop = stop_never if self.pillar_max_attempts == 0 else stop_after_attempt(self.pillar_max_attempts)
        retrying = Retrying(retry=retry_if_exception_type(_FootprintTaken), stop=stop)
        try:
            gx, gz = retrying(self._random_free_anchor)
        except RetryError as exc:
            raise PillarPlacementError(
                f"No free {size}x{size} footprint found after {self.pillar_max_attempts} attempts"
            ) from exc

        return self._mark_pillar(gx, gz)

    def generate_pillars(self, count: int) -> List[Pillar]:
        """Replace all pillars with ``count`` new ones at random free footprints.

        Raises:
            PillarPlacementError: a pillar could not be placed; the previous
                pillars are restored before raising.
        """
        previous = list(self._pillar_anchors)
        self.clear_pillars()
        try:
            for _ in range(count):
                self._place_pillar()
        except PillarPlacementError as exc:
            self.clear_pillars()
            for gx, gz in previous:
                self._mark_pillar(gx, gz)
            log_error(f"Pillar generation rolled back: {exc}")
            raise

        log_deterministic(f"Placed {count} pillars ({self.pillar_size}x{self.pillar_size})")
        return self.pillars

    # ------------------------------------------------------------------
    # Rocks
    # ------------------------------------------------------------------

    def generate_rocks(self, count: int) -> List[Rock]:
        """Scatter ``count`` rocks of random 1-5 cell footprints; returns all rocks so far.

        Rocks may overlap each other and any other obstacle. Their cells are only
        marked ``occupied`` and stay walkable for the pathfinder.
        """
        if self._width == 0 or self._height == 0:
            return self.rocks

        for _ in range(count):
            width = self._rng.randint(ROCK_MIN_SIZE, min(ROCK_MAX_SIZE, self._width))
            height = self._rng.randint(ROCK_MIN_SIZE, min(ROCK_MAX_SIZE, self._height))
            start_x = self._rng.randint(0, self._width - width)
            start_z = self._rng.randint(0, self._height - height)

            for gz in range(start_z, start_z + height):
                for gx in range(start_x, start_x + width):
                    self.cell(gx, gz).occupied = True

            world_x, world_z = self.cell_to_world(start_x, start_z)
            self._rocks.append(
                Rock(
                    position=(world_x + width / 2, 0.0, world_z + height / 2),
                    scale=(float(width), 1.0, float(height)),
                )
            )

        log_deterministic(f"Scattered {count} rocks ({len(self._rocks)} total)")
        return self.rocks
