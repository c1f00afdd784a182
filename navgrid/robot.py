"""
Robot controller: follows A* paths one tick at a time.

Flow for a click on the ground plane::

    world point -> set_target() -> astar() over the grid
                -> cached waypoints -> update(delta) every frame
                -> RobotState for the renderer

Motion is a two-state machine (idle / moving) driven by ``is_moving``. The
display ``action`` and ``emote`` are independent of it, except that choosing
``RUNNING`` or ``WALKING`` also sets the speed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .config import Config
from .environment import Grid, astar
from .logging_utils import log_error, log_info, log_motion, log_success
from .schemas import RobotState, Vec3State


class RobotAction(Enum):
    """Display action played by the robot model."""

    IDLE = "idle"
    WALKING = "walking"
    RUNNING = "running"
    DANCE = "dance"
    DEATH = "death"
    SITTING = "sitting"
    STANDING = "standing"


class RobotEmote(Enum):
    """One-shot emote layered over the current action."""

    NONE = "none"
    JUMP = "jump"
    YES = "yes"
    NO = "no"
    WAVE = "wave"
    PUNCH = "punch"
    THUMBS_UP = "thumbsup"


@dataclass
class Vec3:
    x: float
    y: float
    z: float

    def to_state(self) -> Vec3State:
        return Vec3State(x=self.x, y=self.y, z=self.z)


class Robot:
    """Single agent that walks cached A* paths with a bounded step per tick."""

    def __init__(self, start_x: float, start_z: float, speed: float):
        self._current = Vec3(start_x, 0.0, start_z)
        self._target = Vec3(start_x, 0.0, start_z)
        self._is_moving = False
        self._speed = speed
        self._rotation_y = 0.0
        self._action = RobotAction.IDLE
        self._emote = RobotEmote.NONE
        self._path: List[Vec3] = []
        self._path_index = 0
        log_info(f"Robot created at ({start_x}, {start_z}) with speed {speed}")

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def current(self) -> Vec3:
        return Vec3(self._current.x, self._current.y, self._current.z)

    @property
    def target(self) -> Vec3:
        return Vec3(self._target.x, self._target.y, self._target.z)

    @property
    def is_moving(self) -> bool:
        return self._is_moving

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def rotation_y(self) -> float:
        return self._rotation_y

    @property
    def action(self) -> RobotAction:
        return self._action

    @property
    def emote(self) -> RobotEmote:
        return self._emote

    @property
    def path(self) -> List[Vec3]:
        return [Vec3(p.x, p.y, p.z) for p in self._path]

    @property
    def path_index(self) -> int:
        return self._path_index

    def state(self) -> RobotState:
        return RobotState(
            position=self._current.to_state(),
            is_moving=self._is_moving,
            rotation_y=self._rotation_y,
            action=self._action.value,
            emote=self._emote.value,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_target(self, grid: Grid, x: float, z: float) -> Optional[List[Vec3]]:
        """Plan a path from the current position to ``(x, 0, z)`` and start following it.

        Returns the new waypoints, or None when no path exists. A failed request
        leaves the previous path and motion untouched.
        """
        route = astar(grid, (self._current.x, self._current.z), (x, z))
        if route is None:
            log_error(f"No path from ({self._current.x:.2f}, {self._current.z:.2f}) to ({x}, {z})")
            return None
        return self.follow(route)

    def follow(self, route: Sequence[Tuple[float, float]]) -> Optional[List[Vec3]]:
        """Replace the cached path with ``route`` (world ``(x, z)`` waypoints) and start moving.

        An empty route is refused and leaves the robot untouched.
        """
        if not route:
            log_error("Refusing empty route")
            return None

        self._path = [Vec3(px, 0.0, pz) for px, pz in route]
        self._path_index = 0
        self._target = self._path[0]
        self._is_moving = True
        return self.path

    def clear_path(self) -> None:
        """Drop the cached path and stop where the robot stands."""
        self._path = []
        self._path_index = 0
        self._is_moving = False

    def set_speed(self, speed: float) -> None:
        self._speed = speed

    def set_action(self, action: RobotAction) -> None:
        self._action = action
        if action is RobotAction.RUNNING:
            self.set_speed(Config.RUN_SPEED)
        elif action is RobotAction.WALKING:
            self.set_speed(Config.WALK_SPEED)

    def set_emote(self, emote: RobotEmote) -> None:
        self._emote = emote

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def _advance_waypoint(self) -> bool:
        """Move the cursor to the next waypoint. Returns False once the path is exhausted."""
        self._path_index += 1
        if self._path_index >= len(self._path):
            self._is_moving = False
            return False
        self._target = self._path[self._path_index]
        return True

    def update(self, delta: float) -> None:
        """Advance along the path by at most ``speed * delta`` world units.

        A non-finite or non-positive ``delta`` is ignored, so one bad frame
        time cannot push the robot backwards or off the grid.
        """
        if not self._is_moving:
            return
        if not (math.isfinite(delta) and delta > 0):
            log_error(f"Ignoring tick with invalid delta {delta}")
            return

        # Waypoints the robot already stands on (usually the start cell) cost no time
        while self._target.x == self._current.x and self._target.z == self._current.z:
            if not self._advance_waypoint():
                log_success("Arrived at destination")
                return

        dx = self._target.x - self._current.x
        dz = self._target.z - self._current.z
        distance = math.hypot(dx, dz)
        max_step = self._speed * delta

        dir_x = dx / distance
        dir_z = dz / distance
        # Heading around the vertical axis; +z is forward (heading 0)
        self._rotation_y = math.atan2(dir_x, dir_z)

        if distance <= max_step:
            self._current = Vec3(self._target.x, 0.0, self._target.z)
            if not self._advance_waypoint():
                log_success(f"Arrived at ({self._current.x}, {self._current.z})")
            return

        self._current.x += dir_x * max_step
        self._current.z += dir_z * max_step
        log_motion(f"current: ({self._current.x:.3f}, {self._current.z:.3f})")
