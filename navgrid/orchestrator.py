"""
Navigation orchestrator.

Fully decoupled from the window shell, renderer and IPC transport.
The Grid and the Robot are injected (or built from Config) and each lives behind
its own SharedResource lock. Every public method is one command the shell can
dispatch: it takes plain values, holds one lock for the duration of the
operation and returns plain values or pydantic records.

Coordinates the tick loop:
1. Obstacle commands mutate the grid (flag, pillars, rocks)
2. Target commands run A* over the grid, then hand the path to the robot
3. Each tick advances the robot by speed * delta and reports a RobotState

No command holds both locks. ``set_robot_target`` copies the grid layout under
the grid lock, releases it, then plans and hands over the path under a single
robot acquisition, so the search always starts from the robot's live position.
A grid change made after the copy does not invalidate the path.
"""

import math
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from .config import Config
from .environment import (
    Grid,
    GridPointState,
    GridProps,
    Pillar,
    PillarPlacementError,
    Rock,
    WorldPoint,
)
from .logging_utils import colored, Color, LOG_TAG_DETERMINISTIC, log_info
from .robot import Robot, RobotAction, RobotEmote
from .schemas import RobotState
from .shared import SharedResource


# =============================
# Tag adapters
# =============================

_ACTION_TAGS: Dict[str, RobotAction] = {action.value: action for action in RobotAction}
_EMOTE_TAGS: Dict[str, RobotEmote] = {emote.value: emote for emote in RobotEmote}


def parse_action(tag: str) -> RobotAction:
    """Map a shell action tag ("walking", "dance", ...) to RobotAction; unknown tags mean IDLE."""
    return _ACTION_TAGS.get(tag, RobotAction.IDLE)


def parse_emote(tag: str) -> RobotEmote:
    """Map a shell emote tag ("wave", "thumbsup", ...) to RobotEmote; unknown tags mean NONE."""
    return _EMOTE_TAGS.get(tag, RobotEmote.NONE)


def _check_delta(delta: float) -> None:
    if not (math.isfinite(delta) and delta > 0):
        raise ValueError(f"delta must be a positive number of seconds (got {delta})")


class Orchestrator:
    """
    Command surface over one grid and one robot.

    Fully decoupled - accepts the grid and robot as parameters.
    No window, no renderer, no module-level singletons.
    """

    def __init__(
        self,
        grid: Optional[Grid] = None,
        robot: Optional[Robot] = None,
        config: type = Config,
        tick_listeners: Optional[List[Callable[[int, RobotState], None]]] = None,
    ):
        """Initialize orchestrator with its resources injected.

        Args:
            grid: Optional Grid; defaults to an empty GRID_WIDTH x GRID_HEIGHT grid
            robot: Optional Robot; defaults to one at the world origin moving at ROBOT_SPEED
            config: Configuration class (Config or a subclass overriding values)
            tick_listeners: Optional callables invoked after each tick of ``run``
                with (tick, robot_state).
        """
        self.config = config
        grid = grid or Grid(
            config.GRID_WIDTH,
            config.GRID_HEIGHT,
            pillar_size=config.PILLAR_SIZE,
            pillar_max_attempts=config.PILLAR_MAX_ATTEMPTS,
        )
        robot = robot or Robot(0.0, 0.0, config.ROBOT_SPEED)

        # PillarPlacementError rolls the grid back itself, so it must not poison the lock
        self.grid = SharedResource(
            grid,
            name="grid",
            timeout=config.LOCK_TIMEOUT_SECONDS,
            recoverable=(PillarPlacementError,),
        )
        self.robot = SharedResource(robot, name="robot", timeout=config.LOCK_TIMEOUT_SECONDS)

        self.tick_listeners = tick_listeners or []
        self.run_id: UUID = uuid4()

    # ------------------------------------------------------------------
    # Startup properties
    # ------------------------------------------------------------------

    def get_init_props(self) -> GridProps:
        with self.grid.access() as grid:
            return GridProps(
                width=grid.width,
                height=grid.height,
                character_occupy_width=self.config.CHARACTER_OCCUPY_WIDTH,
                character_occupy_height=self.config.CHARACTER_OCCUPY_HEIGHT,
            )

    def get_init_point(self) -> Tuple[int, int]:
        """Index of the center cell, where the renderer frames its camera."""
        with self.grid.access() as grid:
            return grid.width // 2, grid.height // 2

    # ------------------------------------------------------------------
    # Coordinate queries
    # ------------------------------------------------------------------

    def world_to_cell(self, x: float, z: float) -> Optional[GridPointState]:
        with self.grid.access() as grid:
            point = grid.world_to_cell(x, z)
        if point is None:
            return None
        return GridPointState(gx=point.gx, gz=point.gz)

    def cell_to_world(self, gx: int, gz: int) -> Optional[WorldPoint]:
        """Cell corner in world space, or None for indices outside the grid."""
        with self.grid.access() as grid:
            if not grid.in_bounds(gx, gz):
                return None
            x, z = grid.cell_to_world(gx, gz)
        return WorldPoint(x=x, z=z)

    @staticmethod
    def snap_to_grid(x: float, z: float) -> WorldPoint:
        """Round a picked world point to whole units, as the renderer's cursor does."""
        return WorldPoint(x=float(round(x)), z=float(round(z)))

    # ------------------------------------------------------------------
    # Obstacles
    # ------------------------------------------------------------------

    def place_flag(self, x: float, z: float) -> bool:
        with self.grid.access() as grid:
            return grid.place_flag(x, z)

    def clear_flag(self) -> None:
        with self.grid.access() as grid:
            grid.clear_flag()

    def generate_pillars(self, count: int) -> List[Pillar]:
        with self.grid.access() as grid:
            return grid.generate_pillars(count)

    def generate_rocks(self, count: int) -> List[Rock]:
        with self.grid.access() as grid:
            return grid.generate_rocks(count)

    # ------------------------------------------------------------------
    # Robot
    # ------------------------------------------------------------------

    def set_robot_target(self, x: float, z: float) -> Optional[List[WorldPoint]]:
        """Plan a route to ``(x, z)`` and start the robot on it.

        Returns the waypoints, or None when the target is unreachable (the robot
        then keeps whatever it was doing).
        """
        with self.grid.access() as grid:
            layout = grid.snapshot()

        with self.robot.access() as robot:
            path = robot.set_target(layout, x, z)

        if path is None:
            return None
        log_info(f"Robot target updated to ({x}, {z}) via {len(path)} waypoints")
        return [WorldPoint(x=point.x, z=point.z) for point in path]

    def set_robot_action(self, tag: str) -> RobotAction:
        action = parse_action(tag)
        with self.robot.access() as robot:
            robot.set_action(action)
        return action

    def set_robot_emote(self, tag: str) -> RobotEmote:
        emote = parse_emote(tag)
        with self.robot.access() as robot:
            robot.set_emote(emote)
        return emote

    def update_robot(self, delta: float) -> RobotState:
        """Advance the robot one tick of ``delta`` seconds.

        Raises:
            ValueError: ``delta`` is not a positive finite number. The robot lock
                is never taken, so the robot stays usable.
        """
        _check_delta(delta)
        with self.robot.access() as robot:
            robot.update(delta)
            return robot.state()

    def get_robot_state(self) -> RobotState:
        with self.robot.access() as robot:
            return robot.state()

    def get_robot_point(self) -> Optional[GridPointState]:
        """Cell the robot currently stands in."""
        with self.robot.access() as robot:
            current = robot.current
        return self.world_to_cell(current.x, current.z)

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def run(self, num_ticks: int, delta: float, *, stop_when_idle: bool = True) -> Dict[str, Any]:
        """Advance the robot for up to ``num_ticks`` fixed steps of ``delta`` seconds.

        Returns:
            Dict with run_id, ticks_completed and final_state
        """
        _check_delta(delta)

        print(colored(f"{LOG_TAG_DETERMINISTIC} Starting run {self.run_id}: up to {num_ticks} ticks of {delta}s", Color.BLUE))

        ticks_completed = 0
        state = self.get_robot_state()
        for tick in range(1, num_ticks + 1):
            state = self.update_robot(delta)
            ticks_completed = tick

            for listener in self.tick_listeners:
                listener(tick, state)

            if stop_when_idle and not state.is_moving:
                break

        return {
            "run_id": self.run_id,
            "ticks_completed": ticks_completed,
            "final_state": state,
        }
