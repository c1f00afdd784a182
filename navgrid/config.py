"""
Navgrid Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Grid dimensions (cell counts). World coordinates span [-W/2, W/2) x [-H/2, H/2).
    GRID_WIDTH: int = int(os.getenv("GRID_WIDTH", "200"))
    GRID_HEIGHT: int = int(os.getenv("GRID_HEIGHT", "200"))

    # Footprint reported to the renderer for the robot model
    CHARACTER_OCCUPY_WIDTH: int = int(os.getenv("CHARACTER_OCCUPY_WIDTH", "2"))
    CHARACTER_OCCUPY_HEIGHT: int = int(os.getenv("CHARACTER_OCCUPY_HEIGHT", "2"))

    # Pillars occupy PILLAR_SIZE x PILLAR_SIZE cells
    PILLAR_SIZE: int = int(os.getenv("PILLAR_SIZE", "2"))
    # Random anchors tried per pillar before giving up. 0 retries forever.
    PILLAR_MAX_ATTEMPTS: int = int(os.getenv("PILLAR_MAX_ATTEMPTS", "10000"))

    # Robot speeds in world units per second
    ROBOT_SPEED: float = float(os.getenv("ROBOT_SPEED", "2.0"))
    WALK_SPEED: float = float(os.getenv("WALK_SPEED", "2.5"))
    RUN_SPEED: float = float(os.getenv("RUN_SPEED", "5.0"))

    # Seconds to wait for a shared resource lock. Negative waits forever.
    LOCK_TIMEOUT_SECONDS: float = float(os.getenv("LOCK_TIMEOUT_SECONDS", "-1"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are unusable."""
        if cls.GRID_WIDTH <= 0 or cls.GRID_HEIGHT <= 0:
            raise ValueError(
                f"GRID_WIDTH and GRID_HEIGHT must be positive (got {cls.GRID_WIDTH}x{cls.GRID_HEIGHT})"
            )

        if cls.PILLAR_SIZE <= 0:
            raise ValueError(f"PILLAR_SIZE must be positive (got {cls.PILLAR_SIZE})")

        if cls.PILLAR_SIZE > min(cls.GRID_WIDTH, cls.GRID_HEIGHT):
            raise ValueError(
                f"PILLAR_SIZE={cls.PILLAR_SIZE} does not fit in a "
                f"{cls.GRID_WIDTH}x{cls.GRID_HEIGHT} grid"
            )

        if cls.PILLAR_MAX_ATTEMPTS < 0:
            raise ValueError(
                "PILLAR_MAX_ATTEMPTS must be >= 0 (use 0 for unbounded retries)"
            )

        for name in ("ROBOT_SPEED", "WALK_SPEED", "RUN_SPEED"):
            if getattr(cls, name) <= 0:
                raise ValueError(f"{name} must be positive")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        attempts = cls.PILLAR_MAX_ATTEMPTS or "unbounded"
        lines = [
            "Navgrid Configuration:",
            f"  Grid: {cls.GRID_WIDTH}x{cls.GRID_HEIGHT}",
            f"  Pillar Size: {cls.PILLAR_SIZE} (max attempts: {attempts})",
            f"  Robot Speed: {cls.ROBOT_SPEED} (walk {cls.WALK_SPEED}, run {cls.RUN_SPEED})",
            f"  Lock Timeout: {cls.LOCK_TIMEOUT_SECONDS}s",
        ]
        return "\n".join(lines)
