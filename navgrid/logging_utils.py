"""Terminal output for navgrid.

Every line starts with a tag naming its category (grid change, robot step,
refusal, arrival, note), and the tag's color repeats it when the terminal
allows. Set NAVGRID_NO_COLOR to print plain tags only.
"""

import os
from enum import Enum


class Color(Enum):
    """Escape sequences used per output category."""

    BLUE = "\033[94m"      # grid edits and path searches
    YELLOW = "\033[93m"    # per-tick robot steps
    RED = "\033[91m"       # refused commands, unreachable targets
    GREEN = "\033[92m"     # robot arrivals, completed placements
    CYAN = "\033[96m"      # run and robot notes

    BOLD = "\033[1m"
    RESET = "\033[0m"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Return ``text`` wrapped in ``color``, or unchanged when NAVGRID_NO_COLOR is set."""
    if os.getenv("NAVGRID_NO_COLOR"):
        return text

    prefix = Color.BOLD.value + color.value if bold else color.value
    return f"{prefix}{text}{Color.RESET.value}"


def verbose_enabled() -> bool:
    """Per-tick motion output is only printed when NAVGRID_VERBOSE is truthy."""
    return os.getenv("NAVGRID_VERBOSE", "").lower() in {"1", "true", "yes"}


def log_deterministic(message: str) -> None:
    """Grid edit or path search (blue)."""
    print(colored(f"{LOG_TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_motion(message: str) -> None:
    """One robot step (yellow). Silent unless NAVGRID_VERBOSE is set."""
    if verbose_enabled():
        print(colored(f"{LOG_TAG_MOTION} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Refused command or unreachable target (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Run or robot note (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))


# Category tags, readable without color
LOG_TAG_DETERMINISTIC = "[•]"  # grid edit or search
LOG_TAG_MOTION = "[>]"         # robot step
LOG_TAG_ERROR = "[!]"          # refusal
LOG_TAG_SUCCESS = "[✓]"        # arrival or placement
LOG_TAG_INFO = "[i]"           # note
