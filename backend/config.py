"""
Settings provider for the snake core.

Settings are read from the environment (and a local .env file via
python-dotenv) once, at session start. The core never writes them back.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dotenv import load_dotenv

from domain.constants import MAX_PLAYER_NAME_LENGTH
from domain.speed import NORMAL, SpeedTier, get_tier

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAME = "Player"
DEFAULT_SENSITIVITY = 1.0
MIN_SENSITIVITY = 0.5
MAX_SENSITIVITY = 2.0
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


class BoardSize(Enum):
    SMALL = ("Small", 15, 20)
    MEDIUM = ("Medium", 20, 30)
    LARGE = ("Large", 25, 35)

    def __init__(self, display_name: str, width: int, height: int):
        self.display_name = display_name
        self.width = width
        self.height = height


@dataclass(frozen=True)
class GameSettings:
    """Read-only inputs for one session."""

    board_width: int = BoardSize.MEDIUM.width
    board_height: int = BoardSize.MEDIUM.height
    speed_tier: SpeedTier = NORMAL
    control_sensitivity: float = DEFAULT_SENSITIVITY
    player_name: str = DEFAULT_PLAYER_NAME
    log_level: str = "INFO"


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return None
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive", name, raw)
        return None
    return value


def _board_size() -> BoardSize:
    raw = os.getenv('SNAKE_BOARD_SIZE', BoardSize.MEDIUM.name)
    try:
        return BoardSize[raw.strip().upper()]
    except KeyError:
        logger.warning("Unknown SNAKE_BOARD_SIZE=%r, using MEDIUM", raw)
        return BoardSize.MEDIUM


def _speed_tier() -> SpeedTier:
    raw = os.getenv('SNAKE_SPEED_TIER', NORMAL.label)
    try:
        return get_tier(raw)
    except ValueError as e:
        logger.warning("%s; using %s", e, NORMAL.label)
        return NORMAL


def _sensitivity() -> float:
    raw = os.getenv('SNAKE_CONTROL_SENSITIVITY')
    if raw is None:
        return DEFAULT_SENSITIVITY
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring SNAKE_CONTROL_SENSITIVITY=%r: not a number", raw)
        return DEFAULT_SENSITIVITY
    return min(MAX_SENSITIVITY, max(MIN_SENSITIVITY, value))


def load_settings() -> GameSettings:
    """
    Build GameSettings from environment variables.

    Recognised variables:
        SNAKE_BOARD_SIZE: SMALL, MEDIUM or LARGE (default MEDIUM)
        SNAKE_BOARD_WIDTH / SNAKE_BOARD_HEIGHT: override the preset
        SNAKE_SPEED_TIER: Beginner, Normal or Expert (default Normal)
        SNAKE_CONTROL_SENSITIVITY: 0.5 - 2.0 (default 1.0)
        SNAKE_PLAYER_NAME: stored name, truncated to 10 characters
        SNAKE_LOG_LEVEL: logging level name (default INFO)

    Invalid values are logged and replaced by their defaults.
    """
    load_dotenv()

    size = _board_size()
    player_name = os.getenv('SNAKE_PLAYER_NAME', DEFAULT_PLAYER_NAME).strip() or DEFAULT_PLAYER_NAME

    return GameSettings(
        board_width=_env_int('SNAKE_BOARD_WIDTH') or size.width,
        board_height=_env_int('SNAKE_BOARD_HEIGHT') or size.height,
        speed_tier=_speed_tier(),
        control_sensitivity=_sensitivity(),
        player_name=player_name[:MAX_PLAYER_NAME_LENGTH],
        log_level=os.getenv('SNAKE_LOG_LEVEL', 'INFO').upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
