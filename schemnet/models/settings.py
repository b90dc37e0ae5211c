"""
Settings - Scene configuration and its JSON persistence.

Stores defaults in the dataclass and user overrides in a JSON config file.
Only values that differ from the defaults are written back.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from .geometry import Point

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path.home() / ".schemnet"
_CONFIG_FILE = _CONFIG_DIR / "settings.json"


@dataclass
class Settings:
    """Options recognised by the scene and its items."""

    grid_size: int = 10
    show_grid: bool = True
    grid_point_size: int = 3
    antialiasing: bool = True
    route_straight_angles: bool = True
    debug: bool = False
    highlight_rect_padding: int = 10

    def snap_to_grid(self, point: Point) -> Point:
        """Round a point to the nearest multiple of grid_size."""
        if self.grid_size <= 0:
            return point
        size = self.grid_size
        return (float(round(point[0] / size) * size), float(round(point[1] / size) * size))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


def load_settings(config_path=None) -> Settings:
    """
    Load settings from a JSON config file.

    A missing file yields the defaults; an unreadable or corrupt file is
    logged and also yields the defaults.
    """
    path = Path(config_path) if config_path else _CONFIG_FILE
    if not path.exists():
        return Settings()
    try:
        with open(path) as f:
            overrides = json.load(f)
        if not isinstance(overrides, dict):
            raise ValueError("settings file does not contain an object")
        return Settings.from_dict(overrides)
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Failed to load settings config: %s", e)
        return Settings()


def save_settings(settings: Settings, config_path=None) -> None:
    """Save non-default settings to a JSON config file."""
    path = Path(config_path) if config_path else _CONFIG_FILE
    defaults = Settings().to_dict()
    overrides = {k: v for k, v in settings.to_dict().items() if v != defaults.get(k)}
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(overrides, f, indent=2)
    except OSError as e:
        logger.error("Failed to save settings: %s", e)
