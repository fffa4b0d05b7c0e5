"""
Game configuration system for saving/loading user preferences.
"""

import json
from pathlib import Path
from typing import Optional, Dict, Any, Tuple

from settings import FOV_RADIUS, WINDOW_HEIGHT, WINDOW_WIDTH
from engine.error_handler import get_logger, log_error

log = get_logger("config")

# Config file location
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CONFIG_DIR.mkdir(exist_ok=True)
CONFIG_FILE = CONFIG_DIR / "settings.json"


class GameConfig:
    """Manages game configuration/settings."""

    def __init__(self) -> None:
        self.width: int = WINDOW_WIDTH
        self.height: int = WINDOW_HEIGHT
        self.fullscreen: bool = False
        self.fov_radius: int = FOV_RADIUS
        self.save_slot: int = 1
        self.seed: Optional[int] = None  # None = random run
        self.telemetry_enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for saving."""
        return {
            "width": self.width,
            "height": self.height,
            "fullscreen": self.fullscreen,
            "fov_radius": self.fov_radius,
            "save_slot": self.save_slot,
            "seed": self.seed,
            "telemetry_enabled": self.telemetry_enabled,
        }

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Load config from dictionary."""
        self.width = int(data.get("width", WINDOW_WIDTH))
        self.height = int(data.get("height", WINDOW_HEIGHT))
        self.fullscreen = bool(data.get("fullscreen", False))
        self.fov_radius = int(data.get("fov_radius", FOV_RADIUS))
        self.save_slot = int(data.get("save_slot", 1))
        seed = data.get("seed")
        self.seed = int(seed) if seed is not None else None
        self.telemetry_enabled = bool(data.get("telemetry_enabled", True))

    def get_resolution(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def save(self, path: Optional[Path] = None) -> bool:
        """Save config to file."""
        target = path or CONFIG_FILE
        try:
            with target.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            return True
        except OSError as e:
            log_error(e, "saving config")
            return False

    def load(self, path: Optional[Path] = None) -> bool:
        """Load config from file."""
        source = path or CONFIG_FILE
        if not source.exists():
            return False

        try:
            with source.open("r", encoding="utf-8") as f:
                data = json.load(f)
            self.from_dict(data)
            return True
        except (OSError, ValueError, TypeError, AttributeError) as e:
            log_error(e, "loading config")
            return False


# Global config instance
_config = GameConfig()


def get_config() -> GameConfig:
    """Get the global config instance."""
    return _config


def load_config() -> GameConfig:
    """Load and return the config."""
    if _config.load():
        log.info("Loaded config from %s", CONFIG_FILE)
    return _config


def save_config() -> bool:
    """Save the global config."""
    return _config.save()
