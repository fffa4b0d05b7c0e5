"""
Centralized error handling and logging system.

This module provides:
- Centralized error logging to files
- Custom exception types for the game's error categories
- Helpers for logging recoverable errors without crashing the turn loop
"""
import logging
import traceback
from pathlib import Path
from typing import Optional
from datetime import datetime

# Setup logging directory
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)

# Configure logger
logger = logging.getLogger("dungeon")
logger.setLevel(logging.DEBUG)

# Prevent duplicate handlers
if not logger.handlers:
    # File handler for detailed logs
    log_file = LOG_DIR / f"game_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    # Console handler for warnings/errors
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter('%(levelname)s: %(message)s')
    )

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """Child logger under the game's root logger (e.g. "dungeon.mapgen")."""
    return logger.getChild(name)


class GameError(Exception):
    """Base exception for game-specific errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class InvalidIndexError(GameError):
    """
    Two-entity access with equal or out-of-range roster indices.

    Always a caller bug; never caught by the game.
    """
    pass


class InventoryFullError(GameError):
    """The inventory has no free slot left."""
    pass


class NoValidTargetError(GameError):
    """A targeted item found nothing to act on."""
    pass


class SaveError(GameError):
    """Error during save/load operations."""
    pass


def log_error(
    error: Exception,
    context: str = "",
) -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Where the error occurred (e.g., "save_game", "load_game")
    """
    error_type = type(error).__name__
    error_msg = str(error)
    trace = traceback.format_exc()

    logger.error(
        f"Error in {context}: {error_type}: {error_msg}\n{trace}",
        exc_info=True
    )
