from .floor_manager import FloorManager

__all__ = [
    "FloorManager",
]
