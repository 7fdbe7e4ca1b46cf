"""Wallpaper Studio: stock-photo wallpaper gallery and prompt-driven wallpaper generation."""

from .aspect import filter_wallpaper_ratio
from .config import StudioConfig
from .errors import (
    GenerationError,
    MediaPermissionError,
    NetworkError,
    PersistenceError,
    WallpaperStudioError,
)
from .models import GeneratedImage, ImageCandidate, ImageVariants, SaveOutcome
from .persistence import WallpaperSaver

__version__ = "0.1.0"

__all__ = [
    "filter_wallpaper_ratio",
    "StudioConfig",
    "WallpaperStudioError",
    "NetworkError",
    "GenerationError",
    "MediaPermissionError",
    "PersistenceError",
    "GeneratedImage",
    "ImageCandidate",
    "ImageVariants",
    "SaveOutcome",
    "WallpaperSaver",
]
