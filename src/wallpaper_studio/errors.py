"""Exception taxonomy shared by the search, generation and save paths."""
from __future__ import annotations


class WallpaperStudioError(Exception):
    """Base exception for every recoverable wallpaper studio failure."""
    pass


class NetworkError(WallpaperStudioError):
    """Transport failure or non-success status from an external API."""
    pass


class GenerationError(WallpaperStudioError):
    """The generation call succeeded but carried no usable image."""
    pass


class MediaPermissionError(WallpaperStudioError):
    """Media library access has not been granted."""
    pass


class PersistenceError(WallpaperStudioError):
    """Staged file missing, or asset/album registration failed."""
    pass


__all__ = [
    "WallpaperStudioError",
    "NetworkError",
    "GenerationError",
    "MediaPermissionError",
    "PersistenceError",
]
