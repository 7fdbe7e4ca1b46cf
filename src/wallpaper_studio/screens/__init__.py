"""Screen controllers: gallery (search) and generate (prompt)."""

from .gallery import GalleryScreen
from .generate import GenerateScreen
from .state import IDLE, LOADING, Error, Idle, Loaded, Loading, PreviewMode, ViewState

__all__ = [
    "GalleryScreen",
    "GenerateScreen",
    "IDLE",
    "LOADING",
    "Idle",
    "Loading",
    "Loaded",
    "Error",
    "PreviewMode",
    "ViewState",
]
