"""Wallpaper gallery screen: search, ratio filter, preview and save."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from ..aspect import filter_wallpaper_ratio
from ..config import RatioSpec
from ..errors import WallpaperStudioError
from ..models import ImageCandidate, SaveOutcome
from ..permissions import PermissionGate
from ..persistence import WallpaperSaver
from .state import LOADING, Error, Loaded, Loading, Notifier, PreviewMode, Screen

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load wallpapers"

SearchFn = Callable[[str], List[ImageCandidate]]


class GalleryScreen(Screen):
    """Controller behind the gallery tab.

    A failed refresh keeps the previously shown candidates available through
    :attr:`candidates`; only a successful refresh replaces them.

    Args:
        search: Keyword search returning candidates in provider order.
        saver: Save pipeline for the selected candidate.
        permissions: Media library access gate.
        query: Keywords used on every refresh.
        ratio: Target wallpaper ratio and tolerance.
        notify: Alert callback ``(title, message)``.
    """

    def __init__(
        self,
        search: SearchFn,
        saver: WallpaperSaver,
        permissions: PermissionGate,
        query: str = "nature",
        ratio: Optional[RatioSpec] = None,
        notify: Optional[Notifier] = None,
    ):
        super().__init__(saver, permissions, notify)
        self.search = search
        self.query = query
        self.ratio = ratio or RatioSpec()
        self.selected: Optional[ImageCandidate] = None
        self.preview = PreviewMode.CLOSED
        self._shown: Tuple[ImageCandidate, ...] = ()

    @property
    def candidates(self) -> Tuple[ImageCandidate, ...]:
        """Candidates to render; empty while a refresh is in flight."""
        if isinstance(self.state, Loading):
            return ()
        return self._shown

    @property
    def can_refresh(self) -> bool:
        return not self.busy

    @property
    def can_save(self) -> bool:
        return self.selected is not None and not self.busy

    def mount(self) -> None:
        """Load the first page and prompt for media library access."""
        if self._mounted:
            return
        self.refresh()
        super().mount()

    def refresh(self) -> bool:
        """Fetch a new random page; returns False when rejected because an operation is in flight."""
        if not self.can_refresh:
            logger.debug("Refresh ignored: another operation is in flight")
            return False

        self.state = LOADING
        try:
            photos = self.search(self.query)
            shown = filter_wallpaper_ratio(photos, self.ratio.target, self.ratio.tolerance)
        except WallpaperStudioError as exc:
            logger.error("Error fetching wallpapers: %s", exc, exc_info=True)
            self.state = Error(LOAD_FAILED_MESSAGE)
            self.notify("Error", LOAD_FAILED_MESSAGE)
            return True
        except Exception:
            # unexpected errors propagate, but the controls must not stay disabled
            self.state = Error(LOAD_FAILED_MESSAGE)
            raise

        self._shown = tuple(shown)
        self.state = Loaded(self._shown)
        logger.info("Showing %d of %d wallpapers", len(shown), len(photos))
        return True

    def select(self, candidate: ImageCandidate) -> None:
        """Open the preview modal for ``candidate``."""
        if candidate not in self._shown:
            raise ValueError(f"Candidate {candidate.id} is not in the current list")
        self.selected = candidate
        self.preview = PreviewMode.MODAL

    def select_index(self, index: int) -> ImageCandidate:
        shown: Sequence[ImageCandidate] = self.candidates
        if not 0 <= index < len(shown):
            raise IndexError(f"No wallpaper at position {index}")
        self.select(shown[index])
        return shown[index]

    def toggle_full_screen(self) -> None:
        if self.preview is PreviewMode.MODAL:
            self.preview = PreviewMode.FULL_SCREEN
        elif self.preview is PreviewMode.FULL_SCREEN:
            self.preview = PreviewMode.MODAL

    def close_preview(self) -> bool:
        """Close the preview; refused while a save is running."""
        if self.is_saving:
            return False
        self.preview = PreviewMode.CLOSED
        self.selected = None
        return True

    def save_selected(self) -> Optional[SaveOutcome]:
        """Save the selected candidate; returns None when nothing is selected or the control is disabled."""
        if self.selected is None:
            return None
        outcome = self._run_save(self.selected)
        if outcome is not None and outcome.success:
            self.close_preview()
        return outcome


__all__ = ["LOAD_FAILED_MESSAGE", "GalleryScreen"]
