"""View state values shared by the gallery and generate screens."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from ..models import SaveOutcome
from ..permissions import PermissionGate, PermissionStatus
from ..persistence import WallpaperSaver

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]

PERMISSION_REQUIRED_TITLE = "Permission Required"
PERMISSION_REQUIRED_MESSAGE = "Please grant media library permissions to save wallpapers"


@dataclass(frozen=True)
class Idle:
    """Nothing fetched yet."""


@dataclass(frozen=True)
class Loading:
    """An operation is in flight; triggering controls are disabled."""


@dataclass(frozen=True)
class Loaded:
    """Operation finished with ``data``."""

    data: Any


@dataclass(frozen=True)
class Error:
    """Operation failed; ``message`` is what the user was shown."""

    message: str


ViewState = Union[Idle, Loading, Loaded, Error]

IDLE = Idle()
LOADING = Loading()


class PreviewMode(str, Enum):
    """Visibility of the selected-image preview."""

    CLOSED = "closed"
    MODAL = "modal"
    FULL_SCREEN = "full_screen"


def log_notifier(title: str, message: str) -> None:
    """Default notifier: write the alert to the log."""
    logger.info("%s: %s", title, message)


class Screen:
    """Common plumbing: permission prompt on mount and the save-state guard."""

    def __init__(
        self,
        saver: WallpaperSaver,
        permissions: PermissionGate,
        notify: Optional[Notifier] = None,
    ):
        self.saver = saver
        self.permissions = permissions
        self.notify = notify or log_notifier
        self.state: ViewState = IDLE
        self.save_state: ViewState = IDLE
        self._mounted = False

    @property
    def is_loading(self) -> bool:
        return isinstance(self.state, Loading)

    @property
    def is_saving(self) -> bool:
        return isinstance(self.save_state, Loading)

    @property
    def busy(self) -> bool:
        return self.is_loading or self.is_saving

    def mount(self) -> None:
        """Ask for media library access once per session."""
        if self._mounted:
            return
        self._mounted = True
        if self.permissions.request() is not PermissionStatus.GRANTED:
            self.notify(PERMISSION_REQUIRED_TITLE, PERMISSION_REQUIRED_MESSAGE)

    def _run_save(self, source: Any) -> Optional[SaveOutcome]:
        if self.busy:
            logger.debug("Save ignored: another operation is in flight")
            return None
        self.save_state = LOADING
        try:
            outcome = self.saver.save_to_library(source)
        except Exception:
            self.save_state = IDLE
            raise
        self.save_state = Loaded(outcome) if outcome.success else Error(outcome.message)
        self.notify(outcome.title, outcome.message)
        return outcome


__all__ = [
    "Notifier",
    "Idle",
    "Loading",
    "Loaded",
    "Error",
    "ViewState",
    "IDLE",
    "LOADING",
    "PreviewMode",
    "log_notifier",
    "Screen",
]
