"""Media library access gate.

Screens ask a gate whether saving is allowed. Hosts decide how access is granted:
``StaticPermissionGate`` answers from configuration (tests, headless runs) and
``PromptPermissionGate`` asks the user once through a callback.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PermissionStatus(str, Enum):
    """Media library access state."""

    UNDETERMINED = "undetermined"
    GRANTED = "granted"
    DENIED = "denied"


class PermissionGate:
    """Interface for media library access checks."""

    def get_status(self) -> PermissionStatus:
        """Return the current status without prompting."""
        raise NotImplementedError

    def request(self) -> PermissionStatus:
        """Prompt for access if still undetermined and return the resulting status."""
        raise NotImplementedError

    @property
    def granted(self) -> bool:
        return self.get_status() is PermissionStatus.GRANTED


class StaticPermissionGate(PermissionGate):
    """Gate with a fixed answer; ``request`` counts calls but never changes the answer."""

    def __init__(self, status: PermissionStatus = PermissionStatus.GRANTED):
        self.status = status
        self.requests = 0

    def get_status(self) -> PermissionStatus:
        return self.status

    def request(self) -> PermissionStatus:
        self.requests += 1
        return self.status


class PromptPermissionGate(PermissionGate):
    """Gate that asks once per session through ``ask`` and remembers the answer."""

    def __init__(self, ask: Callable[[], bool], status: Optional[PermissionStatus] = None):
        self._ask = ask
        self._status = status or PermissionStatus.UNDETERMINED

    def get_status(self) -> PermissionStatus:
        return self._status

    def request(self) -> PermissionStatus:
        if self._status is PermissionStatus.UNDETERMINED:
            self._status = PermissionStatus.GRANTED if self._ask() else PermissionStatus.DENIED
            logger.info("Media library access %s", self._status.value)
        return self._status


__all__ = ["PermissionStatus", "PermissionGate", "StaticPermissionGate", "PromptPermissionGate"]
