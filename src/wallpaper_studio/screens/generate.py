"""Prompt-to-wallpaper screen."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from ..errors import GenerationError, WallpaperStudioError
from ..models import GeneratedImage, SaveOutcome
from ..permissions import PermissionGate
from ..persistence import WallpaperSaver
from .state import IDLE, LOADING, Error, Loaded, Notifier, Screen

logger = logging.getLogger(__name__)

EMPTY_PROMPT_MESSAGE = "Please enter a prompt."
GENERATE_FAILED_MESSAGE = "Failed to generate image"

GenerateFn = Callable[[str], GeneratedImage]


class GenerateScreen(Screen):
    """Controller behind the create-wallpaper tab.

    Starting a generation clears the previous image and error. A failed save
    leaves the generated image in place so it can be saved again.
    """

    def __init__(
        self,
        generate: GenerateFn,
        saver: WallpaperSaver,
        permissions: PermissionGate,
        notify: Optional[Notifier] = None,
    ):
        super().__init__(saver, permissions, notify)
        self._generate = generate
        self.prompt = ""

    @property
    def image(self) -> Optional[GeneratedImage]:
        return self.state.data if isinstance(self.state, Loaded) else None

    @property
    def error_message(self) -> Optional[str]:
        return self.state.message if isinstance(self.state, Error) else None

    @property
    def can_generate(self) -> bool:
        return not self.busy

    @property
    def can_save(self) -> bool:
        return self.image is not None and not self.busy

    def set_prompt(self, text: str) -> bool:
        """Edit the prompt; the field is read-only while generating."""
        if self.is_loading:
            return False
        self.prompt = text
        return True

    def generate(self, prompt: Optional[str] = None) -> bool:
        """Generate from ``prompt`` (or the current prompt).

        Returns False when the request was rejected: control disabled or blank prompt.
        """
        if not self.can_generate:
            logger.debug("Generate ignored: another operation is in flight")
            return False
        if prompt is not None:
            self.prompt = prompt
        if not self.prompt.strip():
            self.notify("Error", EMPTY_PROMPT_MESSAGE)
            return False

        self.state = LOADING
        self.save_state = IDLE
        try:
            image = self._generate(self.prompt)
        except GenerationError as exc:
            logger.error("Image generation error: %s", exc)
            self._fail(str(exc))
            return True
        except WallpaperStudioError as exc:
            logger.error("Image generation error: %s", exc, exc_info=True)
            self._fail(GENERATE_FAILED_MESSAGE)
            return True
        except Exception:
            # unexpected errors propagate, but the controls must not stay disabled
            self.state = Error(GENERATE_FAILED_MESSAGE)
            raise

        self.state = Loaded(image)
        return True

    def regenerate(self) -> bool:
        """Run the current prompt again."""
        return self.generate()

    def save(self) -> Optional[SaveOutcome]:
        """Save the generated image; returns None when there is nothing to save or the control is disabled."""
        image = self.image
        if image is None:
            return None
        return self._run_save(image)

    def _fail(self, message: str) -> None:
        self.state = Error(message)
        self.notify("Error", message)


__all__ = ["EMPTY_PROMPT_MESSAGE", "GENERATE_FAILED_MESSAGE", "GenerateScreen"]
