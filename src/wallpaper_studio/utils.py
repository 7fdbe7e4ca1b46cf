"""Utility helpers for the wallpaper studio."""
from __future__ import annotations

import logging
import os
from pathlib import Path


def setup_logging(level: int = logging.INFO) -> None:
    """Configure global logging style for CLI use.

    Args:
        level: Logging level passed to ``logging.basicConfig``.
    """

    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
    )


def ensure_dir(path: Path) -> None:
    """Create directory if missing.

    Args:
        path: Directory path to create.

    Raises:
        RuntimeError: If the directory cannot be created.
    """

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:  # pragma: no cover - trivial wrapper
        raise RuntimeError(f"Could not create directory: {path}") from exc


def unique_path(directory: Path, stem: str, suffix: str) -> Path:
    """Return ``directory/stem.suffix``, adding ``-N`` when the name is taken."""

    candidate = directory / f"{stem}.{suffix}"
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem}-{counter}.{suffix}"
        counter += 1
    return candidate


def studio_root() -> Path:
    """Return base directory for studio data (env WALLPAPER_STUDIO_ROOT overrides)."""

    return Path(os.getenv("WALLPAPER_STUDIO_ROOT", "studio"))
