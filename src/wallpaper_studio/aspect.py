"""Aspect-ratio filtering for phone wallpapers."""
from __future__ import annotations

import logging
from typing import List, Sequence

from .models import ImageCandidate

logger = logging.getLogger(__name__)

PORTRAIT_RATIO = 16 / 9
RATIO_TOLERANCE = 0.3


def matches_wallpaper_ratio(
    candidate: ImageCandidate,
    target: float = PORTRAIT_RATIO,
    tolerance: float = RATIO_TOLERANCE,
) -> bool:
    """Return True for portrait candidates whose height/width is within ``tolerance`` of ``target``."""

    return candidate.height > candidate.width and abs(candidate.ratio - target) < tolerance


def filter_wallpaper_ratio(
    candidates: Sequence[ImageCandidate],
    target: float = PORTRAIT_RATIO,
    tolerance: float = RATIO_TOLERANCE,
) -> List[ImageCandidate]:
    """Keep candidates close to the phone wallpaper ratio, preserving order.

    Falls back to the unfiltered input when nothing matches, so a non-empty input
    never yields an empty result.
    """

    kept = [c for c in candidates if matches_wallpaper_ratio(c, target, tolerance)]
    if not kept:
        if candidates:
            logger.info("No candidate matched ratio %.2f; showing all %d", target, len(candidates))
        return list(candidates)
    logger.debug("Ratio filter kept %d of %d candidates", len(kept), len(candidates))
    return kept


__all__ = ["PORTRAIT_RATIO", "RATIO_TOLERANCE", "matches_wallpaper_ratio", "filter_wallpaper_ratio"]
