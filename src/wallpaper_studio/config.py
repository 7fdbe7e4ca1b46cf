"""Configuration loader for studio settings."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from .utils import studio_root

DEFAULT_PROMPT_TEMPLATE = (
    "High-quality smartphone wallpaper with aspect ratio 9:16, high resolution (1080x1920): "
    "{prompt}. Make it visually striking and suitable for a phone lock screen."
)


@dataclass
class SearchSpec:
    """Parameters for the keyword search provider."""

    query: str = "nature"
    per_page: int = 20
    page_range: Tuple[int, int] = (1, 50)
    orientation: str = "portrait"
    size: str = "large"

    def __post_init__(self) -> None:
        low, high = (int(p) for p in self.page_range)
        if low < 1 or high < low:
            raise ValueError(f"Invalid page_range: {self.page_range}")
        self.page_range = (low, high)
        if self.per_page < 1:
            raise ValueError(f"per_page must be positive, got {self.per_page}")


@dataclass
class GenerationSpec:
    """Sampling settings and prompt template for the generation provider."""

    model: str = "gemini-2.0-flash-exp-image-generation"
    temperature: float = 1.0
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 8192
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE

    def __post_init__(self) -> None:
        if "{prompt}" not in self.prompt_template:
            raise ValueError("prompt_template must contain '{prompt}'")
        try:
            self.prompt_template.format(prompt="")
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"prompt_template may only use the '{{prompt}}' placeholder: {exc!r}") from exc


@dataclass
class RatioSpec:
    """Target height:width ratio and accepted deviation."""

    target: float = 16 / 9
    tolerance: float = 0.3


@dataclass
class LibrarySpec:
    """Where saved wallpapers are staged and registered."""

    root: Path = field(default_factory=lambda: studio_root() / "library")
    staging_dir: Path = field(default_factory=lambda: studio_root() / "staging")
    album: str = "Wallpapers"

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        self.staging_dir = Path(self.staging_dir)


@dataclass
class StudioConfig:
    """Full configuration for both screens."""

    search: SearchSpec = field(default_factory=SearchSpec)
    generation: GenerationSpec = field(default_factory=GenerationSpec)
    ratio: RatioSpec = field(default_factory=RatioSpec)
    library: LibrarySpec = field(default_factory=LibrarySpec)

    @classmethod
    def default(cls) -> "StudioConfig":
        return cls()

    @classmethod
    def load(cls, path: Path) -> "StudioConfig":
        """Load configuration YAML into a ``StudioConfig`` instance.

        Every section is optional; keys left out keep their defaults.

        Args:
            path: Path to the YAML config file.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a section has unknown or invalid fields.
        """

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}

        if not isinstance(raw, dict):
            raise ValueError(f"Config root must be a mapping: {path}")

        try:
            search_raw = dict(raw.get("search") or {})
            if "page_range" in search_raw:
                search_raw["page_range"] = tuple(search_raw["page_range"])
            return cls(
                search=SearchSpec(**search_raw),
                generation=GenerationSpec(**(raw.get("generation") or {})),
                ratio=RatioSpec(**(raw.get("ratio") or {})),
                library=LibrarySpec(**_resolve_paths(raw.get("library") or {}, path.parent)),
            )
        except TypeError as exc:
            raise ValueError(f"Invalid config field: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display."""
        return {
            "search": {
                "query": self.search.query,
                "per_page": self.search.per_page,
                "page_range": list(self.search.page_range),
                "orientation": self.search.orientation,
                "size": self.search.size,
            },
            "generation": {
                "model": self.generation.model,
                "temperature": self.generation.temperature,
                "top_p": self.generation.top_p,
                "top_k": self.generation.top_k,
                "max_output_tokens": self.generation.max_output_tokens,
            },
            "ratio": {"target": self.ratio.target, "tolerance": self.ratio.tolerance},
            "library": {
                "root": str(self.library.root),
                "staging_dir": str(self.library.staging_dir),
                "album": self.library.album,
            },
        }


def _resolve_paths(section: Dict[str, Any], base: Path) -> Dict[str, Any]:
    # relative library paths are relative to the config file
    resolved = dict(section)
    for key in ("root", "staging_dir"):
        if key in resolved:
            candidate = Path(resolved[key])
            resolved[key] = candidate if candidate.is_absolute() else base / candidate
    return resolved


__all__ = [
    "DEFAULT_PROMPT_TEMPLATE",
    "SearchSpec",
    "GenerationSpec",
    "RatioSpec",
    "LibrarySpec",
    "StudioConfig",
]
