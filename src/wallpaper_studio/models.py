"""Transient data carried between the image sources, the screens and the save pipeline."""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Dict, Optional


def extension_for_mime(mime_type: str) -> str:
    """Map a MIME type to the file extension used for staged files.

    ``image/jpeg`` becomes ``jpg``; anything else, including unknown types, becomes ``png``.
    """

    return "jpg" if mime_type == "image/jpeg" else "png"


@dataclass(frozen=True)
class ImageVariants:
    """Resolution variants offered by the search provider for one photo."""

    medium: str = ""
    large: str = ""
    portrait: str = ""
    original: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ImageVariants":
        return cls(
            medium=raw.get("medium") or "",
            large=raw.get("large") or "",
            portrait=raw.get("portrait") or "",
            original=raw.get("original") or "",
        )


@dataclass(frozen=True)
class ImageCandidate:
    """One photo returned by the search provider."""

    id: int
    variants: ImageVariants
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Candidate {self.id} has invalid dimensions {self.width}x{self.height}"
            )

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ImageCandidate":
        """Build a candidate from one entry of the ``photos`` array.

        Raises:
            ValueError: If the entry is not an object, a mandatory field is missing or
                not a number, or dimensions are not positive.
        """

        if not isinstance(raw, dict):
            raise ValueError(f"Photo entry is not an object: {raw!r}")
        src = raw.get("src")
        try:
            return cls(
                id=int(raw["id"]),
                variants=ImageVariants.from_dict(src if isinstance(src, dict) else {}),
                width=int(raw["width"]),
                height=int(raw["height"]),
            )
        except KeyError as exc:
            raise ValueError(f"Missing photo field: {exc}") from exc
        except TypeError as exc:
            raise ValueError(f"Invalid photo field: {exc}") from exc

    @property
    def ratio(self) -> float:
        """Height divided by width."""
        return self.height / self.width

    @property
    def display_url(self) -> str:
        """Portrait variant when present, else the large one."""
        return self.variants.portrait or self.variants.large


@dataclass(frozen=True)
class GeneratedImage:
    """Image bytes produced by the generation provider, kept base64-encoded."""

    mime_type: str
    payload: str

    @classmethod
    def from_bytes(cls, mime_type: str, data: bytes) -> "GeneratedImage":
        return cls(mime_type=mime_type, payload=base64.b64encode(data).decode("ascii"))

    @classmethod
    def from_data_url(cls, data_url: str) -> "GeneratedImage":
        """Split ``data:<mime>;base64,<payload>`` into its parts.

        Raises:
            ValueError: If the string is not a base64 data URL.
        """

        header, sep, payload = data_url.partition(",")
        if not sep or not header.startswith("data:") or not header.endswith(";base64"):
            raise ValueError("Not a base64 data URL")
        mime_type = header[len("data:"):-len(";base64")]
        if not mime_type or not payload:
            raise ValueError("Data URL is missing its MIME type or payload")
        return cls(mime_type=mime_type, payload=payload)

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.payload}"

    @property
    def extension(self) -> str:
        return extension_for_mime(self.mime_type)

    def decode(self) -> bytes:
        """Return the raw image bytes.

        Raises:
            ValueError: If the payload is not valid base64.
        """

        try:
            return base64.b64decode(self.payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"Invalid base64 payload: {exc}") from exc


@dataclass(frozen=True)
class SaveOutcome:
    """Result of one save attempt, shown once to the user."""

    success: bool
    message: str
    title: str = ""
    asset_uri: Optional[str] = None


__all__ = [
    "extension_for_mime",
    "ImageVariants",
    "ImageCandidate",
    "GeneratedImage",
    "SaveOutcome",
]
