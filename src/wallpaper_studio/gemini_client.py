"""Thin wrapper around Google Gemini prompt-to-wallpaper generation.

This module isolates the SDK client so screens can stay framework-agnostic.
The implementation uses the official ``google-genai`` package and returns the
first inline image as a :class:`~wallpaper_studio.models.GeneratedImage`.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional

import httpx
from dotenv import load_dotenv
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .config import GenerationSpec
from .errors import GenerationError, NetworkError
from .models import GeneratedImage

logger = logging.getLogger(__name__)
# Elevate to DEBUG if GEMINI_DEBUG is set
if os.getenv("GEMINI_DEBUG"):
    logger.setLevel(logging.DEBUG)

NO_IMAGE_MESSAGE = "No image was generated in the response"


@dataclass
class GeminiSettings:
    """Runtime settings required to call the Gemini API."""

    api_key: str
    model: Optional[str] = None

    @classmethod
    def from_env(cls) -> "GeminiSettings":
        """Load settings from environment variables or .env.

        Raises:
            RuntimeError: If no API key is available.
        """

        load_dotenv()
        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY is not set. Create a .env or export the variable.")

        model = (os.getenv("GEMINI_IMAGE_MODEL") or "").strip() or None
        return cls(api_key=api_key, model=model)


SETTINGS: GeminiSettings | None = None
CLIENT: genai.Client | None = None


def _get_settings() -> GeminiSettings:
    global SETTINGS
    if SETTINGS is None:
        SETTINGS = GeminiSettings.from_env()
    return SETTINGS


def _get_client() -> genai.Client:
    global CLIENT
    if CLIENT is None:
        CLIENT = genai.Client(api_key=_get_settings().api_key)
    return CLIENT


def _get_error_json(exc: genai_errors.APIError) -> dict:
    """Extract JSON error data from APIError (version-compatible)."""
    for attr in ["response_json", "details", "json", "error_data", "data"]:
        data = getattr(exc, attr, None)
        if isinstance(data, dict) and data:
            return data
    return {}


def build_wallpaper_prompt(prompt: str, template: Optional[str] = None) -> str:
    """Wrap the user's prompt in the lock-screen wallpaper template."""

    template = template or GenerationSpec().prompt_template
    return template.format(prompt=prompt.strip())


def build_generation_config(spec: GenerationSpec) -> types.GenerateContentConfig:
    """Sampling configuration requesting an image-bearing response."""

    return types.GenerateContentConfig(
        temperature=spec.temperature,
        top_p=spec.top_p,
        top_k=spec.top_k,
        max_output_tokens=spec.max_output_tokens,
        response_modalities=["IMAGE", "TEXT"],
        response_mime_type="text/plain",
    )


def generate_wallpaper(
    prompt: str,
    *,
    spec: Optional[GenerationSpec] = None,
    client: Any = None,
) -> GeneratedImage:
    """Generate one wallpaper image from a free-text prompt.

    Args:
        prompt: User prompt; it is wrapped in ``spec.prompt_template``.
        spec: Model and sampling settings (defaults to :class:`GenerationSpec`).
        client: ``genai.Client`` or compatible object; the cached module client when omitted.

    Returns:
        The first inline image found in the response.

    Raises:
        ValueError: If the prompt is blank.
        NetworkError: If the API call fails.
        GenerationError: If the response carries no inline image.
    """

    if not prompt or not prompt.strip():
        raise ValueError("Prompt must not be empty")

    spec = spec or GenerationSpec()
    if client is None:
        client = _get_client()
        env_model = _get_settings().model
        if env_model:
            spec = replace(spec, model=env_model)

    full_prompt = build_wallpaper_prompt(prompt, spec.prompt_template)
    logger.info("Calling Gemini image model: %s", spec.model)
    logger.debug("Prompt: %s", full_prompt)

    try:
        chat = client.chats.create(
            model=spec.model,
            config=build_generation_config(spec),
            history=[],
        )
        response = chat.send_message(full_prompt)
    except genai_errors.APIError as exc:
        error_data = _get_error_json(exc)
        payload = json.dumps(error_data, ensure_ascii=False) if error_data else str(exc)
        logger.error("Gemini API error on %s: %s", spec.model, payload)
        raise NetworkError(f"Gemini request failed: {exc}") from exc
    except (httpx.HTTPError, OSError) as exc:
        logger.error("Transport error calling Gemini model %s: %s", spec.model, exc)
        raise NetworkError(f"Gemini request failed: {exc}") from exc

    image = extract_inline_image(response)
    if image is None:
        _debug_dump_response(response, level=logging.INFO)
        raise GenerationError(NO_IMAGE_MESSAGE)

    logger.info("Received %s image (%d base64 chars)", image.mime_type, len(image.payload))
    return image


def _iter_parts(response: Any) -> Iterable[Any]:
    # candidates -> content.parts, in response order
    for cand in getattr(response, "candidates", None) or []:
        content = getattr(cand, "content", None)
        if content is None:
            continue
        for part in getattr(content, "parts", None) or []:
            yield part


def extract_inline_image(response: Any) -> Optional[GeneratedImage]:
    """Return the first part carrying inline image bytes, across all candidates.

    Parts without ``inline_data`` or with empty data are skipped; later images are ignored.
    """

    for part in _iter_parts(response):
        inline = getattr(part, "inline_data", None)
        if inline is None:
            continue
        data = getattr(inline, "data", None)
        mime_type = getattr(inline, "mime_type", None) or "image/png"
        if isinstance(data, memoryview):
            data = data.tobytes()
        if isinstance(data, (bytes, bytearray)) and data:
            return GeneratedImage.from_bytes(mime_type, bytes(data))
        if isinstance(data, str) and data:
            # already base64 (REST-shaped payloads)
            return GeneratedImage(mime_type=mime_type, payload=data)
        logger.debug("Skipping inline_data part with no usable bytes (mime=%s)", mime_type)
    return None


def _debug_dump_response(response: Any, level: int = logging.DEBUG) -> None:
    """Log a lightweight summary of the response for debugging."""

    try:
        cands = getattr(response, "candidates", None) or []
        logger.log(level, "Response summary: candidates=%d", len(cands))
        for c_idx, cand in enumerate(cands):
            content = getattr(cand, "content", None)
            cand_parts = getattr(content, "parts", None) or []
            logger.log(level, "  cand[%d]: parts=%d finish=%s", c_idx, len(cand_parts), getattr(cand, "finish_reason", None))
            for p_idx, part in enumerate(cand_parts):
                inline = getattr(part, "inline_data", None)
                mime = getattr(inline, "mime_type", None) if inline else None
                text = getattr(part, "text", None)
                logger.log(level, "    part[%d]: inline=%s mime=%s text=%r", p_idx, bool(inline), mime, (text or "")[:80])
    except Exception:  # pragma: no cover - debug helper
        logger.log(level, "Could not dump response summary", exc_info=True)


__all__ = [
    "NO_IMAGE_MESSAGE",
    "GeminiSettings",
    "build_wallpaper_prompt",
    "build_generation_config",
    "generate_wallpaper",
    "extract_inline_image",
]
