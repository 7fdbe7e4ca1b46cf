"""Save pipeline: stage image bytes locally, register them, file them into an album.

The pipeline never raises for expected failures. Every failure is logged with its
cause and turned into a generic :class:`SaveOutcome` for the user.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional, Union

import requests
from PIL import Image, UnidentifiedImageError

from .errors import MediaPermissionError, NetworkError, PersistenceError, WallpaperStudioError
from .media_library import MediaAsset, MediaLibrary
from .models import GeneratedImage, ImageCandidate, SaveOutcome
from .permissions import PermissionGate
from .utils import ensure_dir, unique_path

logger = logging.getLogger(__name__)

DEFAULT_ALBUM = "Wallpapers"

SAVED_TITLE = "Wallpaper Saved"
SAVED_MESSAGE = (
    "Wallpaper has been saved to your gallery. You can set it as your background "
    "from your device's wallpaper settings."
)
FAILED_TITLE = "Error"
FAILED_MESSAGE = "Failed to save wallpaper. Please try again."
PERMISSION_TITLE = "Permission required"
PERMISSION_MESSAGE = "Please enable media library access in settings"

DOWNLOAD_CHUNK_SIZE = 64 * 1024

SaveSource = Union[ImageCandidate, GeneratedImage, str]


def download_to_file(url: str, destination: Path, session: Optional[requests.Session] = None) -> Path:
    """Stream ``url`` into ``destination``.

    Raises:
        NetworkError: On transport failure or a non-200 status.
        PersistenceError: If the file cannot be written.
    """

    if session is None:
        with requests.Session() as owned:
            return download_to_file(url, destination, session=owned)

    http = session
    logger.info("Downloading %s -> %s", url, destination.name)
    try:
        response = http.get(url, stream=True)
    except requests.RequestException as exc:
        raise NetworkError(f"Download of {url} failed: {exc}") from exc

    try:
        if response.status_code != 200:
            raise NetworkError(f"Download of {url} returned status {response.status_code}")
        with open(destination, "wb") as fh:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    fh.write(chunk)
    except requests.RequestException as exc:
        raise NetworkError(f"Download of {url} interrupted: {exc}") from exc
    except OSError as exc:
        raise PersistenceError(f"Could not write {destination}: {exc}") from exc
    finally:
        response.close()
    return destination


def write_generated_image(image: GeneratedImage, destination: Path) -> Path:
    """Decode the base64 payload and write the raw bytes.

    Raises:
        PersistenceError: If the payload is not base64 or the file cannot be written.
    """

    try:
        data = image.decode()
    except ValueError as exc:
        raise PersistenceError(str(exc)) from exc
    try:
        destination.write_bytes(data)
    except OSError as exc:
        raise PersistenceError(f"Could not write {destination}: {exc}") from exc
    logger.debug("Wrote %d bytes to %s", len(data), destination)
    return destination


def verify_staged_file(path: Path) -> None:
    """Check the staged file exists, is non-empty and opens as an image.

    Raises:
        PersistenceError: If any check fails.
    """

    if not path.is_file() or path.stat().st_size == 0:
        raise PersistenceError("file not created")
    try:
        with Image.open(path) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise PersistenceError(f"file is not a readable image: {exc}") from exc


class WallpaperSaver:
    """Persists a selected or generated wallpaper into the media library.

    Args:
        library: Media library receiving the asset.
        permissions: Gate consulted before anything is written.
        staging_dir: App-private directory for downloaded or decoded bytes.
        album: Album name; created on first save, appended afterwards.
        session: requests session used for downloads; one is created and reused when omitted.
        clock: Seconds-since-epoch source used to name generated files.
    """

    def __init__(
        self,
        library: MediaLibrary,
        permissions: PermissionGate,
        staging_dir: Path,
        album: str = DEFAULT_ALBUM,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.library = library
        self.permissions = permissions
        self.staging_dir = Path(staging_dir)
        self.album = album
        self.session = session or requests.Session()
        self.clock = clock

    def save_to_library(self, source: SaveSource) -> SaveOutcome:
        """Save ``source`` and report the outcome.

        ``source`` may be a search candidate, a generated image, a data URL or a
        plain http(s) URL.
        """

        try:
            asset = self._save(source)
        except MediaPermissionError as exc:
            logger.warning("Save blocked: %s", exc)
            return SaveOutcome(success=False, title=PERMISSION_TITLE, message=PERMISSION_MESSAGE)
        except WallpaperStudioError as exc:
            logger.error("Error saving wallpaper: %s", exc, exc_info=True)
            return SaveOutcome(success=False, title=FAILED_TITLE, message=FAILED_MESSAGE)

        return SaveOutcome(success=True, title=SAVED_TITLE, message=SAVED_MESSAGE, asset_uri=asset.uri)

    def _save(self, source: SaveSource) -> MediaAsset:
        if not self.permissions.granted:
            raise MediaPermissionError("media library access not granted")

        try:
            ensure_dir(self.staging_dir)
        except RuntimeError as exc:
            raise PersistenceError(str(exc)) from exc

        staged = self._materialize(source)
        verify_staged_file(staged)

        asset = self.library.create_asset(staged)
        album = self.library.get_album(self.album)
        if album is None:
            self.library.create_album(self.album, asset)
        else:
            self.library.add_assets_to_album([asset], album)
        logger.info("Saved %s to album '%s'", asset.filename, self.album)
        return asset

    def _materialize(self, source: SaveSource) -> Path:
        if isinstance(source, str) and source.startswith("data:"):
            try:
                source = GeneratedImage.from_data_url(source)
            except ValueError as exc:
                raise PersistenceError(str(exc)) from exc

        if isinstance(source, GeneratedImage):
            destination = unique_path(self.staging_dir, self._timestamp_stem(), source.extension)
            return write_generated_image(source, destination)

        if isinstance(source, ImageCandidate):
            url = source.display_url
            destination = unique_path(self.staging_dir, f"wallpaper-{source.id}", "jpg")
        else:
            url = source
            destination = unique_path(self.staging_dir, self._timestamp_stem(), "jpg")

        if not url:
            raise PersistenceError("no image URL to download")
        return download_to_file(url, destination, session=self.session)

    def _timestamp_stem(self) -> str:
        return f"wallpaper-{int(self.clock() * 1000)}"


__all__ = [
    "DEFAULT_ALBUM",
    "SAVED_MESSAGE",
    "FAILED_MESSAGE",
    "PERMISSION_MESSAGE",
    "download_to_file",
    "write_generated_image",
    "verify_staged_file",
    "WallpaperSaver",
]
