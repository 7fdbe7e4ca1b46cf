"""Shared pytest fixtures for Wallpaper Studio tests."""

import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Callable, Generator
from unittest.mock import Mock

import pytest
from PIL import Image

from wallpaper_studio.media_library import MediaLibrary
from wallpaper_studio.models import ImageCandidate, ImageVariants
from wallpaper_studio.permissions import PermissionStatus, StaticPermissionGate
from wallpaper_studio.persistence import WallpaperSaver


def _encode(fmt: str, size=(9, 16)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color=(30, 60, 114)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny portrait PNG."""
    return _encode("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A tiny portrait JPEG."""
    return _encode("JPEG")


@pytest.fixture
def make_candidate() -> Callable[..., ImageCandidate]:
    """Factory for search candidates with predictable URLs."""

    def _make(id: int = 1, width: int = 1080, height: int = 1920, portrait: bool = True) -> ImageCandidate:
        base = f"https://images.example.com/photos/{id}"
        return ImageCandidate(
            id=id,
            variants=ImageVariants(
                medium=f"{base}/medium.jpg",
                large=f"{base}/large.jpg",
                portrait=f"{base}/portrait.jpg" if portrait else "",
                original=f"{base}/original.jpg",
            ),
            width=width,
            height=height,
        )

    return _make


@pytest.fixture
def library(temp_dir: Path) -> MediaLibrary:
    return MediaLibrary(temp_dir / "library")


@pytest.fixture
def granted_gate() -> StaticPermissionGate:
    return StaticPermissionGate(PermissionStatus.GRANTED)


@pytest.fixture
def denied_gate() -> StaticPermissionGate:
    return StaticPermissionGate(PermissionStatus.DENIED)


@pytest.fixture
def http_session(jpeg_bytes: bytes) -> Mock:
    """requests.Session stand-in whose downloads return a JPEG with status 200."""
    response = Mock()
    response.status_code = 200
    response.iter_content.return_value = [jpeg_bytes[:100], jpeg_bytes[100:]]
    session = Mock()
    session.get.return_value = response
    return session


@pytest.fixture
def staging_dir(temp_dir: Path) -> Path:
    return temp_dir / "staging"


@pytest.fixture
def saver(library: MediaLibrary, granted_gate: StaticPermissionGate, staging_dir: Path, http_session: Mock) -> WallpaperSaver:
    """Save pipeline with granted access, a fake downloader and a fixed clock."""
    return WallpaperSaver(
        library=library,
        permissions=granted_gate,
        staging_dir=staging_dir,
        session=http_session,
        clock=lambda: 1700000000.123,
    )
