"""Directory-backed media library with named albums.

Assets are copied into ``<root>/assets`` and recorded, together with album
membership, in ``<root>/library.json``.
"""
from __future__ import annotations

import json
import logging
import shutil
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .errors import PersistenceError
from .utils import ensure_dir, unique_path

logger = logging.getLogger(__name__)

INDEX_FILE = "library.json"
ASSETS_DIR = "assets"


@dataclass
class MediaAsset:
    """A file registered in the library."""

    id: str
    filename: str
    uri: str
    created_at: str


@dataclass
class Album:
    """Named grouping of assets, in insertion order."""

    title: str
    created_at: str
    asset_ids: List[str] = field(default_factory=list)

    @property
    def asset_count(self) -> int:
        return len(self.asset_ids)


class MediaLibrary:
    """Platform media library stand-in rooted at a directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def assets_dir(self) -> Path:
        return self.root / ASSETS_DIR

    @property
    def index_path(self) -> Path:
        return self.root / INDEX_FILE

    def _load_index(self) -> Dict[str, Any]:
        if not self.index_path.exists():
            return {"assets": {}, "albums": {}}
        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not read library index {self.index_path}: {exc}") from exc
        data.setdefault("assets", {})
        data.setdefault("albums", {})
        return data

    def _save_index(self, data: Dict[str, Any]) -> None:
        ensure_dir(self.root)
        tmp_path = self.index_path.with_suffix(".json.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.index_path)
        except OSError as exc:
            raise PersistenceError(f"Could not write library index {self.index_path}: {exc}") from exc

    def create_asset(self, path: Path) -> MediaAsset:
        """Register a local file as a new asset.

        Raises:
            PersistenceError: If the file is missing or cannot be copied.
        """
        path = Path(path)
        if not path.is_file():
            raise PersistenceError(f"Cannot register missing file: {path}")

        ensure_dir(self.assets_dir)
        destination = unique_path(self.assets_dir, path.stem, path.suffix.lstrip(".") or "bin")
        try:
            shutil.copyfile(path, destination)
        except OSError as exc:
            raise PersistenceError(f"Could not copy {path} into library: {exc}") from exc

        asset = MediaAsset(
            id=uuid.uuid4().hex,
            filename=destination.name,
            uri=destination.resolve().as_uri(),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        data = self._load_index()
        data["assets"][asset.id] = asdict(asset)
        self._save_index(data)
        logger.info("Registered asset %s (%s)", asset.id, asset.filename)
        return asset

    def get_asset(self, asset_id: str) -> Optional[MediaAsset]:
        raw = self._load_index()["assets"].get(asset_id)
        return MediaAsset(**raw) if raw else None

    def get_album(self, title: str) -> Optional[Album]:
        raw = self._load_index()["albums"].get(title)
        if raw is None:
            return None
        return Album(title=title, created_at=raw["created_at"], asset_ids=list(raw.get("asset_ids", [])))

    def albums(self) -> List[Album]:
        return [
            Album(title=title, created_at=raw["created_at"], asset_ids=list(raw.get("asset_ids", [])))
            for title, raw in self._load_index()["albums"].items()
        ]

    def create_album(self, title: str, asset: MediaAsset) -> Album:
        """Create ``title`` containing ``asset``.

        If the album already exists the asset is appended instead, so repeated calls
        never produce a second album with the same name.
        """
        data = self._load_index()
        if title in data["albums"]:
            logger.debug("Album '%s' already exists; appending", title)
            return self._append(data, title, [asset])

        album = Album(title=title, created_at=datetime.now(timezone.utc).isoformat(), asset_ids=[asset.id])
        data["albums"][title] = {"created_at": album.created_at, "asset_ids": album.asset_ids}
        self._save_index(data)
        logger.info("Created album '%s'", title)
        return album

    def add_assets_to_album(self, assets: Iterable[MediaAsset], album: Album) -> Album:
        """Append assets to an existing album, skipping ones already in it.

        Raises:
            PersistenceError: If the album does not exist.
        """
        data = self._load_index()
        if album.title not in data["albums"]:
            raise PersistenceError(f"Album not found: {album.title}")
        return self._append(data, album.title, list(assets))

    def _append(self, data: Dict[str, Any], title: str, assets: List[MediaAsset]) -> Album:
        entry = data["albums"][title]
        ids = entry.setdefault("asset_ids", [])
        for asset in assets:
            if asset.id not in data["assets"]:
                raise PersistenceError(f"Unknown asset: {asset.id}")
            if asset.id not in ids:
                ids.append(asset.id)
        self._save_index(data)
        logger.info("Album '%s' now holds %d asset(s)", title, len(ids))
        return Album(title=title, created_at=entry["created_at"], asset_ids=list(ids))

    def album_assets(self, title: str) -> List[MediaAsset]:
        data = self._load_index()
        entry = data["albums"].get(title)
        if entry is None:
            return []
        return [MediaAsset(**data["assets"][i]) for i in entry.get("asset_ids", []) if i in data["assets"]]


__all__ = ["MediaAsset", "Album", "MediaLibrary"]
