"""Unit tests for the save pipeline."""

from unittest.mock import MagicMock, Mock

import pytest
import requests

from wallpaper_studio.errors import NetworkError, PersistenceError
from wallpaper_studio.models import GeneratedImage
from wallpaper_studio.persistence import (
    FAILED_MESSAGE,
    PERMISSION_MESSAGE,
    SAVED_MESSAGE,
    WallpaperSaver,
    download_to_file,
    verify_staged_file,
)


class TestSaveGeneratedImage:

    def test_png_saved_into_new_album(self, saver, library, staging_dir, png_bytes):
        outcome = saver.save_to_library(GeneratedImage.from_bytes("image/png", png_bytes))

        assert outcome.success
        assert outcome.title == "Wallpaper Saved"
        assert outcome.message == SAVED_MESSAGE
        staged = list(staging_dir.iterdir())
        assert [p.name for p in staged] == ["wallpaper-1700000000123.png"]
        assert staged[0].read_bytes() == png_bytes
        assert library.get_album("Wallpapers").asset_count == 1

    def test_jpeg_data_url_gets_jpg_extension(self, saver, staging_dir, jpeg_bytes):
        data_url = GeneratedImage.from_bytes("image/jpeg", jpeg_bytes).data_url

        outcome = saver.save_to_library(data_url)

        assert outcome.success
        assert [p.suffix for p in staging_dir.iterdir()] == [".jpg"]

    def test_second_save_appends_to_same_album(self, saver, library, png_bytes, jpeg_bytes):
        saver.save_to_library(GeneratedImage.from_bytes("image/png", png_bytes))
        saver.save_to_library(GeneratedImage.from_bytes("image/jpeg", jpeg_bytes))

        albums = library.albums()
        assert [a.title for a in albums] == ["Wallpapers"]
        assert albums[0].asset_count == 2

    def test_same_timestamp_does_not_overwrite(self, saver, staging_dir, png_bytes):
        image = GeneratedImage.from_bytes("image/png", png_bytes)

        saver.save_to_library(image)
        saver.save_to_library(image)

        assert sorted(p.name for p in staging_dir.iterdir()) == [
            "wallpaper-1700000000123-1.png",
            "wallpaper-1700000000123.png",
        ]

    def test_undecodable_payload_fails_generically(self, saver, library):
        outcome = saver.save_to_library(GeneratedImage(mime_type="image/png", payload="%%%"))

        assert not outcome.success
        assert outcome.message == FAILED_MESSAGE
        assert library.albums() == []

    def test_non_image_bytes_fail(self, saver, library):
        outcome = saver.save_to_library(GeneratedImage.from_bytes("image/png", b"plain text"))

        assert not outcome.success
        assert library.albums() == []

    def test_malformed_data_url_fails(self, saver):
        assert not saver.save_to_library("data:image/png,abc").success


class TestSaveCandidate:

    def test_downloads_portrait_variant(self, saver, library, staging_dir, http_session, make_candidate):
        outcome = saver.save_to_library(make_candidate(id=42))

        assert outcome.success
        url = http_session.get.call_args.args[0]
        assert url == "https://images.example.com/photos/42/portrait.jpg"
        assert [p.name for p in staging_dir.iterdir()] == ["wallpaper-42.jpg"]
        assert library.album_assets("Wallpapers")[0].filename == "wallpaper-42.jpg"

    def test_non_200_download_fails(self, saver, library, http_session, make_candidate):
        http_session.get.return_value.status_code = 404

        outcome = saver.save_to_library(make_candidate(id=42))

        assert not outcome.success
        assert outcome.message == FAILED_MESSAGE
        assert library.albums() == []

    def test_transport_error_fails(self, saver, http_session, make_candidate):
        http_session.get.side_effect = requests.ConnectionError("offline")

        assert not saver.save_to_library(make_candidate()).success

    def test_plain_url_named_by_timestamp(self, saver, staging_dir):
        outcome = saver.save_to_library("https://images.example.com/x.jpg")

        assert outcome.success
        assert [p.name for p in staging_dir.iterdir()] == ["wallpaper-1700000000123.jpg"]


class TestPermission:

    def test_denied_writes_nothing(self, library, denied_gate, staging_dir, http_session, png_bytes):
        saver = WallpaperSaver(library=library, permissions=denied_gate, staging_dir=staging_dir, session=http_session)

        outcome = saver.save_to_library(GeneratedImage.from_bytes("image/png", png_bytes))

        assert not outcome.success
        assert outcome.title == "Permission required"
        assert outcome.message == PERMISSION_MESSAGE
        assert not staging_dir.exists()
        assert not library.root.exists()
        http_session.get.assert_not_called()


class TestHelpers:

    def test_verify_missing_file(self, temp_dir):
        with pytest.raises(PersistenceError, match="file not created"):
            verify_staged_file(temp_dir / "missing.png")

    def test_verify_empty_file(self, temp_dir):
        path = temp_dir / "empty.png"
        path.write_bytes(b"")

        with pytest.raises(PersistenceError, match="file not created"):
            verify_staged_file(path)

    def test_download_closes_response(self, temp_dir):
        response = Mock(status_code=500)
        session = Mock()
        session.get.return_value = response

        with pytest.raises(NetworkError, match="status 500"):
            download_to_file("https://x/y.jpg", temp_dir / "y.jpg", session=session)

        response.close.assert_called_once()

    def test_download_without_session_closes_its_own(self, temp_dir, monkeypatch, jpeg_bytes):
        owned = MagicMock()
        owned.__enter__.return_value = owned
        owned.get.return_value = Mock(status_code=200, iter_content=Mock(return_value=[jpeg_bytes]))
        monkeypatch.setattr(requests, "Session", Mock(return_value=owned))

        download_to_file("https://x/y.jpg", temp_dir / "y.jpg")

        assert (temp_dir / "y.jpg").read_bytes() == jpeg_bytes
        owned.__exit__.assert_called_once()

    def test_saver_reuses_one_session(self, library, granted_gate, staging_dir):
        saver = WallpaperSaver(library=library, permissions=granted_gate, staging_dir=staging_dir)

        assert isinstance(saver.session, requests.Session)
        saver.session.close()
