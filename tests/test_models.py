"""Unit tests for data models."""

import base64

import pytest

from wallpaper_studio.models import GeneratedImage, ImageCandidate, extension_for_mime


class TestImageCandidate:
    """Tests for ImageCandidate parsing."""

    def test_from_dict_reads_pexels_photo(self):
        raw = {
            "id": 2014422,
            "width": 3024,
            "height": 4032,
            "src": {
                "original": "https://images.pexels.com/photos/2014422/a.jpeg",
                "large": "https://images.pexels.com/photos/2014422/a.jpeg?h=650",
                "medium": "https://images.pexels.com/photos/2014422/a.jpeg?h=350",
                "portrait": "https://images.pexels.com/photos/2014422/a.jpeg?h=1200&w=800",
                "tiny": "ignored",
            },
        }

        candidate = ImageCandidate.from_dict(raw)

        assert candidate.id == 2014422
        assert candidate.width == 3024
        assert candidate.height == 4032
        assert candidate.display_url.endswith("h=1200&w=800")

    def test_display_url_falls_back_to_large(self, make_candidate):
        candidate = make_candidate(id=7, portrait=False)
        assert candidate.display_url == "https://images.example.com/photos/7/large.jpg"

    def test_missing_field_raises_value_error(self):
        with pytest.raises(ValueError, match="Missing photo field"):
            ImageCandidate.from_dict({"id": 1, "width": 10})

    @pytest.mark.parametrize("raw", [None, [], {"id": 1, "width": None, "height": 10}, {"id": None, "width": 5, "height": 10}])
    def test_malformed_entry_raises_value_error(self, raw):
        with pytest.raises(ValueError):
            ImageCandidate.from_dict(raw)

    @pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (-5, 10)])
    def test_non_positive_dimensions_rejected(self, make_candidate, width, height):
        with pytest.raises(ValueError):
            make_candidate(width=width, height=height)


class TestGeneratedImage:
    """Tests for GeneratedImage data URL handling."""

    def test_data_url_round_trip_is_byte_identical(self, png_bytes):
        image = GeneratedImage.from_bytes("image/png", png_bytes)

        parsed = GeneratedImage.from_data_url(image.data_url)

        assert parsed.mime_type == "image/png"
        assert parsed.decode() == png_bytes
        assert base64.b64encode(parsed.decode()).decode("ascii") == parsed.payload

    def test_from_data_url_splits_mime_and_payload(self):
        image = GeneratedImage.from_data_url("data:image/jpeg;base64,AAEC")
        assert image.mime_type == "image/jpeg"
        assert image.payload == "AAEC"
        assert image.extension == "jpg"

    @pytest.mark.parametrize(
        "value",
        ["https://example.com/a.png", "data:image/png,AAAA", "data:;base64,AAAA", "data:image/png;base64,"],
    )
    def test_from_data_url_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            GeneratedImage.from_data_url(value)

    def test_decode_rejects_invalid_base64(self):
        with pytest.raises(ValueError, match="Invalid base64"):
            GeneratedImage(mime_type="image/png", payload="not base64!!").decode()


@pytest.mark.parametrize(
    "mime,expected",
    [
        ("image/jpeg", "jpg"),
        ("image/png", "png"),
        ("image/webp", "png"),
        ("application/octet-stream", "png"),
        ("", "png"),
    ],
)
def test_extension_for_mime(mime, expected):
    assert extension_for_mime(mime) == expected
