"""
Shared fixtures: a small template on disk, settings pointing at it and a
TestClient for the app built from those settings.
"""

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from card_composer.core.config import Settings
from card_composer.main import create_app
from tests.helpers import SMALL_LAYOUT, TEMPLATE_COLOR, TEMPLATE_SIZE, encode_image


@pytest.fixture
def make_photo():
    """Factory for in-memory photos: make_photo(size, color, fmt)."""
    def _make(size=(200, 200), color=(0, 0, 255), fmt="JPEG"):
        return encode_image(Image.new("RGB", size, color), fmt=fmt)
    return _make


@pytest.fixture
def template_path(tmp_path):
    path = tmp_path / "template.png"
    Image.new("RGB", TEMPLATE_SIZE, TEMPLATE_COLOR).save(path)
    return path


@pytest.fixture
def settings(template_path):
    return Settings(template_path=template_path, layout=SMALL_LAYOUT, log_level="WARNING")


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))
