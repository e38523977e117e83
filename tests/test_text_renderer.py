import math

import pytest

from card_composer.core.config import Settings
from card_composer.services.text_renderer import (
    build_overlay,
    build_text_overlays,
    parse_color,
    render_panel,
    render_text,
    to_upper,
)
from tests.helpers import SMALL_LAYOUT


@pytest.fixture
def text_settings(tmp_path):
    return Settings(template_path=tmp_path / "unused.png", layout=SMALL_LAYOUT, log_level="WARNING")


@pytest.mark.parametrize("value, expected", [
    ("ivanov", "IVANOV"),
    ("иванов", "ИВАНОВ"),
    ("москва", "МОСКВА"),
    ("Agent 007", "AGENT 007"),
    ("straße", "STRASSE"),
    ("", ""),
    (None, ""),
])
def test_to_upper(value, expected):
    assert to_upper(value) == expected


def test_render_text_is_trimmed_to_glyphs():
    image = render_text("HELLO", 40)
    assert image is not None
    assert image.mode == "RGBA"
    assert image.getchannel("A").getbbox() == (0, 0, image.width, image.height)


def test_render_text_grows_with_content():
    short = render_text("I", 40)
    long = render_text("IIIIIIIIII", 40)
    assert long.width > short.width


def test_render_text_draws_markup_characters_literally():
    image = render_text("A & <B>", 30)
    assert image is not None
    assert image.width > render_text("A", 30).width


@pytest.mark.parametrize("text", ["", "   "])
def test_render_text_without_ink_returns_none(text):
    assert render_text(text, 30) is None


def test_parse_color_applies_opacity():
    assert parse_color("#ff0000", 0.85) == (255, 0, 0, 217)
    assert parse_color("#000000") == (0, 0, 0, 255)
    assert parse_color("white", 0.0) == (255, 255, 255, 0)


def test_render_panel_is_rounded_and_translucent():
    panel = render_panel((60, 30), "#ffffff", 0.5, radius=6)
    assert panel.size == (60, 30)
    assert panel.getpixel((30, 15)) == (255, 255, 255, 128)
    assert panel.getpixel((0, 0))[3] == 0


def test_overlay_panel_geometry(text_settings):
    position = SMALL_LAYOUT.text["name"]
    overlay = build_overlay("name", "ivanov", position, text_settings)

    padding = math.ceil(position.font_size * text_settings.text_bg_padding_ratio)
    assert overlay.text == "IVANOV"
    assert overlay.panel_origin == (position.x, position.y)
    assert overlay.panel.size == (overlay.image.width + 2 * padding, overlay.image.height + 2 * padding)
    assert overlay.origin == (position.x + padding, position.y + padding)


def test_overlay_without_panel_sits_on_anchor(text_settings):
    settings = Settings(
        template_path=text_settings.template_path,
        layout=SMALL_LAYOUT,
        text_bg_enabled=False,
    )
    position = SMALL_LAYOUT.text["city"]
    overlay = build_overlay("city", "moscow", position, settings)
    assert overlay.panel is None
    assert overlay.origin == (position.x, position.y)


def test_build_text_overlays_skips_empty_fields(text_settings):
    overlays = build_text_overlays(
        {"name": "ivanov", "city": "москва", "cover": "", "nickname": "ignored"},
        text_settings,
    )
    assert [(o.field, o.text) for o in overlays] == [("name", "IVANOV"), ("city", "МОСКВА")]


def test_build_text_overlays_follow_layout_order(text_settings):
    fields = {
        "recruitmentDate": "2024-01-01",
        "eyeColor": "green",
        "name": "ivanov",
        "agentNumber": "007",
        "cover": "tourist",
        "city": "moscow",
    }
    overlays = build_text_overlays(fields, text_settings)
    assert [o.field for o in overlays] == [
        "name", "agentNumber", "city", "eyeColor", "cover", "recruitmentDate",
    ]
    for overlay in overlays:
        assert overlay.text == fields[overlay.field].upper()
