"""
Text overlay rendering.

Responsibilities:
- Uppercase field values (full Unicode case mapping, Cyrillic included)
- Rasterise text with the configured font and trim to the drawn glyphs
- Build the translucent rounded panel behind each label
- Position panel and text at the field anchor from the layout
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Mapping, Optional, Tuple, Union

from PIL import Image, ImageColor, ImageDraw, ImageFont

from card_composer.core.config import Settings
from card_composer.core.logger import logger
from card_composer.models.layout import TextPosition

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


@dataclass(frozen=True)
class TextOverlay:
    """One rendered label ready to be pasted onto the template."""
    field: str
    text: str
    image: Image.Image
    origin: Tuple[int, int]
    panel: Optional[Image.Image] = None
    panel_origin: Optional[Tuple[int, int]] = None


def to_upper(value: Optional[str]) -> str:
    """
    Uppercase a field value.

    ``str.upper`` applies the full Unicode case mapping, so Cyrillic and
    other non-Latin scripts are handled (``"иванов" -> "ИВАНОВ"``).
    """
    if not isinstance(value, str):
        return ""
    return value.upper()


@lru_cache(maxsize=32)
def load_font(font_family: str, font_size: int) -> FontType:
    """
    Load a TrueType/OpenType font, falling back to Pillow's default font.

    Args:
        font_family: Font file path or a name FreeType can resolve
        font_size: Size in pixels

    Returns:
        Font object usable with ImageDraw
    """
    try:
        return ImageFont.truetype(font_family, font_size)
    except OSError:
        logger.warning(f"Font {font_family!r} not found, using Pillow default font")
        return ImageFont.load_default(size=font_size)


def parse_color(color: str, opacity: float = 1.0) -> Tuple[int, int, int, int]:
    """Convert a colour string plus 0..1 opacity into an RGBA tuple."""
    rgb = ImageColor.getrgb(color)
    alpha = rgb[3] if len(rgb) == 4 else 255
    return rgb[0], rgb[1], rgb[2], int(round(alpha * opacity))


def render_text(
    text: str,
    font_size: int,
    fill: str = "#000000",
    font_family: str = "DejaVuSans-Bold.ttf",
) -> Optional[Image.Image]:
    """
    Render text onto a transparent bitmap trimmed to the glyph bounds.

    The canvas is sized from the font's own measurement of the string plus
    a margin, so nothing is clipped; the result is then cut down to the
    tight alpha bounding box of what was actually drawn.

    Args:
        text: Text to draw (drawn literally, no markup)
        font_size: Font size in pixels
        fill: Text colour
        font_family: Font file path or name

    Returns:
        RGBA image, or None when the text produces no visible pixels
    """
    if not text:
        return None

    font = load_font(font_family, font_size)
    left, top, right, bottom = font.getbbox(text)
    margin = max(4, font_size // 2)
    width = max(1, right - left) + margin * 2
    height = max(1, bottom - top) + margin * 2

    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(canvas)
    draw.text((margin - left, margin - top), text, font=font, fill=parse_color(fill))

    bbox = canvas.getchannel("A").getbbox()
    if bbox is None:
        return None
    return canvas.crop(bbox)


def render_panel(
    size: Tuple[int, int],
    color: str,
    opacity: float,
    radius: int,
) -> Image.Image:
    """Rounded rectangle filled with ``color`` at ``opacity`` (0..1)."""
    width, height = size
    panel = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(panel)
    draw.rounded_rectangle(
        (0, 0, width - 1, height - 1),
        radius=radius,
        fill=parse_color(color, opacity),
    )
    return panel


def build_overlay(
    field: str,
    value: Optional[str],
    position: TextPosition,
    settings: Settings,
) -> Optional[TextOverlay]:
    """
    Render a single field into an overlay, or None if it has no content.
    """
    content = to_upper(value)
    if not content:
        return None

    rendered = render_text(
        content,
        position.font_size,
        fill=settings.text_color,
        font_family=settings.font_family,
    )
    if rendered is None:
        return None

    if not settings.text_bg_enabled:
        return TextOverlay(field=field, text=content, image=rendered, origin=position.origin)

    padding = math.ceil(position.font_size * settings.text_bg_padding_ratio)
    panel_w = rendered.width + padding * 2
    panel_h = rendered.height + padding * 2
    panel = render_panel(
        (panel_w, panel_h),
        settings.text_bg_color,
        settings.text_bg_opacity,
        settings.text_bg_radius,
    )
    text_origin = (
        position.x + (panel_w - rendered.width) // 2,
        position.y + (panel_h - rendered.height) // 2,
    )
    return TextOverlay(
        field=field,
        text=content,
        image=rendered,
        origin=text_origin,
        panel=panel,
        panel_origin=position.origin,
    )


def build_text_overlays(fields: Mapping[str, str], settings: Settings) -> List[TextOverlay]:
    """
    Render every non-empty field of the submission, in layout order.

    Args:
        fields: Field name -> raw submitted value
        settings: Application settings (layout, font, colours)

    Returns:
        Overlays to composite back to front
    """
    overlays = []
    for name, position in settings.layout.positions():
        overlay = build_overlay(name, fields.get(name, ""), position, settings)
        if overlay is not None:
            overlays.append(overlay)
    return overlays
