"""
Card compositing.

Responsibilities:
- Verify the template image exists before using it
- Paste the processed photo into the photo box
- Alpha-composite each label's panel and text at its anchor
- Encode the merged card as JPEG
"""

import io
from pathlib import Path
from typing import Mapping

from PIL import Image

from card_composer.core.config import Settings
from card_composer.core.errors import TemplateNotFoundError
from card_composer.core.logger import logger
from card_composer.services.photo_processor import process_photo
from card_composer.services.text_renderer import build_text_overlays


def ensure_template_exists(path: Path) -> Path:
    """
    Raises:
        TemplateNotFoundError: If no file exists at ``path``
    """
    if not path.is_file():
        raise TemplateNotFoundError(path)
    return path


def load_template(path: Path) -> Image.Image:
    ensure_template_exists(path)
    with Image.open(path) as template:
        return template.convert("RGBA")


def compose_card(photo: bytes, fields: Mapping[str, str], settings: Settings) -> bytes:
    """
    Compose the final card image.

    Steps:
    1. Load the template (fails fast if it is missing)
    2. Cover-fit the photo and paste it at the photo box origin
    3. Composite each field's panel, then its text, in layout order
    4. Encode as JPEG

    Args:
        photo: Raw uploaded photo bytes
        fields: Field name -> submitted value
        settings: Application settings

    Returns:
        JPEG bytes with the template's dimensions
    """
    canvas = load_template(settings.template_path)
    logger.info(f"Template loaded: {settings.template_path} ({canvas.width}x{canvas.height})")

    box = settings.layout.photo_box
    processed = process_photo(photo, box, quality=settings.jpeg_quality)
    with Image.open(io.BytesIO(processed)) as photo_image:
        canvas.paste(photo_image.convert("RGBA"), box.origin)

    overlays = build_text_overlays(fields, settings)
    for overlay in overlays:
        if overlay.panel is not None:
            canvas.alpha_composite(overlay.panel, dest=overlay.panel_origin)
        canvas.alpha_composite(overlay.image, dest=overlay.origin)
    logger.debug(f"Composited {len(overlays)} text overlays: {[o.field for o in overlays]}")

    buffer = io.BytesIO()
    canvas.convert("RGB").save(buffer, format="JPEG", quality=settings.jpeg_quality)
    result = buffer.getvalue()
    logger.info(f"Card composed: {canvas.width}x{canvas.height}, {len(result)} bytes")
    return result
