"""
Image services used by the compose endpoint.
"""

from card_composer.services.compositor import compose_card
from card_composer.services.photo_processor import process_photo
from card_composer.services.text_renderer import build_text_overlays, render_text

__all__ = ["compose_card", "process_photo", "build_text_overlays", "render_text"]
