"""
Image helpers and the small layout used across the test suite.
"""

import io

from PIL import Image

from card_composer.models.layout import Layout

TEMPLATE_SIZE = (400, 300)
TEMPLATE_COLOR = (30, 90, 160)

SMALL_LAYOUT = Layout.model_validate({
    "photoBox": {"x": 20, "y": 20, "width": 80, "height": 100},
    "text": {
        "name": {"x": 120, "y": 20, "fontSize": 20},
        "agentNumber": {"x": 120, "y": 70, "fontSize": 16},
        "city": {"x": 120, "y": 110, "fontSize": 16},
        "eyeColor": {"x": 120, "y": 150, "fontSize": 16},
        "cover": {"x": 120, "y": 190, "fontSize": 16},
        "recruitmentDate": {"x": 120, "y": 230, "fontSize": 16},
    },
})


def encode_image(image: Image.Image, fmt: str = "JPEG", **params) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def decode_image(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def close_to(pixel, expected, tolerance=40) -> bool:
    return all(abs(a - b) <= tolerance for a, b in zip(pixel, expected))
