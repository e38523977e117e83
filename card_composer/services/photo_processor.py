"""
Photo preprocessing for the card.

Responsibilities:
- Decode the uploaded bytes and apply EXIF orientation
- Find the region of visual interest (edges, saturation, skin tones)
- Cover-fit the photo into the layout's photo box around that region
- Re-encode the result as JPEG
"""

import io
from typing import Tuple

import cv2
import numpy as np
from PIL import Image, ImageOps

from card_composer.core.logger import logger
from card_composer.models.layout import PhotoBox

# Saliency is computed on a thumbnail no larger than this on either side.
SALIENCY_MAX_SIDE = 256

EDGE_WEIGHT = 1.0
SATURATION_WEIGHT = 0.6
SKIN_WEIGHT = 1.2

# Classic YCrCb skin-tone ranges.
SKIN_CR_RANGE = (133, 173)
SKIN_CB_RANGE = (77, 127)


def load_photo(data: bytes) -> Image.Image:
    """
    Decode image bytes, apply EXIF orientation and convert to RGB.

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not a supported image
    """
    image = Image.open(io.BytesIO(data))
    image = ImageOps.exif_transpose(image)
    if image.mode != "RGB":
        image = image.convert("RGB")
    return image


def saliency_map(image: Image.Image) -> np.ndarray:
    """
    Score every pixel of a downscaled copy by visual interest.

    Combines edge energy (absolute Laplacian of luminance), colour
    saturation and a skin-tone mask, each normalised to 0..1.

    Args:
        image: RGB image

    Returns:
        float32 array (H, W) of the thumbnail
    """
    thumb = image.copy()
    thumb.thumbnail((SALIENCY_MAX_SIDE, SALIENCY_MAX_SIDE), Image.Resampling.BILINEAR)
    rgb = np.array(thumb, dtype=np.uint8)

    gray = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)
    edges = np.abs(cv2.Laplacian(gray, cv2.CV_32F, ksize=3))
    edges = _normalize(edges)

    hsv = cv2.cvtColor(rgb, cv2.COLOR_RGB2HSV)
    saturation = hsv[:, :, 1].astype(np.float32) / 255.0

    ycrcb = cv2.cvtColor(rgb, cv2.COLOR_RGB2YCrCb)
    cr = ycrcb[:, :, 1]
    cb = ycrcb[:, :, 2]
    skin = (
        (cr >= SKIN_CR_RANGE[0]) & (cr <= SKIN_CR_RANGE[1])
        & (cb >= SKIN_CB_RANGE[0]) & (cb <= SKIN_CB_RANGE[1])
    ).astype(np.float32)

    return EDGE_WEIGHT * edges + SATURATION_WEIGHT * saturation + SKIN_WEIGHT * skin


def _normalize(values: np.ndarray) -> np.ndarray:
    peak = float(values.max()) if values.size else 0.0
    if peak <= 0:
        return np.zeros_like(values, dtype=np.float32)
    return (values / peak).astype(np.float32)


def _best_offset(profile: np.ndarray, window: int) -> float:
    """
    Position of the ``window``-long slice of ``profile`` with the highest sum.

    Returns a fraction in 0..1 of the available slack; equal sums resolve to
    the slice nearest the middle.
    """
    length = profile.shape[0]
    slack = length - window
    if slack <= 0:
        return 0.5

    cumulative = np.concatenate(([0.0], np.cumsum(profile, dtype=np.float64)))
    sums = cumulative[window:] - cumulative[:-window]
    best = sums.max()
    tolerance = max(abs(best) * 1e-6, 1e-9)
    candidates = np.flatnonzero(sums >= best - tolerance)
    middle = slack / 2.0
    offset = candidates[np.argmin(np.abs(candidates - middle))]
    return float(offset) / slack


def attention_centering(image: Image.Image, size: Tuple[int, int]) -> Tuple[float, float]:
    """
    Centering for ``ImageOps.fit`` that keeps the most salient region.

    A cover crop only overflows along one axis, so the crop window slides
    along that axis and the position with the largest saliency mass wins.

    Args:
        image: Source RGB image
        size: Target (width, height)

    Returns:
        (x, y) centering fractions in 0..1
    """
    target_w, target_h = size
    scores = saliency_map(image)
    map_h, map_w = scores.shape

    target_ratio = target_w / target_h
    source_ratio = image.width / image.height

    if source_ratio > target_ratio:
        window = max(1, int(round(map_h * target_ratio)))
        return _best_offset(scores.sum(axis=0), window), 0.5
    if source_ratio < target_ratio:
        window = max(1, int(round(map_w / target_ratio)))
        return 0.5, _best_offset(scores.sum(axis=1), window)
    return 0.5, 0.5


def cover_fit(image: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Scale ``image`` to cover ``size``, cropping overflow around the salient region."""
    centering = attention_centering(image, size)
    logger.debug(f"Cover fit {image.size} -> {size}, centering={centering}")
    return ImageOps.fit(image, size, method=Image.Resampling.LANCZOS, centering=centering)


def process_photo(data: bytes, box: PhotoBox, quality: int = 90) -> bytes:
    """
    Prepare the uploaded photo for the photo box.

    Args:
        data: Raw uploaded bytes
        box: Target photo box from the layout
        quality: JPEG quality (0..100)

    Returns:
        JPEG bytes exactly ``box.width`` x ``box.height``
    """
    image = load_photo(data)
    fitted = cover_fit(image, box.size)
    logger.info(f"Photo processed: {image.size[0]}x{image.size[1]} -> {box.width}x{box.height}")

    buffer = io.BytesIO()
    fitted.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()
