"""Size and circularity filtering of detected blobs."""

import logging
import math
from typing import Sequence, Tuple

import numpy as np

from config import MAX_BLOB_PIXELS, MIN_BLOB_PIXELS, RADIUS_TOLERANCE
from models import Blob

logger = logging.getLogger(__name__)

FOREGROUND = 255
BACKGROUND = 0


def blob_centroid(blob: Blob) -> Tuple[float, float]:
    """Mean (x, y) of the blob's pixel coordinates."""
    pts = np.asarray(blob, dtype=np.float64)
    cx, cy = pts.mean(axis=0)
    return float(cx), float(cy)


def allowed_radius(pixel_count: int, radius_tolerance: float = RADIUS_TOLERANCE) -> float:
    """Largest centroid distance a member pixel may have.

    The expected radius is pixel_count / pi (area over pi, not its square
    root), scaled by radius_tolerance.
    """
    expected_radius = pixel_count / math.pi
    return expected_radius * radius_tolerance


def is_round_blob(
    blob: Blob,
    min_pixels: int = MIN_BLOB_PIXELS,
    max_pixels: int = MAX_BLOB_PIXELS,
    radius_tolerance: float = RADIUS_TOLERANCE,
) -> bool:
    """Accept a blob when its size is in range and no pixel is too far from its centroid."""
    count = len(blob)
    if count < min_pixels or count > max_pixels:
        return False

    pts = np.asarray(blob, dtype=np.float64)
    cx, cy = blob_centroid(blob)
    distances = np.hypot(pts[:, 0] - cx, pts[:, 1] - cy)
    return not bool(np.any(distances > allowed_radius(count, radius_tolerance)))


def classify_blobs(
    blobs: Sequence[Blob],
    width: int,
    height: int,
    min_pixels: int = MIN_BLOB_PIXELS,
    max_pixels: int = MAX_BLOB_PIXELS,
    radius_tolerance: float = RADIUS_TOLERANCE,
) -> np.ndarray:
    """Stamp every accepted blob into a fresh mask.

    Args:
        blobs: Components from detect_blobs
        width: Grid width in pixels
        height: Grid height in pixels
        min_pixels: Smallest accepted blob
        max_pixels: Largest accepted blob
        radius_tolerance: Multiplier applied to the expected radius

    Returns:
        uint8 mask of shape (height, width); accepted pixels are 255,
        everything else 0
    """
    mask = np.full((height, width), BACKGROUND, dtype=np.uint8)
    accepted = 0
    for blob in blobs:
        if not is_round_blob(blob, min_pixels, max_pixels, radius_tolerance):
            continue
        xs, ys = zip(*blob)
        mask[list(ys), list(xs)] = FOREGROUND
        accepted += 1

    logger.debug(f"Accepted {accepted}/{len(blobs)} blob(s)")
    return mask
