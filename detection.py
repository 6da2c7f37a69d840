"""Detection of dark connected components for blob filtering."""

import logging
from collections import deque
from typing import List

import numpy as np

from config import EXPANSION_THRESHOLD, SEED_THRESHOLD
from models import Blob

logger = logging.getLogger(__name__)

# 4-connectivity, visited in this order: down, up, right, left.
NEIGHBOURS = ((0, 1), (0, -1), (1, 0), (-1, 0))


def detect_blobs(
    gray: np.ndarray,
    seed_threshold: int = SEED_THRESHOLD,
    expansion_threshold: int = EXPANSION_THRESHOLD,
) -> List[Blob]:
    """
    Flood-fill a grayscale grid into dark 4-connected components.

    A component can only start at a pixel with intensity <= seed_threshold and
    grows breadth-first into neighbours with intensity <= expansion_threshold,
    so soft anti-aliased edges around a solid core are kept while faint noise
    cannot start a component on its own. A pixel belongs to at most one
    component. Single-pixel components are dropped.

    Args:
        gray: Grayscale image (uint8 numpy array, shape (height, width))
        seed_threshold: Maximum intensity that may start a component
        expansion_threshold: Maximum intensity that may join a component

    Returns:
        List of blobs, each a list of unique (x, y) coordinates with at
        least two members, in seed scan order
    """
    if gray.ndim != 2:
        raise ValueError(f"Expected a single-channel grid, got shape {gray.shape}")

    h, w = gray.shape
    visited = np.zeros((h, w), dtype=bool)
    expandable = gray <= expansion_threshold
    blobs: List[Blob] = []

    # Row-major scan; np.nonzero returns (row, col) pairs in that order.
    seed_ys, seed_xs = np.nonzero(gray <= seed_threshold)
    for sy, sx in zip(seed_ys.tolist(), seed_xs.tolist()):
        if visited[sy, sx]:
            continue

        queue = deque([(sx, sy)])
        blob: Blob = []
        while queue:
            x, y = queue.popleft()
            if visited[y, x]:
                continue
            visited[y, x] = True
            blob.append((x, y))

            for dx, dy in NEIGHBOURS:
                nx, ny = x + dx, y + dy
                if 0 <= nx < w and 0 <= ny < h and not visited[ny, nx] and expandable[ny, nx]:
                    queue.append((nx, ny))

        if len(blob) > 1:
            blobs.append(blob)

    logger.debug(f"Detected {len(blobs)} component(s) in {w}x{h} grid")
    return blobs
