"""Core per-file processing pipeline."""

from pathlib import Path
from typing import Optional

import numpy as np

from classification import classify_blobs
from config import FilterSettings
from detection import detect_blobs
from image_io import load_grayscale
from models import FileTask
from output import write_mask


def segment_grid(gray: np.ndarray, settings: Optional[FilterSettings] = None) -> np.ndarray:
    """Detect and classify blobs in a grayscale grid.

    Returns:
        The stamped (not yet inverted) mask: accepted blob pixels are 255
    """
    if settings is None:
        settings = FilterSettings()
    height, width = gray.shape
    blobs = detect_blobs(
        gray,
        seed_threshold=settings.seed_threshold,
        expansion_threshold=settings.expansion_threshold,
    )
    return classify_blobs(
        blobs,
        width,
        height,
        min_pixels=settings.min_pixels,
        max_pixels=settings.max_pixels,
        radius_tolerance=settings.radius_tolerance,
    )


def process_image(
    task: FileTask,
    output_dir: Path,
    settings: Optional[FilterSettings] = None,
) -> Path:
    """Decode, segment and write the mask for a single file.

    Args:
        task: File to process and its path relative to its input root
        output_dir: Root of the output tree
        settings: Detection and classification parameters

    Returns:
        Destination path of the written mask

    Raises:
        BlobFilterError: On any I/O, decode, format or encode failure
    """
    gray = load_grayscale(task.source_path)
    mask = segment_grid(gray, settings)
    return write_mask(mask, task, output_dir)
