"""Output generation for dark blob filtering."""

import logging
from pathlib import Path

import numpy as np

from image_io import ensure_output, save_mask
from models import FileTask

logger = logging.getLogger(__name__)


def invert_mask(mask: np.ndarray) -> np.ndarray:
    """Invert a uint8 mask in place so blobs render dark on a light field."""
    np.subtract(255, mask, out=mask)
    return mask


def destination_for(task: FileTask, output_dir: Path) -> Path:
    """Mirror the task's relative path under the output directory."""
    return output_dir / task.relative_path


def write_mask(mask: np.ndarray, task: FileTask, output_dir: Path) -> Path:
    """Invert and persist a mask for one task.

    Missing parent directories are created first. The destination keeps the
    source file name, so its extension picks the output format.

    Returns:
        Path the mask was written to
    """
    invert_mask(mask)
    target = destination_for(task, output_dir)
    ensure_output(target.parent)
    save_mask(mask, target)
    logger.debug(f"Wrote mask {target}")
    return target
