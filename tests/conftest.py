import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def blank_grid(width: int, height: int, value: int = 255) -> np.ndarray:
    return np.full((height, width), value, dtype=np.uint8)


def draw_disk(gray: np.ndarray, cx: int, cy: int, radius: int, value: int = 0) -> np.ndarray:
    """Fill every pixel within ``radius`` of (cx, cy); returns the disk's boolean footprint."""
    h, w = gray.shape
    ys, xs = np.mgrid[0:h, 0:w]
    disk = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius ** 2
    gray[disk] = value
    return disk


def write_png(path: Path, gray: np.ndarray) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(gray).save(path)
    return path


@pytest.fixture
def dotted_image() -> np.ndarray:
    """64x48 light field with one round dot, one long stroke and one speck."""
    gray = blank_grid(64, 48, 230)
    draw_disk(gray, 12, 12, 3, value=10)
    gray[30, 5:45] = 20
    gray[40, 60] = 0
    return gray
