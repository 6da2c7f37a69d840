"""Image I/O utilities for dark blob filtering."""

import logging
import re
import struct
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from errors import DecodeError, EncodeError, FilesystemError, FormatError

logger = logging.getLogger(__name__)

# Pillow modes that reduce to 8-bit luminance with nothing left over. Modes with
# an alpha channel ("LA", "RGBA", "PA") and wider modes ("I", "I;16", "F", ...)
# are refused, as is "P" carrying transparency.
EIGHT_BIT_MODES = frozenset(("1", "L", "P", "RGB", "RGBX", "CMYK", "YCbCr"))

# Raw modes of 16-bit-per-sample data that Pillow narrows to an 8-bit mode.
WIDE_RAWMODE = re.compile(r";16[BLN]")


def ensure_output(output_dir: Path) -> None:
    """Ensure output directory exists."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError("Cannot create directory", output_dir, exc) from exc


def _has_wide_samples(img: Image.Image) -> bool:
    """True when the undecoded tiles hold 16-bit samples (checked before load)."""
    for tile in img.tile or []:
        args = tile[3]
        rawmode = args[0] if isinstance(args, tuple) and args else args
        if isinstance(rawmode, str) and WIDE_RAWMODE.search(rawmode):
            return True
    return False


def load_grayscale(path: Path) -> np.ndarray:
    """Decode an image file into an 8-bit single-channel grid.

    Args:
        path: Path to image file; the container format is sniffed from content.

    Returns:
        uint8 numpy array of shape (height, width)

    Raises:
        FilesystemError: If the file cannot be opened or read
        DecodeError: If the content is not a readable image
        FormatError: If the image has an alpha channel or more than 8 bits
            per sample, so it cannot be reduced to 8-bit grayscale
    """
    try:
        img = Image.open(path)
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise DecodeError("Unrecognised image format", path, exc) from exc
    except OSError as exc:
        raise FilesystemError("Cannot open file", path, exc) from exc

    with img:
        wide = _has_wide_samples(img)
        try:
            img.load()
        except (OSError, ValueError, SyntaxError, EOFError, struct.error) as exc:
            raise DecodeError("Failed to decode image", path, exc) from exc

        if wide:
            raise FormatError(f"Expected 8 bit grayscale image, got 16 bit {img.mode}", path)
        if img.mode not in EIGHT_BIT_MODES:
            raise FormatError(f"Expected 8 bit grayscale image, got mode {img.mode}", path)
        if img.mode == "P" and "transparency" in img.info:
            raise FormatError("Expected 8 bit grayscale image, got palette with transparency", path)
        logger.debug(f"Decoded {path} as {img.format} {img.mode} {img.width}x{img.height}")
        gray = img if img.mode == "L" else img.convert("L")
        return np.array(gray, dtype=np.uint8)


def save_mask(mask: np.ndarray, path: Path) -> None:
    """Write an 8-bit mask; the file extension selects the container format.

    Raises:
        EncodeError: If the extension is unknown or the format cannot hold
            an 8-bit grayscale image
        FilesystemError: If the file cannot be written
    """
    if mask.dtype != np.uint8 or mask.ndim != 2:
        raise ValueError(f"Expected a 2-D uint8 mask, got {mask.dtype} with shape {mask.shape}")

    fmt = Image.registered_extensions().get(path.suffix.lower())
    if fmt is None or fmt.upper() not in Image.SAVE:
        raise EncodeError(f"No writer for extension {path.suffix!r}", path)

    img = Image.fromarray(mask)
    try:
        img.save(path, format=fmt)
    except (ValueError, KeyError) as exc:
        raise EncodeError("Cannot encode mask", path, exc) from exc
    except OSError as exc:
        # Encoders refusing a mode raise OSError without an errno.
        if exc.errno is None:
            raise EncodeError("Cannot encode mask", path, exc) from exc
        raise FilesystemError("Cannot write file", path, exc) from exc
