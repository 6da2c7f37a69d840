"""Error kinds raised while enumerating and filtering images.

Every failure that can be isolated to a single directory entry or a single
file is raised as one of these and turned into a failing outcome by the batch
runner; none of them aborts sibling work.
"""

from pathlib import Path
from typing import Optional


class BlobFilterError(Exception):
    """Base class; carries the offending path and the underlying cause."""

    kind = "error"

    def __init__(self, message: str, path: Optional[Path] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        text = self.message
        if self.path is not None:
            text = f"{text}: {self.path}"
        if self.cause is not None:
            text = f"{text} ({self.cause})"
        return text


class FilesystemError(BlobFilterError):
    """Directory listing, metadata, read/write or directory creation failed."""

    kind = "io"


class DecodeError(BlobFilterError):
    """The file is not a readable image container."""

    kind = "decode"


class FormatError(BlobFilterError):
    """The decoded image cannot be reduced to 8-bit grayscale."""

    kind = "format"


class PathError(BlobFilterError):
    """A relative path or file name could not be derived."""

    kind = "path"


class EncodeError(BlobFilterError):
    """The mask could not be written in the destination's format."""

    kind = "encode"
