"""Lazy discovery of input files under files and directory trees."""

import logging
import os
import stat
from pathlib import Path
from typing import Iterator, List, Optional, Union

from errors import BlobFilterError, FilesystemError, PathError
from models import FileTask

logger = logging.getLogger(__name__)

EnumeratedItem = Union[FileTask, BlobFilterError]


class _DirCursor:
    """An open directory listing plus the relative path of that directory."""

    def __init__(self, path: Path, entries, prefix: Path):
        self.path = path
        self.entries = entries
        self.prefix = prefix

    def close(self) -> None:
        self.entries.close()


class PathEnumerator:
    """Iterate every file reachable from ``root``, one item per ``next()``.

    Each item is either a ``FileTask`` or the ``BlobFilterError`` met while
    reaching an entry; errors never stop the walk. A file root yields a single
    task whose relative path is the bare file name. A directory root is walked
    depth-first with an explicit stack of open listings, so memory grows with
    tree depth only and nothing is read before it is asked for.

    Symlinks to files are followed; symlinks to directories are not descended
    into and are reported as unsupported entries.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self._stack: List[_DirCursor] = []
        self._started = False

    def __iter__(self) -> Iterator[EnumeratedItem]:
        return self

    def __next__(self) -> EnumeratedItem:
        while True:
            if not self._started:
                self._started = True
                item = self._open_root()
            elif self._stack:
                item = self._advance(self._stack[-1])
            else:
                raise StopIteration
            if item is not None:
                return item

    def close(self) -> None:
        """Release any directory listings still open."""
        while self._stack:
            self._stack.pop().close()
        self._started = True

    def __enter__(self) -> "PathEnumerator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def depth(self) -> int:
        """Number of directory listings currently open."""
        return len(self._stack)

    def _open_root(self) -> Optional[EnumeratedItem]:
        try:
            st = os.stat(self.root)
        except OSError as exc:
            return FilesystemError("Cannot read metadata", self.root, exc)

        if stat.S_ISDIR(st.st_mode):
            return self._push(self.root, Path())
        if stat.S_ISREG(st.st_mode):
            name = self.root.name
            if name in ("", ".", ".."):
                return PathError("Failed to extract file name", self.root)
            return FileTask(source_path=self.root, relative_path=Path(name))
        return FilesystemError("Not a regular file or directory", self.root)

    def _push(self, path: Path, prefix: Path) -> Optional[EnumeratedItem]:
        try:
            entries = os.scandir(path)
        except OSError as exc:
            return FilesystemError("Cannot list directory", path, exc)
        self._stack.append(_DirCursor(path, entries, prefix))
        logger.debug(f"Entering {path} (depth {len(self._stack)})")
        return None

    def _advance(self, cursor: _DirCursor) -> Optional[EnumeratedItem]:
        try:
            entry = next(cursor.entries)
        except StopIteration:
            self._stack.pop().close()
            return None
        except OSError as exc:
            # A listing that fails mid-read cannot be resumed.
            self._stack.pop().close()
            return FilesystemError("Cannot list directory", cursor.path, exc)

        path = Path(entry.path)
        relative = cursor.prefix / entry.name
        try:
            if entry.is_dir(follow_symlinks=False):
                return self._push(path, relative)
            # is_file() follows symlinks, so links to regular files are processed.
            if entry.is_file():
                return FileTask(source_path=path, relative_path=relative)
        except OSError as exc:
            return FilesystemError("Cannot read metadata", path, exc)
        return FilesystemError("Not a regular file or directory", path)
