"""Data models for dark blob filtering."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from errors import BlobFilterError

# One 4-connected component as (x, y) pixel coordinates, in discovery order.
Blob = List[Tuple[int, int]]


@dataclass(frozen=True)
class FileTask:
    """A discovered file and the path its mask takes under the output root."""
    source_path: Path
    relative_path: Path


@dataclass
class Outcome:
    """Result of processing one file (or of one failed enumeration step)."""
    source: Optional[Path] = None
    destination: Optional[Path] = None
    error: Optional[BlobFilterError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: Path, destination: Path) -> "Outcome":
        return cls(source=source, destination=destination)

    @classmethod
    def failure(cls, error: BlobFilterError, source: Optional[Path] = None) -> "Outcome":
        return cls(source=source if source is not None else error.path, error=error)


@dataclass
class BatchSummary:
    """Aggregated result of a batch run."""
    outcomes: List[Outcome] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)

    @property
    def destinations(self) -> List[Path]:
        return [o.destination for o in self.outcomes if o.ok]
