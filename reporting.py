"""Console reporting for CLI runs."""

import sys
import threading
from pathlib import Path
from typing import Optional, TextIO

from models import BatchSummary


class ConsoleReporter:
    """Line-oriented reporter safe to call from several worker threads."""

    def __init__(self, stream: Optional[TextIO] = None, enable: bool = True):
        self.stream = stream
        self.enable = enable
        self._lock = threading.Lock()

    def _write(self, line: str) -> None:
        if not self.enable:
            return
        stream = self.stream if self.stream is not None else sys.stdout
        with self._lock:
            print(line, file=stream, flush=True)

    def segmented(self, source: Path, destination: Path) -> None:
        self._write(f"Segmented {source} -> {destination}")

    def summary(self, summary: BatchSummary) -> None:
        self._write(
            f"Processed {summary.succeeded} images in {summary.elapsed_seconds:.3f}s "
            f"({summary.failed} errors)"
        )
