"""Batch processing functions for dark blob filtering."""

import logging
import multiprocessing
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from config import FilterSettings
from enumeration import PathEnumerator
from errors import BlobFilterError, FilesystemError
from models import BatchSummary, FileTask, Outcome
from processing import process_image
from reporting import ConsoleReporter

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[Outcome], None]


class _OutcomeCollector:
    """Thread-safe sink for outcomes produced by pool workers."""

    def __init__(self, reporter: Optional[ConsoleReporter] = None, on_outcome: Optional[OutcomeCallback] = None):
        self.reporter = reporter
        self.on_outcome = on_outcome
        self.outcomes: List[Outcome] = []
        self._lock = threading.Lock()

    def add(self, outcome: Outcome) -> None:
        with self._lock:
            self.outcomes.append(outcome)
        if outcome.ok:
            if self.reporter is not None:
                self.reporter.segmented(outcome.source, outcome.destination)
        else:
            logger.debug(f"Failed [{outcome.error.kind}] {outcome.error}")
        if self.on_outcome is not None:
            self.on_outcome(outcome)


def process_image_worker(task: FileTask, output_dir: Path, settings: FilterSettings) -> Outcome:
    """Worker function for parallel processing.

    Returns:
        Outcome for the task; failures are returned, never raised
    """
    try:
        destination = process_image(task, output_dir, settings)
    except BlobFilterError as exc:
        return Outcome.failure(exc, source=task.source_path)
    except Exception as exc:
        logger.error(f"Unexpected error processing {task.source_path}: {exc}", exc_info=True)
        return Outcome.failure(
            BlobFilterError("Unexpected error", task.source_path, exc), source=task.source_path
        )
    return Outcome.success(task.source_path, destination)


def process_batch(
    inputs: Sequence[Union[str, Path]],
    output_dir: Path,
    settings: Optional[FilterSettings] = None,
    max_workers: Optional[int] = None,
    reporter: Optional[ConsoleReporter] = None,
    on_outcome: Optional[OutcomeCallback] = None,
) -> BatchSummary:
    """Filter every image reachable from ``inputs`` into ``output_dir``.

    Each input root is enumerated on the pool; every file it yields is then
    processed as its own pool task, so both levels share one set of workers.
    Outcomes arrive in completion order, not input order.

    Args:
        inputs: Files and/or directories to process
        output_dir: Root of the mirrored output tree
        settings: Detection and classification parameters
        max_workers: Number of worker threads (None = CPU count)
        reporter: Receives one line per successful file
        on_outcome: Optional callback invoked with each outcome as it lands

    Returns:
        BatchSummary with every outcome and the elapsed wall-clock time
    """
    if settings is None:
        settings = FilterSettings()
    if max_workers is None:
        max_workers = multiprocessing.cpu_count()
    elif max_workers < 1:
        max_workers = 1

    output_dir = Path(output_dir)
    roots = [Path(p) for p in inputs]
    collector = _OutcomeCollector(reporter, on_outcome)
    file_futures: List[Future] = []
    futures_lock = threading.Lock()

    logger.info(f"Processing {len(roots)} input(s) into {output_dir} with {max_workers} worker(s)")
    start_time = time.time()

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="blob-filter") as executor:

        def run_task(task: FileTask) -> None:
            collector.add(process_image_worker(task, output_dir, settings))

        def expand_root(root: Path) -> int:
            """Enumerate one root, scheduling a task per file; never waits on them."""
            submitted = 0
            with PathEnumerator(root) as enumerator:
                for item in enumerator:
                    if isinstance(item, BlobFilterError):
                        collector.add(Outcome.failure(item))
                        continue
                    future = executor.submit(run_task, item)
                    with futures_lock:
                        file_futures.append(future)
                    submitted += 1
            logger.debug(f"Scheduled {submitted} file(s) from {root}")
            return submitted

        root_futures = {executor.submit(expand_root, root): root for root in roots}
        wait(root_futures)
        for future, root in root_futures.items():
            exc = future.exception()
            if exc is not None:
                logger.error(f"Enumeration of {root} aborted: {exc}", exc_info=exc)
                collector.add(Outcome.failure(FilesystemError("Enumeration aborted", root, exc)))

        # Every root task has returned, so no further file tasks can appear.
        with futures_lock:
            pending = list(file_futures)
        wait(pending)
        for future in pending:
            exc = future.exception()
            if exc is not None:
                logger.error(f"Outcome callback failed: {exc}", exc_info=exc)

    summary = BatchSummary(outcomes=collector.outcomes, elapsed_seconds=time.time() - start_time)
    logger.info(
        f"Finished: {summary.succeeded} succeeded, {summary.failed} failed "
        f"in {summary.elapsed_seconds:.3f}s"
    )
    return summary
