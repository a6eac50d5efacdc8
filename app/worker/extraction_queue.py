import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

from app.logging.logger import Log


class QueueFullError(Exception):
    """Raised when the extraction queue is at its depth limit."""


class ExtractionQueue:
    """Bounded background queue for extraction jobs.

    Runs at most ``max_workers`` jobs at a time and holds at most
    ``queue_limit`` jobs waiting for a worker. ``submit`` never blocks:
    past the limit it raises QueueFullError.
    """

    def __init__(
        self,
        handler: Callable[[str], None],
        max_workers: int,
        queue_limit: int,
    ) -> None:
        self._handler = handler
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="job",
        )
        # One slot per running or waiting job.
        self._slots = threading.BoundedSemaphore(max_workers + queue_limit)

    def has_capacity(self) -> bool:
        """Whether a submit right now would be accepted."""
        if not self._slots.acquire(blocking=False):
            return False
        self._slots.release()
        return True

    def submit(self, document_id: str) -> Future[None]:
        """Schedule extraction for a document.

        Raises:
            QueueFullError: if the queue is at its depth limit.
        """
        if not self._slots.acquire(blocking=False):
            raise QueueFullError(f"Extraction queue is full, document {document_id} not scheduled")
        try:
            future = self._executor.submit(self._run, document_id)
        except RuntimeError:
            self._slots.release()
            raise
        Log.debug(f"Scheduled extraction for document {document_id}")
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _run(self, document_id: str) -> None:
        try:
            self._handler(document_id)
        finally:
            self._slots.release()
