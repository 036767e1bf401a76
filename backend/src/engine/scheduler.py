"""Render scheduler — background processing with "last request wins".

Every submission for a source image runs on its own daemon thread against a
private copy of the buffer. Submitting again for the same source bumps its
generation; when an older job finishes, its result is discarded instead of
overwriting the newer one.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import sentry_sdk

from engine.buffer import PixelBuffer
from engine.params import ProcessingParams
from engine.pipeline import process

logger = logging.getLogger(__name__)


class RenderStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETE = "complete"
    SUPERSEDED = "superseded"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass
class RenderJob:
    """Tracks one background render."""

    source_id: str
    generation: int
    status: RenderStatus = RenderStatus.PENDING
    result: PixelBuffer | None = None
    error: str | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False)
    _done: threading.Event = field(default_factory=threading.Event, repr=False)
    _thread: threading.Thread | None = field(default=None, repr=False)

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def cancel(self):
        self._cancel_event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the job finishes. Returns False on timeout."""
        return self._done.wait(timeout)

    def _finish(self, status: RenderStatus, result=None, error=None):
        with self._lock:
            self.status = status
            self.result = result
            self.error = error
        self._done.set()


class RenderScheduler:
    """Runs renders off the calling thread, one generation counter per source."""

    def __init__(self, process_fn: Callable[..., PixelBuffer] = process):
        self._process = process_fn
        self._lock = threading.Lock()
        self._generations: dict[str, int] = {}
        self._jobs: dict[str, RenderJob] = {}
        self._results: dict[str, PixelBuffer] = {}

    def submit(
        self,
        source_id: str,
        buffer: PixelBuffer,
        params: ProcessingParams,
        on_result: Callable[[RenderJob], None] | None = None,
    ) -> RenderJob:
        """Start a background render. Any in-flight render for the source is superseded."""
        # The worker only ever sees its own copy
        private = buffer.copy()

        with self._lock:
            generation = self._generations.get(source_id, 0) + 1
            self._generations[source_id] = generation
            previous = self._jobs.get(source_id)
            job = RenderJob(source_id=source_id, generation=generation)
            self._jobs[source_id] = job

        if previous is not None and not previous.done:
            previous.cancel()
            logger.debug(
                "Render %s gen %d superseded by gen %d",
                source_id,
                previous.generation,
                generation,
            )

        thread = threading.Thread(
            target=self._run,
            args=(job, private, params, on_result),
            daemon=True,
        )
        job._thread = thread
        thread.start()
        return job

    def _is_current(self, job: RenderJob) -> bool:
        with self._lock:
            return self._generations.get(job.source_id) == job.generation

    def _run(self, job, buffer, params, on_result):
        if job._cancel_event.is_set():
            status = (
                RenderStatus.CANCELLED if self._is_current(job) else RenderStatus.SUPERSEDED
            )
            job._finish(status)
            return

        with job._lock:
            job.status = RenderStatus.RUNNING

        try:
            result = self._process(buffer, params)
        except Exception as e:
            sentry_sdk.capture_exception(e)
            logger.exception(
                "Render %s gen %d failed",
                job.source_id,
                job.generation,
                extra={"source_id": job.source_id, "generation": job.generation},
            )
            job._finish(RenderStatus.ERROR, error=f"Render failed: {type(e).__name__}")
            return

        with self._lock:
            current = self._generations.get(job.source_id) == job.generation
            if current and not job._cancel_event.is_set():
                self._results[job.source_id] = result

        if not current:
            job._finish(RenderStatus.SUPERSEDED)
            return
        if job._cancel_event.is_set():
            job._finish(RenderStatus.CANCELLED)
            return

        job._finish(RenderStatus.COMPLETE, result=result)
        if on_result is not None:
            on_result(job)

    def job(self, source_id: str) -> RenderJob | None:
        """Most recently submitted job for the source."""
        with self._lock:
            return self._jobs.get(source_id)

    def latest(self, source_id: str) -> PixelBuffer | None:
        """Newest result that was still current when it completed."""
        with self._lock:
            return self._results.get(source_id)

    def wait(self, source_id: str, timeout: float | None = None) -> PixelBuffer | None:
        """Wait for the newest job of the source; return its result if it completed."""
        job = self.job(source_id)
        if job is None or not job.wait(timeout):
            return None
        return job.result

    def cancel(self, source_id: str) -> bool:
        """Cancel the newest job of the source. Returns True if it was still in flight."""
        job = self.job(source_id)
        if job is None or job.done:
            return False
        job.cancel()
        return True

    def get_status(self, source_id: str) -> dict:
        """Return serializable status dict."""
        job = self.job(source_id)
        if job is None:
            return {"status": None, "generation": 0}
        with job._lock:
            return {
                "status": job.status.value,
                "generation": job.generation,
                "error": job.error,
            }
