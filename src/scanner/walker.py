"""동시 디렉터리 순회기./Concurrent directory walker."""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from typing import Iterator, cast

from ..utils.cancellation import CancellationToken
from .exceptions import ScanCancelledError, ScanError, ScanTimeoutError
from .models import (
    DirectoryError,
    ErrorReporter,
    ScanOptions,
    ScanRequest,
    ScanStatistics,
)
from .state import PendingWork, ScanState

logger = logging.getLogger(__name__)

_CLOSED = object()


class ConcurrentDirectoryWalker:
    """작업자 풀로 트리를 순회합니다./Walk a directory tree with a bounded worker pool.

    Workers pull directories from a shared work queue and push regular file
    paths onto a bounded output queue. A coordinator thread waits for the
    pending-work counter to drain, joins every worker and only then closes the
    output stream. A walker is single use.
    """

    def __init__(
        self,
        request: ScanRequest,
        options: ScanOptions | None = None,
        *,
        cancellation_token: CancellationToken | None = None,
        report_error: ErrorReporter | None = None,
    ) -> None:
        self._request = request
        self._options = options or ScanOptions()
        self._token = cancellation_token
        self._report_error = report_error
        self._state = ScanState()
        self._pending = PendingWork()
        self._work: queue.Queue[str] = queue.Queue()
        self._output: queue.Queue[object] = queue.Queue(maxsize=self._options.queue_size)
        # halt: workers must stop; abandoned: nobody reads the output any more
        self._halt = threading.Event()
        self._abandoned = threading.Event()
        self._close_lock = threading.Lock()
        self._closed = False
        self._workers: list[threading.Thread] = []
        self._coordinator: threading.Thread | None = None
        self._started = False
        self._statistics: ScanStatistics | None = None

    @property
    def statistics(self) -> ScanStatistics | None:
        """완료된 스캔 통계./Statistics of a finished scan, else None."""

        return self._statistics

    def iter_files(self) -> Iterator[str]:
        """파일 경로를 생성합니다./Yield file paths as workers discover them."""

        if self._started:
            raise RuntimeError("walker already used; create a new one to scan again")
        self._started = True
        self._start_threads()
        try:
            while True:
                self._ensure_limits()
                try:
                    item = self._output.get(timeout=self._options.poll_interval)
                except queue.Empty:
                    continue
                if item is _CLOSED:
                    break
                yield cast(str, item)
            # a worker may have seen the token before the stream closed
            self._ensure_cancelled()
        finally:
            self._abandoned.set()
            self._join()
            self._statistics = self._state.final_statistics(time.perf_counter())
        fatal = self._state.fatal
        if fatal is not None:
            raise ScanError(fatal.path, fatal.message)

    def _ensure_cancelled(self) -> None:
        if self._token is not None and self._token.is_cancelled():
            raise ScanCancelledError("scan cancelled")

    def _ensure_limits(self) -> None:
        """취소/타임아웃을 검사합니다./Check cancellation and timeout constraints."""

        self._ensure_cancelled()
        timeout = self._options.overall_timeout
        if timeout is not None and self._state.elapsed(time.perf_counter()) >= timeout:
            raise ScanTimeoutError("overall timeout exceeded")

    def _start_threads(self) -> None:
        root = str(self._request.root)
        if self._options.absolute:
            root = os.path.abspath(root)
        logger.debug("scan started at %s with %d workers", root, self._options.workers)
        self._state.start_time = time.perf_counter()
        self._work.put(root)
        for index in range(self._options.workers):
            worker = threading.Thread(
                target=self._worker_loop, name=f"scan-worker-{index}", daemon=True
            )
            worker.start()
            self._workers.append(worker)
        self._coordinator = threading.Thread(
            target=self._coordinate, name="scan-coordinator", daemon=True
        )
        self._coordinator.start()

    def _worker_loop(self) -> None:
        while not self._halt.is_set():
            try:
                directory = self._work.get(timeout=self._options.poll_interval)
            except queue.Empty:
                continue
            try:
                self._traverse(directory)
            finally:
                if self._pending.done():
                    self._halt.set()

    def _traverse(self, directory: str) -> None:
        if self._token is not None and self._token.is_cancelled():
            self._halt.set()
            return
        follow = self._options.follow_symlinks
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if self._halt.is_set():
                        return
                    if entry.is_dir(follow_symlinks=follow):
                        self._pending.add()
                        self._work.put(entry.path)
                    elif entry.is_file():
                        if not self._publish(entry.path):
                            return
        except OSError as exc:
            self._handle_error(directory, exc)
            return
        self._state.record_directory()

    def _publish(self, path: str) -> bool:
        """출력 큐에 경로를 넣습니다./Block until the consumer accepts ``path``."""

        while not self._halt.is_set():
            try:
                self._output.put(path, timeout=self._options.poll_interval)
            except queue.Full:
                continue
            self._state.record_file()
            return True
        return False

    def _handle_error(self, directory: str, exc: OSError) -> None:
        error = DirectoryError(path=directory, message=exc.strerror or str(exc))
        if self._options.on_error == "skip":
            self._state.record_error(error, fatal=False)
            logger.warning("skipping unreadable directory %s: %s", directory, error.message)
            if self._report_error is None:
                return
            try:
                self._report_error(error)
            except Exception as callback_exc:
                logger.exception("error reporter failed for %s", directory)
                self._abort(DirectoryError(path=directory, message=str(callback_exc)))
            return
        self._abort(error)

    def _abort(self, error: DirectoryError) -> None:
        if self._state.record_error(error, fatal=True):
            logger.error("scan aborted at %s: %s", error.path, error.message)
        self._halt.set()

    def _coordinate(self) -> None:
        while not self._halt.is_set():
            if self._pending.wait_zero(timeout=self._options.poll_interval):
                break
        self._halt.set()
        for worker in self._workers:
            worker.join()
        self._close_output()

    def _close_output(self) -> None:
        with self._close_lock:
            if self._closed:
                raise RuntimeError("output stream already closed")
            self._closed = True
        while not self._abandoned.is_set():
            try:
                self._output.put(_CLOSED, timeout=self._options.poll_interval)
            except queue.Full:
                continue
            return

    def _join(self) -> None:
        self._halt.set()
        if self._coordinator is not None:
            self._coordinator.join()
        for worker in self._workers:
            worker.join()
