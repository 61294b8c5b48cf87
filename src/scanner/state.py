"""스캔 상태 추적기./Track shared scan state across workers."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from .models import DirectoryError, ScanStatistics


class PendingWork:
    """진행 중인 디렉터리 작업 수./Count in-flight directory traversals.

    The count starts at one for the root. Callers must ``add`` before queueing
    a subdirectory and ``done`` after finishing a directory, so the count can
    only reach zero once no traversal is queued or running.
    """

    def __init__(self, initial: int = 1) -> None:
        self._count = initial
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def add(self, amount: int = 1) -> None:
        """작업 수를 늘립니다./Register newly discovered work."""

        with self._cond:
            if self._count <= 0:
                raise RuntimeError("pending work already drained")
            self._count += amount

    def done(self) -> bool:
        """작업 하나를 완료합니다./Mark one traversal finished.

        Returns True for the call that brought the count to zero.
        """

        with self._cond:
            if self._count <= 0:
                raise RuntimeError("pending work counter underflow")
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()
                return True
            return False

    def wait_zero(self, timeout: float | None = None) -> bool:
        """작업 수가 0이 될 때까지 대기./Block until the count is zero."""

        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)


@dataclass(slots=True)
class ScanState:
    """스캔 진행 상황을 저장합니다./Store ongoing scan statistics."""

    start_time: float = field(default_factory=time.perf_counter)
    files: int = 0
    directories: int = 0
    errors: list[DirectoryError] = field(default_factory=list)
    fatal: DirectoryError | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_directory(self) -> None:
        with self._lock:
            self.directories += 1

    def record_file(self) -> None:
        with self._lock:
            self.files += 1

    def record_error(self, error: DirectoryError, *, fatal: bool) -> bool:
        """오류를 기록합니다./Record an error, returning True if it became fatal."""

        with self._lock:
            self.errors.append(error)
            if fatal and self.fatal is None:
                self.fatal = error
                return True
            return False

    def elapsed(self, now: float) -> float:
        return max(now - self.start_time, 0.0)

    def final_statistics(self, now: float) -> ScanStatistics:
        """최종 통계를 생성합니다./Produce final aggregate statistics."""

        with self._lock:
            return ScanStatistics(
                files=self.files,
                directories=self.directories,
                errors=len(self.errors),
                duration_seconds=round(self.elapsed(now), 3),
            )
