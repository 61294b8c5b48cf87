"""스캐너 데이터 모델 정의./Define scanner data models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal

ErrorPolicy = Literal["fail", "skip"]
ErrorReporter = Callable[["DirectoryError"], None]


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """단일 스캔 요청./A single scan request."""

    root: Path


@dataclass(slots=True)
class ScanOptions:
    """스캔 동작 설정./Configuration for scanning behaviour."""

    workers: int = 8
    queue_size: int = 256
    on_error: ErrorPolicy = "fail"
    follow_symlinks: bool = False
    absolute: bool = True
    overall_timeout: float | None = None
    poll_interval: float = 0.05

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        if self.on_error not in ("fail", "skip"):
            raise ValueError(f"unknown error policy: {self.on_error}")


@dataclass(frozen=True, slots=True)
class DirectoryError:
    """목록을 읽지 못한 디렉터리 정보./A directory that could not be listed."""

    path: str
    message: str


@dataclass(slots=True)
class ScanStatistics:
    """전체 스캔 요약 통계./Overall scan statistics."""

    files: int
    directories: int
    errors: int
    duration_seconds: float
