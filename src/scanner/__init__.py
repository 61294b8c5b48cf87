"""동시 디렉터리 스캐너 API./Concurrent directory scanner API."""

from __future__ import annotations

from ..utils.cancellation import CancellationToken
from .exceptions import ScanCancelledError, ScanError, ScanErrorBase, ScanTimeoutError
from .models import (
    DirectoryError,
    ScanOptions,
    ScanRequest,
    ScanStatistics,
)
from .runner import run_scan_to_file, scan
from .state import PendingWork
from .walker import ConcurrentDirectoryWalker

__all__ = [
    "CancellationToken",
    "ConcurrentDirectoryWalker",
    "DirectoryError",
    "PendingWork",
    "ScanOptions",
    "ScanRequest",
    "ScanStatistics",
    "ScanErrorBase",
    "ScanError",
    "ScanCancelledError",
    "ScanTimeoutError",
    "scan",
    "run_scan_to_file",
]
