"""스트리밍 스캔 실행기./Streaming scan runner."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from ..utils.cancellation import CancellationToken
from ..utils.json_stream import JsonArrayWriter
from .models import (
    ErrorReporter,
    ScanOptions,
    ScanRequest,
    ScanStatistics,
)
from .walker import ConcurrentDirectoryWalker

__all__ = ["scan", "run_scan_to_file"]


def scan(
    root: str | os.PathLike[str],
    options: ScanOptions | None = None,
    *,
    cancellation_token: CancellationToken | None = None,
    report_error: ErrorReporter | None = None,
) -> Iterator[str]:
    """루트 아래 모든 파일을 스캔합니다./Lazily scan every regular file under ``root``.

    Paths arrive in no particular order. Workers start on the first ``next``
    call, and ``overall_timeout`` is measured from there; the iterator cannot
    be restarted, call ``scan`` again for a fresh pass. Symlinks to regular
    files are yielded. Symlinked directories are only entered with
    ``follow_symlinks``; dangling links and special files are skipped.
    """

    walker = ConcurrentDirectoryWalker(
        ScanRequest(root=Path(root)),
        options,
        cancellation_token=cancellation_token,
        report_error=report_error,
    )
    return walker.iter_files()


def run_scan_to_file(
    root: str | os.PathLike[str],
    output_path: Path,
    options: ScanOptions | None = None,
    *,
    cancellation_token: CancellationToken | None = None,
    report_error: ErrorReporter | None = None,
) -> ScanStatistics:
    """스캔을 실행하고 JSON 배열로 기록./Run a scan and stream paths into a JSON array."""

    walker = ConcurrentDirectoryWalker(
        ScanRequest(root=Path(root)),
        options,
        cancellation_token=cancellation_token,
        report_error=report_error,
    )
    with JsonArrayWriter(output_path) as writer:
        for path in walker.iter_files():
            writer.write(path)
    statistics = walker.statistics
    assert statistics is not None
    return statistics
