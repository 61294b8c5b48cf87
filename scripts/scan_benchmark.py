"""동시 스캔 벤치마크 및 메모리 측정./Benchmark concurrent scans with memory profile."""

from __future__ import annotations

import argparse
import tracemalloc
from pathlib import Path
from time import perf_counter

from src.scanner import DirectoryError, ScanOptions, ScanStatistics, run_scan_to_file


def _format_float(value: float) -> str:
    """소수점 둘째 자리까지 포맷./Format float to two decimals."""

    return f"{value:.2f}"


def _print_skipped(error: DirectoryError) -> None:
    """건너뛴 디렉터리를 출력합니다./Print skipped directories."""

    print(f"skipped path={error.path} reason={error.message}", flush=True)


def run_benchmark(root: Path, out_dir: Path, workers: int) -> ScanStatistics:
    """벤치마크 스캔을 실행합니다./Execute one benchmark scan."""

    options = ScanOptions(workers=workers, queue_size=1024, on_error="skip")
    out_dir.mkdir(parents=True, exist_ok=True)
    output_path = out_dir / f"scan_results_w{workers}.json"
    tracemalloc.start()
    started = perf_counter()
    stats = run_scan_to_file(root, output_path, options, report_error=_print_skipped)
    elapsed = perf_counter() - started
    _current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    print(
        "SUMMARY",
        f"workers={workers}",
        f"duration={_format_float(elapsed)}s",
        f"files={stats.files}",
        f"directories={stats.directories}",
        f"errors={stats.errors}",
        f"peak_mb={_format_float(peak / (1024 * 1024))}",
        sep=" ",
    )
    return stats


def main() -> None:
    """CLI 진입점./CLI entry point."""

    parser = argparse.ArgumentParser(description="Concurrent scan benchmark")
    parser.add_argument("root", type=Path, help="directory to scan")
    parser.add_argument("--out", type=Path, default=Path(".cache"), help="output directory")
    parser.add_argument(
        "--workers",
        type=int,
        nargs="+",
        default=[1, 4, 16],
        help="worker pool sizes to compare",
    )
    args = parser.parse_args()
    for workers in args.workers:
        run_benchmark(args.root.resolve(), args.out.resolve(), workers)


if __name__ == "__main__":
    main()
