"""dirpipe CLI를 서브프로세스로 검증합니다./Validate the dirpipe CLI as a subprocess."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path
from subprocess import CompletedProcess

ECHO = "import sys\nfor line in sys.stdin:\n    sys.stdout.write(line)\n    sys.stdout.flush()\n"


def run(args: list[str], cwd: Path, stdin: str = "") -> CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "dirpipe.py", *args],
        cwd=cwd,
        input=stdin,
        capture_output=True,
        text=True,
        timeout=60,
    )


def test_version_flag(repo_root: Path) -> None:
    """-version은 이름과 버전을 출력 · -version prints name and version."""

    result = run(["-version"], repo_root)
    assert result.returncode == 0
    assert "dirpipe version 0.1.0" in result.stderr


def test_missing_spool_file_prints_usage(repo_root: Path) -> None:
    """파일 인자 누락 시 사용법과 1 · Missing FILE prints usage and exits 1."""

    result = run([], repo_root)
    assert result.returncode == 1
    assert "Usage:" in result.stderr
    payload = json.loads(result.stderr.strip().splitlines()[-1])
    assert payload["stage"] == "flags"


def test_unknown_flag_exits_one(repo_root: Path) -> None:
    """알 수 없는 플래그는 1 · Unknown flags exit 1."""

    result = run(["--bogus", "spool.txt"], repo_root)
    assert result.returncode == 1
    assert "--bogus" in result.stderr


def test_invalid_worker_count_is_flag_error(repo_root: Path, tmp_path: Path) -> None:
    """작업자 수 0은 플래그 오류 · Zero workers is a flag error."""

    result = run(
        ["--workers", "0", "--log-file", str(tmp_path / "run.log"), "spool.txt"], repo_root
    )
    assert result.returncode == 1
    assert json.loads(result.stderr.strip().splitlines()[-1])["stage"] == "flags"


def test_full_run_scans_then_relays(
    repo_root: Path, tmp_workspace: Path, tmp_path: Path
) -> None:
    """스캔 후 대화형 실행 · Scan output precedes the relayed session."""

    log_file = tmp_path / "run.log"
    result = run(
        [
            "--root",
            str(tmp_workspace),
            "--log-file",
            str(log_file),
            "-q",
            "query.sql",
            "-u",
            "scott",
            "-p",
            "tiger",
            "-s",
            "ORCL",
            "spool.txt",
            sys.executable,
            "-c",
            ECHO,
        ],
        repo_root,
        stdin="hello\nworld\n",
    )
    assert result.returncode == 0, result.stderr
    lines = result.stdout.splitlines()
    assert lines[0].startswith("Cmd file: [")
    assert lines[1].startswith("Cmd dir : [")
    assert lines[2] == f"root: [{tmp_workspace}]"
    scanned = {Path(line).relative_to(tmp_workspace).as_posix() for line in lines[3:6]}
    assert scanned == {"a.txt", "b/c.txt", "b/d/e.txt"}
    assert lines[6:] == ["hello", "world"]
    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert any("exited with status 0" in record["message"] for record in records)
    assert not any("tiger" in record["message"] for record in records)


def test_non_zero_child_exit_is_failure(repo_root: Path, tmp_path: Path) -> None:
    """자식 실패는 종료 코드 1 · A failing child makes the run exit 1."""

    result = run(
        [
            "--no-scan",
            "--log-file",
            str(tmp_path / "run.log"),
            "spool.txt",
            sys.executable,
            "-c",
            "import sys; sys.exit(4)",
        ],
        repo_root,
    )
    assert result.returncode == 1
    payload = json.loads(result.stderr.strip().splitlines()[-1])
    assert payload["stage"] == "process"
    assert "status 4" in payload["error"]


def test_missing_binary_is_failure(repo_root: Path, tmp_path: Path) -> None:
    """없는 명령은 SpawnError로 1 · A missing command exits 1."""

    result = run(
        ["--no-scan", "--log-file", str(tmp_path / "run.log"), "spool.txt", "/nonexistent-binary"],
        repo_root,
    )
    assert result.returncode == 1
    payload = json.loads(result.stderr.strip().splitlines()[-1])
    assert payload["stage"] == "process"
    assert "cannot start" in payload["error"]


def test_unreadable_root_fails_scan(repo_root: Path, tmp_path: Path) -> None:
    """없는 루트는 스캔 실패 · A missing root fails the scan stage."""

    result = run(
        [
            "--root",
            str(tmp_path / "missing"),
            "--log-file",
            str(tmp_path / "run.log"),
            "spool.txt",
            sys.executable,
            "-c",
            "pass",
        ],
        repo_root,
    )
    assert result.returncode == 1
    payload = json.loads(result.stderr.strip().splitlines()[-1])
    assert payload["stage"] == "scan"


def test_skip_unreadable_continues(repo_root: Path, tmp_path: Path) -> None:
    """skip 모드는 실패 없이 진행 · Skip mode reports and carries on."""

    result = run(
        [
            "--root",
            str(tmp_path / "missing"),
            "--skip-unreadable",
            "--log-file",
            str(tmp_path / "run.log"),
            "spool.txt",
            sys.executable,
            "-c",
            "print('ran')",
        ],
        repo_root,
    )
    assert result.returncode == 0, result.stderr
    assert "skipped" in result.stderr
    assert result.stdout.splitlines()[-1] == "ran"
