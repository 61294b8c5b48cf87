"""테스트용 가상 파일 트리 도우미./Virtual filesystem helpers for tests."""

from __future__ import annotations

from pathlib import Path


def create_virtual_tree(base: Path, files: dict[str, str]) -> list[Path]:
    """상대 경로 맵으로 파일을 생성합니다./Create files from relative path mapping."""

    created: list[Path] = []
    for relative, content in files.items():
        path = base / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        created.append(path)
    return created


def build_nested_tree(
    base: Path, depth: int, fanout: int, files_per_dir: int, prefix: str = "file"
) -> tuple[list[Path], int]:
    """균일한 중첩 트리를 만듭니다./Build a uniform tree, returning files and directory count.

    Every directory down to ``depth`` holds ``files_per_dir`` files and
    ``fanout`` subdirectories; the directory count excludes ``base``.
    """

    files: list[Path] = []
    directories = 0
    level = [base]
    base.mkdir(parents=True, exist_ok=True)
    for current_depth in range(depth + 1):
        next_level: list[Path] = []
        for directory in level:
            for index in range(files_per_dir):
                path = directory / f"{prefix}_{index:03d}.txt"
                path.write_text(f"{directory.name}-{index}", encoding="utf-8")
                files.append(path)
            if current_depth == depth:
                continue
            for index in range(fanout):
                child = directory / f"dir_{index:02d}"
                child.mkdir()
                directories += 1
                next_level.append(child)
        level = next_level
    return files, directories
