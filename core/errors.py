"""드라이버 예외 정의(KR). Driver exception definitions (EN)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class DirpipeError(Exception):
    """드라이버 단계 오류를 표현 · Represent a driver stage failure."""

    message: str
    stage: str | None = None

    def __str__(self) -> str:
        """사람 친화적 메시지를 생성 · Build human friendly message."""

        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class FlagError(DirpipeError):
    """잘못된 명령행 인자 · Invalid or missing command line arguments."""

    def __init__(self, message: str) -> None:
        super().__init__(message, stage="flags")


__all__ = ["DirpipeError", "FlagError"]
