"""프로세스 파이프 예외를 정의합니다./Define process pipe exceptions."""

from __future__ import annotations


class ProcessErrorBase(RuntimeError):
    """프로세스 감독 오류 기본 클래스./Base class for supervisor errors."""


class SpawnError(ProcessErrorBase):
    """자식 프로세스를 시작하지 못함./The child process could not be started."""


class PipeError(ProcessErrorBase):
    """표준 스트림 파이프 오류./A standard stream pipe failed."""


class SessionStateError(ProcessErrorBase):
    """허용되지 않은 세션 상태 전이./Illegal session state transition."""


class ProcessTimeoutError(ProcessErrorBase):
    """종료 대기 시간 초과./The child did not exit in time."""


class ProcessCancelledError(ProcessErrorBase):
    """취소 토큰으로 세션이 중단됨./Session stopped by cancellation token."""
