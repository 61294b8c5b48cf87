"""대화형 프로세스 파이프 API./Interactive process pipe API."""

from __future__ import annotations

from .exceptions import (
    PipeError,
    ProcessCancelledError,
    ProcessErrorBase,
    ProcessTimeoutError,
    SessionStateError,
    SpawnError,
)
from .models import (
    ProcessResult,
    ProcessSession,
    RelayLine,
    SessionState,
    StreamName,
    SupervisorOptions,
)
from .relay import ChildInput, StreamSink
from .session import AttachedSession, RunningSession, SessionBuilder
from .supervisor import InteractiveSupervisor, run_interactive

__all__ = [
    "AttachedSession",
    "ChildInput",
    "InteractiveSupervisor",
    "PipeError",
    "ProcessCancelledError",
    "ProcessErrorBase",
    "ProcessResult",
    "ProcessSession",
    "ProcessTimeoutError",
    "RelayLine",
    "RunningSession",
    "SessionBuilder",
    "SessionState",
    "SessionStateError",
    "SpawnError",
    "StreamName",
    "StreamSink",
    "SupervisorOptions",
    "run_interactive",
]
