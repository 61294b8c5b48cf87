"""프로세스 세션 데이터 모델./Process session data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping

from .exceptions import SessionStateError


class StreamName(str, Enum):
    """자식 출력 스트림 구분./Which child stream a line came from."""

    STDOUT = "stdout"
    STDERR = "stderr"


class SessionState(str, Enum):
    """세션 수명 주기 상태./Lifecycle states of a process session."""

    CREATED = "created"
    PIPES_ATTACHED = "pipes_attached"
    STARTED = "started"
    RUNNING = "running"
    EXITED = "exited"
    SPAWN_FAILED = "spawn_failed"


_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.CREATED: frozenset({SessionState.PIPES_ATTACHED}),
    SessionState.PIPES_ATTACHED: frozenset({SessionState.STARTED, SessionState.SPAWN_FAILED}),
    SessionState.STARTED: frozenset({SessionState.RUNNING, SessionState.SPAWN_FAILED}),
    SessionState.RUNNING: frozenset({SessionState.EXITED}),
}


@dataclass(frozen=True, slots=True)
class RelayLine:
    """자식이 출력한 한 줄./One line emitted by the child."""

    stream: StreamName
    text: str


LineSink = Callable[[RelayLine], None]


@dataclass(slots=True)
class SupervisorOptions:
    """감독 동작 설정./Configuration for supervising a child."""

    split_streams: bool = False
    encoding: str = "utf-8"
    exit_timeout: float | None = None
    kill_grace: float = 3.0
    input_grace: float = 0.5
    output_grace: float = 1.0
    poll_interval: float = 0.05
    cwd: Path | None = None
    env: Mapping[str, str] | None = None


@dataclass(slots=True)
class ProcessSession:
    """단일 자식 프로세스 세션./State of one supervised child process."""

    command: str
    args: tuple[str, ...] = ()
    state: SessionState = SessionState.CREATED
    pid: int | None = None
    exit_status: int | None = None
    error: BaseException | None = None
    history: list[SessionState] = field(default_factory=lambda: [SessionState.CREATED])

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]

    def advance(self, target: SessionState) -> None:
        """상태를 전이합니다./Move to ``target`` or raise on an illegal transition."""

        if target not in _TRANSITIONS.get(self.state, frozenset()):
            raise SessionStateError(f"cannot move from {self.state.value} to {target.value}")
        self.state = target
        self.history.append(target)


@dataclass(slots=True)
class ProcessResult:
    """종료된 세션 결과./Outcome of a finished session."""

    exit_status: int
    input_error: BaseException | None
    duration_seconds: float
