"""대화형 프로세스 감독기./Interactive process supervisor."""

from __future__ import annotations

import logging
import sys
from typing import IO, Any, Sequence, TextIO

from ..utils.cancellation import CancellationToken
from .models import LineSink, ProcessResult, ProcessSession, SupervisorOptions
from .relay import StreamSink
from .session import SessionBuilder

logger = logging.getLogger(__name__)

__all__ = ["InteractiveSupervisor", "run_interactive"]


class InteractiveSupervisor:
    """자식 프로세스를 호출자 스트림에 연결합니다./Wire a child process to caller streams.

    Child stdout and stderr are relayed line by line to ``sink`` (by default
    the caller's ``stdout``, or ``stderr`` for error lines when
    ``split_streams`` is set) while ``stdin`` is forwarded into the child.
    ``run`` returns only after the child exited and both output streams were
    drained. Each supervisor runs one child once.
    """

    def __init__(
        self,
        command: str,
        args: Sequence[str] = (),
        options: SupervisorOptions | None = None,
        *,
        stdin: IO[Any] | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        sink: LineSink | None = None,
        cancellation_token: CancellationToken | None = None,
    ) -> None:
        self._options = options or SupervisorOptions()
        self._builder = SessionBuilder(command, args)
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr
        self._sink = sink
        self._token = cancellation_token

    @property
    def session(self) -> ProcessSession:
        return self._builder.session

    def _default_sink(self) -> LineSink:
        output = self._stdout if self._stdout is not None else sys.stdout
        error: TextIO | None = None
        if self._options.split_streams:
            error = self._stderr if self._stderr is not None else sys.stderr
        return StreamSink(output, error)

    def run(self) -> ProcessResult:
        """자식을 실행하고 종료를 기다립니다./Run the child and wait for it to exit."""

        source = self._stdin if self._stdin is not None else sys.stdin
        sink = self._sink if self._sink is not None else self._default_sink()
        attached = self._builder.attach_pipes(source=source, sink=sink, options=self._options)
        running = attached.start()
        result = running.wait(self._token)
        if result.input_error is not None:
            logger.warning("child input closed early: %s", result.input_error)
        return result


def run_interactive(
    command: str,
    args: Sequence[str] = (),
    options: SupervisorOptions | None = None,
    *,
    stdin: IO[Any] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    cancellation_token: CancellationToken | None = None,
) -> int:
    """대화형으로 명령을 실행합니다./Run ``command`` interactively and return its exit status.

    Raises ``SpawnError`` when the child cannot start and ``PipeError`` when a
    standard stream pipe cannot be opened.
    """

    supervisor = InteractiveSupervisor(
        command,
        args,
        options,
        stdin=stdin,
        stdout=stdout,
        stderr=stderr,
        cancellation_token=cancellation_token,
    )
    return supervisor.run().exit_status
