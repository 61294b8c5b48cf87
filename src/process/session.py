"""프로세스 세션 단계 빌더./Staged builder for a process session.

``SessionBuilder`` only offers ``attach_pipes``; the ``AttachedSession`` it
returns only offers ``start``; ``start`` returns a ``RunningSession`` that
only offers ``wait``. A child can therefore never start before its three
standard-stream pipes exist.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from typing import IO, Any, BinaryIO, Sequence

from ..utils.cancellation import CancellationToken
from .exceptions import (
    PipeError,
    ProcessCancelledError,
    ProcessTimeoutError,
    SessionStateError,
    SpawnError,
)
from .models import (
    LineSink,
    ProcessResult,
    ProcessSession,
    SessionState,
    StreamName,
    SupervisorOptions,
)
from .relay import ChildInput, InputForwarder, OutputRelay

logger = logging.getLogger(__name__)


class StandardPipes:
    """자식용 표준 스트림 파이프 세 쌍./Three OS pipes for a child's standard streams."""

    def __init__(self) -> None:
        self._fds: list[int] = []
        self._parent_opened = False
        try:
            self._stdin = self._pipe()
            self._stdout = self._pipe()
            self._stderr = self._pipe()
        except OSError as exc:
            self.close_all()
            raise PipeError(f"cannot open standard stream pipes: {exc}") from exc

    def _pipe(self) -> tuple[int, int]:
        read_fd, write_fd = os.pipe()
        self._fds.extend((read_fd, write_fd))
        return read_fd, write_fd

    @property
    def closed(self) -> bool:
        return not self._fds

    def child_ends(self) -> tuple[int, int, int]:
        """자식에게 넘길 끝단./Descriptors handed to the child as fd 0, 1 and 2."""

        return self._stdin[0], self._stdout[1], self._stderr[1]

    def release_child_ends(self) -> None:
        """부모 쪽에서 자식 끝단을 닫음./Close the child's ends inside the parent."""

        for fd in self.child_ends():
            self._close_fd(fd)

    def open_parent_ends(self) -> tuple[BinaryIO, BinaryIO, BinaryIO]:
        """부모 끝단을 파일 객체로 엽니다./Wrap the parent's ends as file objects."""

        if self._parent_opened:
            raise PipeError("parent pipe ends already opened")
        self._parent_opened = True
        stdin_w, stdout_r, stderr_r = self._stdin[1], self._stdout[0], self._stderr[0]
        # the file objects own these descriptors from now on
        for fd in (stdin_w, stdout_r, stderr_r):
            self._fds.remove(fd)
        return (
            open(stdin_w, "wb", buffering=0),
            open(stdout_r, "rb", buffering=0),
            open(stderr_r, "rb", buffering=0),
        )

    def close_all(self) -> None:
        for fd in list(self._fds):
            self._close_fd(fd)

    def _close_fd(self, fd: int) -> None:
        if fd not in self._fds:
            return
        self._fds.remove(fd)
        os.close(fd)


class SessionBuilder:
    """생성 단계 세션./A session in the ``created`` state."""

    def __init__(self, command: str, args: Sequence[str] = ()) -> None:
        self.session = ProcessSession(command=command, args=tuple(args))

    def attach_pipes(
        self,
        *,
        source: IO[Any],
        sink: LineSink,
        options: SupervisorOptions | None = None,
    ) -> "AttachedSession":
        """파이프를 연결합니다./Create the three pipes and bind caller streams."""

        if self.session.state is not SessionState.CREATED:
            raise SessionStateError("pipes already attached")
        pipes = StandardPipes()
        self.session.advance(SessionState.PIPES_ATTACHED)
        return AttachedSession(self.session, pipes, source, sink, options or SupervisorOptions())


class AttachedSession:
    """파이프가 연결된 세션./A session whose pipes exist but whose child has not started."""

    def __init__(
        self,
        session: ProcessSession,
        pipes: StandardPipes,
        source: IO[Any],
        sink: LineSink,
        options: SupervisorOptions,
    ) -> None:
        self.session = session
        self.pipes = pipes
        self._source = source
        self._sink = sink
        self._options = options

    def start(self) -> "RunningSession":
        """자식을 시작하고 중계를 개시./Spawn the child and start the relay threads."""

        if self.session.state is not SessionState.PIPES_ATTACHED:
            raise SessionStateError(f"cannot start from {self.session.state.value}")
        child_stdin, child_stdout, child_stderr = self.pipes.child_ends()
        options = self._options
        started_at = time.perf_counter()
        try:
            process = subprocess.Popen(
                self.session.argv,
                stdin=child_stdin,
                stdout=child_stdout,
                stderr=child_stderr,
                cwd=options.cwd,
                env=None if options.env is None else dict(options.env),
            )
        except OSError as exc:
            self.pipes.close_all()
            error = SpawnError(f"cannot start {self.session.command!r}: {exc}")
            self.session.error = error
            self.session.advance(SessionState.SPAWN_FAILED)
            raise error from exc
        self.pipes.release_child_ends()
        self.session.pid = process.pid
        self.session.advance(SessionState.STARTED)
        logger.info("started %s (pid %s)", " ".join(self.session.argv), process.pid)

        stdin_pipe, stdout_pipe, stderr_pipe = self.pipes.open_parent_ends()
        child_input = ChildInput(stdin_pipe, options.poll_interval)
        readers = [
            OutputRelay(pipe, stream, self._sink, options.encoding, options.poll_interval)
            for pipe, stream in (
                (stdout_pipe, StreamName.STDOUT),
                (stderr_pipe, StreamName.STDERR),
            )
        ]
        forwarder = InputForwarder(self._source, child_input, options.encoding)
        for relay in readers:
            relay.start()
        forwarder.start()
        self.session.advance(SessionState.RUNNING)
        return RunningSession(
            self.session, process, readers, forwarder, child_input, options, started_at
        )


class RunningSession:
    """실행 중인 세션./A session whose child is running."""

    def __init__(
        self,
        session: ProcessSession,
        process: subprocess.Popen[bytes],
        readers: list[OutputRelay],
        forwarder: InputForwarder,
        child_input: ChildInput,
        options: SupervisorOptions,
        started_at: float,
    ) -> None:
        self.session = session
        self.readers = readers
        self.forwarder = forwarder
        self.child_input = child_input
        self._process = process
        self._options = options
        self._started_at = started_at
        self._result: ProcessResult | None = None

    def wait(self, cancellation_token: CancellationToken | None = None) -> ProcessResult:
        """자식 종료까지 대기./Block until the child exits and its output is relayed.

        Relays still open ``output_grace`` seconds after the exit are stopped.
        """

        if self._result is not None:
            return self._result
        options = self._options
        deadline = None
        if options.exit_timeout is not None:
            deadline = time.monotonic() + options.exit_timeout
        try:
            while True:
                try:
                    self._process.wait(timeout=options.poll_interval)
                    break
                except subprocess.TimeoutExpired:
                    pass
                if cancellation_token is not None and cancellation_token.is_cancelled():
                    self._terminate()
                    raise ProcessCancelledError(f"session {self.session.pid} cancelled")
                if deadline is not None and time.monotonic() >= deadline:
                    self._terminate()
                    raise ProcessTimeoutError(
                        f"child {self.session.pid} did not exit within {options.exit_timeout}s"
                    )
        finally:
            self._finish()
        for relay in self.readers:
            if relay.error is not None:
                raise PipeError(f"relay of child output failed: {relay.error}") from relay.error
        self._result = ProcessResult(
            exit_status=self._process.returncode,
            input_error=self.forwarder.error,
            duration_seconds=round(time.perf_counter() - self._started_at, 3),
        )
        logger.info("pid %s exited with status %s", self.session.pid, self._process.returncode)
        return self._result

    def _terminate(self) -> None:
        logger.warning("terminating pid %s", self._process.pid)
        self._process.terminate()
        try:
            self._process.wait(timeout=self._options.kill_grace)
        except subprocess.TimeoutExpired:
            logger.warning("killing pid %s", self._process.pid)
            self._process.kill()
            self._process.wait()

    def _finish(self) -> None:
        if self.session.state is SessionState.EXITED:
            return
        deadline = time.monotonic() + self._options.output_grace
        for relay in self.readers:
            relay.join(timeout=max(deadline - time.monotonic(), 0.0))
        lingering = [relay for relay in self.readers if relay.is_alive()]
        if lingering:
            # a descendant of the child still holds the write ends
            logger.warning(
                "output of pid %s still open %.1fs after exit; detaching relays",
                self.session.pid,
                self._options.output_grace,
            )
            for relay in lingering:
                relay.stop()
            for relay in lingering:
                relay.join()
        self.forwarder.join(timeout=self._options.input_grace)
        self.child_input.close()
        self.session.exit_status = self._process.returncode
        self.session.advance(SessionState.EXITED)
