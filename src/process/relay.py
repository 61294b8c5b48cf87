"""자식 스트림 중계기./Relays between the caller and the child's standard streams."""

from __future__ import annotations

import logging
import os
import select
import threading
from typing import IO, Any, BinaryIO, TextIO

from .exceptions import PipeError
from .models import LineSink, RelayLine, StreamName

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 65536


class StreamSink:
    """중계된 줄을 호출자 스트림에 기록./Write relayed lines to caller text streams.

    Lines from stderr go to ``error`` when one is given, otherwise every line
    is written to ``output``. Writes from both relay threads are serialized.
    """

    def __init__(self, output: TextIO, error: TextIO | None = None) -> None:
        self._output = output
        self._error = error
        self._lock = threading.Lock()

    def __call__(self, line: RelayLine) -> None:
        target = self._output
        if line.stream is StreamName.STDERR and self._error is not None:
            target = self._error
        with self._lock:
            target.write(line.text + "\n")
            target.flush()


class ChildInput:
    """자식 stdin 파이프 소유자./Own the child's stdin pipe.

    The pipe is switched to non-blocking mode. A write waits for room outside
    the lock, so ``close`` never queues behind a write to a child that stopped
    reading, and the pipe is closed exactly once.
    """

    def __init__(self, pipe: BinaryIO, poll_interval: float = 0.05) -> None:
        self._pipe = pipe
        self._fd = pipe.fileno()
        self._poll_interval = poll_interval
        self._lock = threading.Lock()
        self._closed = False
        self.close_count = 0
        os.set_blocking(self._fd, False)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def write(self, data: bytes) -> None:
        """데이터를 모두 씁니다./Write all of ``data`` to the child."""

        view = memoryview(data)
        while view:
            with self._lock:
                if self._closed:
                    raise PipeError("child input already closed")
                try:
                    written = os.write(self._fd, view)
                except BlockingIOError:
                    written = 0
                except OSError as exc:
                    raise PipeError(f"cannot write to child input: {exc}") from exc
            view = view[written:]
            if view:
                self._wait_writable()

    def _wait_writable(self) -> None:
        try:
            select.select([], [self._fd], [], self._poll_interval)
        except (OSError, ValueError):
            # descriptor closed meanwhile; the next write reports it
            return

    def close(self) -> bool:
        """파이프를 닫습니다./Close the pipe; False if it was already closed."""

        with self._lock:
            if self._closed:
                return False
            self._closed = True
            self.close_count += 1
            self._pipe.close()
        return True


class OutputRelay(threading.Thread):
    """자식 출력 한 스트림을 줄 단위로 중계./Relay one child output stream line by line.

    The pipe is polled with ``select`` so ``stop`` ends the relay even when a
    process that outlived the child still holds the write end open.
    """

    def __init__(
        self,
        pipe: BinaryIO,
        stream: StreamName,
        sink: LineSink,
        encoding: str,
        poll_interval: float = 0.05,
    ) -> None:
        super().__init__(name=f"relay-{stream.value}", daemon=True)
        self._pipe = pipe
        self._stream = stream
        self._sink = sink
        self._encoding = encoding
        self._poll_interval = poll_interval
        self._stopping = threading.Event()
        self.lines = 0
        self.error: Exception | None = None

    def stop(self) -> None:
        """열린 파이프를 두고 중계 종료./Stop relaying although the pipe is still open."""

        self._stopping.set()

    def run(self) -> None:
        fd = self._pipe.fileno()
        pending = b""
        try:
            while not self._stopping.is_set():
                ready, _, _ = select.select([fd], [], [], self._poll_interval)
                if not ready:
                    continue
                chunk = os.read(fd, _CHUNK_SIZE)
                if not chunk:
                    break
                *complete, pending = (pending + chunk).split(b"\n")
                for raw in complete:
                    self._emit(raw)
            if pending:
                self._emit(pending)
        except OSError as exc:
            self.error = exc
            logger.error("reading child %s failed: %s", self._stream.value, exc)
        finally:
            self._pipe.close()

    def _emit(self, raw: bytes) -> None:
        if self.error is not None:
            # keep draining so the child never blocks on a full pipe
            return
        text = raw.decode(self._encoding, errors="replace").rstrip("\r")
        try:
            self._sink(RelayLine(stream=self._stream, text=text))
        except Exception as exc:
            self.error = exc
            logger.error("relay of child %s failed: %s", self._stream.value, exc)
            return
        self.lines += 1


class InputForwarder(threading.Thread):
    """호출자 입력을 자식 stdin으로 전달./Forward caller input into the child's stdin.

    Input is forwarded one line at a time. End of input closes the child's
    stdin. A failed write is kept in ``error`` instead of escaping the thread.
    """

    def __init__(self, source: IO[Any], child_input: ChildInput, encoding: str) -> None:
        super().__init__(name="relay-stdin", daemon=True)
        self._source = getattr(source, "buffer", source)
        self._child_input = child_input
        self._encoding = encoding
        self.forwarded = 0
        self.error: PipeError | None = None

    def run(self) -> None:
        try:
            while True:
                chunk = self._source.readline()
                if not chunk:
                    break
                if isinstance(chunk, str):
                    chunk = chunk.encode(self._encoding)
                self._child_input.write(chunk)
                self.forwarded += 1
        except PipeError as exc:
            self.error = exc
            logger.warning("input forwarding stopped: %s", exc)
        except (OSError, ValueError) as exc:
            self.error = PipeError(f"cannot read caller input: {exc}")
            logger.warning("caller input unreadable: %s", exc)
        finally:
            self._child_input.close()
