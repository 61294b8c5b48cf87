"""스레드 간 취소 신호./Cancellation signal shared across threads."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass(slots=True)
class CancellationToken:
    """외부 취소 신호를 전달합니다./Carry cancellation signals across threads."""

    _event: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    def cancel(self) -> None:
        """취소 상태로 설정합니다./Mark token as cancelled."""

        self._event.set()

    def is_cancelled(self) -> bool:
        """취소 여부를 반환합니다./Return cancellation flag."""

        return self._event.is_set()
