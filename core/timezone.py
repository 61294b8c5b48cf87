'''시간 유틸리티(KR). Clock utilities (EN).'''

from __future__ import annotations

from datetime import datetime, timezone

UTC = timezone.utc


def utc_now() -> str:
    '''UTC 기준 현재 시각을 ISO8601로 반환 · Return UTC now as ISO8601.'''

    return datetime.now(tz=UTC).isoformat(timespec='milliseconds')


__all__ = ['utc_now', 'UTC']
