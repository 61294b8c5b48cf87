"""코어 패키지 초기화(KR). Core package initialisation (EN)."""

from .config import DirpipeBaseModel, ProcessSettings, RunConfig, ScannerSettings
from .errors import DirpipeError, FlagError
from .logging import configure_logging
from .timezone import UTC, utc_now

__all__ = [
    "DirpipeBaseModel",
    "ProcessSettings",
    "RunConfig",
    "ScannerSettings",
    "DirpipeError",
    "FlagError",
    "configure_logging",
    "UTC",
    "utc_now",
]
