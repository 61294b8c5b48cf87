"""실행 설정 모델(KR). Run configuration models (EN)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

from src.process.models import SupervisorOptions
from src.scanner.models import ScanOptions


class DirpipeBaseModel(BaseModel):
    """Pydantic v2 기반 공통 모델 · Shared pydantic base model."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)


class ScannerSettings(DirpipeBaseModel):
    """디렉터리 스캐너 설정 · Directory scanner settings."""

    workers: int = Field(default=8, ge=1, le=256)
    queue_size: int = Field(default=256, ge=1)
    on_error: Literal["fail", "skip"] = "fail"
    follow_symlinks: bool = False
    absolute: bool = True
    overall_timeout: float | None = Field(default=None, gt=0)

    def to_scan_options(self) -> ScanOptions:
        """스캐너 옵션으로 변환 · Convert into scanner options."""

        return ScanOptions(
            workers=self.workers,
            queue_size=self.queue_size,
            on_error=self.on_error,
            follow_symlinks=self.follow_symlinks,
            absolute=self.absolute,
            overall_timeout=self.overall_timeout,
        )


class ProcessSettings(DirpipeBaseModel):
    """대화형 프로세스 설정 · Interactive process settings."""

    command: str = "bash"
    args: Tuple[str, ...] = ()
    split_streams: bool = False
    encoding: str = "utf-8"
    exit_timeout: float | None = Field(default=None, gt=0)
    kill_grace: float = Field(default=3.0, ge=0)
    input_grace: float = Field(default=0.5, ge=0)
    output_grace: float = Field(default=1.0, ge=0)
    poll_interval: float = Field(default=0.05, gt=0)

    def to_supervisor_options(self) -> SupervisorOptions:
        """감독 옵션으로 변환 · Convert into supervisor options."""

        return SupervisorOptions(
            split_streams=self.split_streams,
            encoding=self.encoding,
            exit_timeout=self.exit_timeout,
            kill_grace=self.kill_grace,
            input_grace=self.input_grace,
            output_grace=self.output_grace,
            poll_interval=self.poll_interval,
        )


class RunConfig(DirpipeBaseModel):
    """드라이버 실행 설정 전체 · Complete driver run settings."""

    root: Path = Field(default_factory=lambda: Path("."))
    scan_enabled: bool = True
    scanner: ScannerSettings = Field(default_factory=ScannerSettings)
    process: ProcessSettings = Field(default_factory=ProcessSettings)

    def to_dict(self) -> Dict[str, Any]:
        """사전을 반환 · Return dictionary representation."""

        return dict(self.model_dump(mode="json"))


__all__ = ["DirpipeBaseModel", "ProcessSettings", "RunConfig", "ScannerSettings"]
