"""
导出结果模型 - 一次导出的状态与产物
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from .schema import Schema


class ExportStatus(str, Enum):
    """导出状态枚举"""
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ExportArtifacts(BaseModel):
    """已写出的产物路径"""
    snapshot_file: Path | None = None
    schema_file: Path | None = None
    html_file: Path | None = None
    manifest_file: Path | None = None


class ExportResult(BaseModel):
    """导出结果"""
    status: ExportStatus = ExportStatus.PENDING
    stage: str = "INIT"

    schema_doc: Schema | None = None
    schema_text: str | None = None
    html: str | None = None
    snapshot_text: str | None = None

    artifacts: ExportArtifacts = Field(default_factory=ExportArtifacts)

    flags: list[str] = Field(default_factory=list, description="非致命告警")
    errors: list[str] = Field(default_factory=list, description="错误信息")

    started_at: datetime | None = None
    finished_at: datetime | None = None

    def mark_running(self, stage: str = "BUILD_SCHEMA") -> None:
        """标记为运行中"""
        self.status = ExportStatus.RUNNING
        self.started_at = datetime.now()
        self.stage = stage

    def mark_succeeded(self) -> None:
        """标记为成功"""
        self.status = ExportStatus.SUCCEEDED
        self.finished_at = datetime.now()

    def mark_failed(self, error: str) -> None:
        """标记为失败，丢弃已派生的部分结果"""
        self.status = ExportStatus.FAILED
        self.finished_at = datetime.now()
        self.errors.append(error)
        self.schema_doc = None
        self.schema_text = None
        self.html = None

    def add_flag(self, flag: str) -> None:
        """添加告警标记（不中断）"""
        if flag not in self.flags:
            self.flags.append(flag)
