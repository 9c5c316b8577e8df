"""
导出流水线阶段定义
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """导出阶段枚举"""
    BUILD_SCHEMA = "BUILD_SCHEMA"
    RENDER_HTML = "RENDER_HTML"
    PACKAGE = "PACKAGE"


@dataclass
class PipelineStage:
    """流水线阶段"""
    name: str
    needs_output: bool = False  # 仅在指定输出目录时执行


EXPORT_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.BUILD_SCHEMA.value),
    PipelineStage(StageEnum.RENDER_HTML.value),
    PipelineStage(StageEnum.PACKAGE.value, needs_output=True),
]
