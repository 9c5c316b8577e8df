"""
流水线模块 - 导出编排与产物落盘

子模块：
- stages: 导出阶段定义
- executor: 导出执行器
- packager: 产物与manifest写出
"""

from .stages import EXPORT_STAGES, PipelineStage, StageEnum
from .executor import ExportPipeline, export_snapshot
from .packager import Packager

__all__ = [
    "PipelineStage",
    "StageEnum",
    "EXPORT_STAGES",
    "ExportPipeline",
    "export_snapshot",
    "Packager",
]
