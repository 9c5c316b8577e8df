"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- VisualObject: 编辑器提供的画布对象
- SchemaNode/Schema: 派生出的 UI 描述
- Snapshot: 画布对象集合的持久化形态
- ExportResult: 一次导出的状态与产物
"""

from .export_job import ExportArtifacts, ExportResult, ExportStatus
from .schema import COMPONENT_OVERRIDES, NodeStyle, NodeType, Schema, SchemaNode
from .snapshot import Snapshot
from .visual_object import ShapeKind, ShapeMeta, ShapeStyle, VisualObject, extract_text

__all__ = [
    "VisualObject",
    "ShapeKind",
    "ShapeMeta",
    "ShapeStyle",
    "extract_text",
    "Schema",
    "SchemaNode",
    "NodeStyle",
    "NodeType",
    "COMPONENT_OVERRIDES",
    "Snapshot",
    "ExportResult",
    "ExportStatus",
    "ExportArtifacts",
]
