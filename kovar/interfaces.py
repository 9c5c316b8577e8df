"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换

使用方式：
    from kovar.interfaces import IMarkupRenderer

    class MyRenderer(IMarkupRenderer):
        def render(self, schema: Schema) -> str:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import Schema, SchemaNode, Snapshot, VisualObject
    from .models.export_job import ExportResult


# ============================================================================
# 命名模块接口
# ============================================================================

class INameAllocator(ABC):
    """命名分配器接口 - 保证 kovar_id 唯一"""

    @abstractmethod
    def on_objects_added(
        self,
        newly: list[VisualObject],
        all_objects: list[VisualObject],
    ) -> None:
        """
        处理一批新增对象的命名

        Args:
            newly: 本次事务新增的对象
            all_objects: 当前全部对象（已包含新增对象）

        副作用：
            原地写入对象的 meta.kovar_id，不抛异常
        """
        ...


# ============================================================================
# Schema 派生模块接口
# ============================================================================

class ISchemaAssembler(ABC):
    """Schema 组装器接口"""

    @abstractmethod
    def assemble(
        self,
        objects: list[VisualObject],
        assets: dict[str, str] | None = None,
    ) -> Schema:
        """
        从扁平对象集合构建 Schema

        Args:
            objects: 画布对象快照
            assets: 资源映射（asset_id -> src）

        Returns:
            带版本号的 Schema

        Raises:
            MissingRootError: 找不到主画框
            CycleDetectedError: 父子关系存在环
        """
        ...


class IMarkupRenderer(ABC):
    """标记渲染器接口"""

    @abstractmethod
    def render(self, schema: Schema) -> str:
        """Schema 渲染为 HTML 字符串"""
        ...


@runtime_checkable
class INodeMapper(Protocol):
    """节点映射协议"""

    def map(self, obj: VisualObject, children: list[SchemaNode]) -> SchemaNode:
        """单个对象映射为 Schema 节点"""
        ...


# ============================================================================
# 导出与打包接口
# ============================================================================

class IPackager(ABC):
    """打包器接口"""

    @abstractmethod
    def write(self, result: ExportResult, output_dir: Path) -> dict[str, Path]:
        """
        写出导出产物

        Args:
            result: 导出结果
            output_dir: 输出目录

        Returns:
            产物名 -> 文件路径
        """
        ...


class IExportPipeline(ABC):
    """导出流水线接口"""

    @abstractmethod
    def execute(self, snapshot: Snapshot) -> ExportResult:
        """执行一次导出"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class KovarError(Exception):
    """基础异常"""
    pass


class MissingRootError(KovarError):
    """找不到主画框"""
    pass


class CycleDetectedError(KovarError):
    """构建树时重复访问同一对象"""

    def __init__(self, message: str, shape_id: str | None = None):
        super().__init__(message)
        self.shape_id = shape_id


class SnapshotError(KovarError):
    """快照文档解析错误"""
    pass


class ExportError(KovarError):
    """导出失败（面向用户的单一错误，原因挂在 __cause__ 上）"""
    pass
