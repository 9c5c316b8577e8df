"""
Schema 组装器 - 树构建 + 节点映射 -> 带版本号的 Schema

职责：
1. 按主画框标记定位根画框（找不到则 MissingRootError）
2. 以根画框句柄为起点构建子树并逐个映射
3. 合成根节点（container，位于(0,0)，尺寸取根画框）

测试要点：
- test_missing_root: 无主画框时失败且无输出
- test_root_geometry: 根节点几何取主画框宽高
- test_children_omitted_when_empty: 空画布根节点不带 children
"""

from __future__ import annotations

from collections.abc import Sequence

from ..config import RuntimeConfig, get_config
from ..interfaces import INodeMapper, ISchemaAssembler, MissingRootError
from ..models import NodeStyle, NodeType, Schema, SchemaNode, VisualObject
from .node_mapper import NodeMapper, round_half_up
from .tree_builder import TreeBuilder, TreeEntry


class SchemaAssembler(ISchemaAssembler):
    """Schema 组装器实现"""

    def __init__(self, config: RuntimeConfig | None = None):
        self.config = config or get_config()

    def assemble(
        self,
        objects: Sequence[VisualObject],
        assets: dict[str, str] | None = None,
        *,
        frame_id: str | None = None,
        flags: list[str] | None = None,
    ) -> Schema:
        """构建 Schema（flags 用于收集非致命告警）"""
        export_cfg = self.config.export
        root_frame = self._find_root_frame(objects, frame_id)

        builder = TreeBuilder(max_depth=export_cfg.max_depth, flags=flags)
        mapper: INodeMapper = NodeMapper(
            assets=assets, style_defaults=self.config.style, flags=flags
        )

        tree = builder.build_children(objects, root_frame.id)
        children = [self._map_entry(mapper, entry) for entry in tree]

        root = SchemaNode(
            id=export_cfg.root_id,
            type=NodeType.CONTAINER,
            style=NodeStyle(
                x=0,
                y=0,
                width=round_half_up(root_frame.w) or export_cfg.default_width,
                height=round_half_up(root_frame.h) or export_cfg.default_height,
            ),
            children=children or None,
        )

        return Schema(version=export_cfg.schema_version, root=root)

    def _map_entry(self, mapper: INodeMapper, entry: TreeEntry) -> SchemaNode:
        children = [self._map_entry(mapper, child) for child in entry.children]
        return mapper.map(entry.obj, children)

    @staticmethod
    def _find_root_frame(
        objects: Sequence[VisualObject],
        frame_id: str | None,
    ) -> VisualObject:
        for obj in objects:
            if frame_id is not None:
                if obj.id == frame_id:
                    return obj
            elif obj.is_root_frame:
                return obj

        raise MissingRootError(f"找不到主画框: {frame_id or 'is_main_window'}")
