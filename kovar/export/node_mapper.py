"""
节点映射器 - 单个画布对象映射为 Schema 节点

类型解析：
- rect: 有 component_type 覆盖时取覆盖值，否则 container
- frame: container
- text: text
- image: image

样式只输出与编辑器默认值不同的属性；矩形始终输出 borderWidth。
默认值由配置显式传入，不依赖进程级共享状态。
"""

from __future__ import annotations

import logging
import math

from ..config import StyleDefaults
from ..models import (
    COMPONENT_OVERRIDES,
    NodeStyle,
    NodeType,
    SchemaNode,
    ShapeKind,
    VisualObject,
)

logger = logging.getLogger(__name__)

_KIND_TO_TYPE = {
    ShapeKind.RECT: NodeType.CONTAINER,
    ShapeKind.FRAME: NodeType.CONTAINER,
    ShapeKind.TEXT: NodeType.TEXT,
    ShapeKind.IMAGE: NodeType.IMAGE,
}


def round_half_up(value: float | None) -> int:
    """四舍五入到整数（.5 向上，与编辑器一致）"""
    if not value:
        return 0
    return int(math.floor(value + 0.5))


def compact_number(value: float) -> int | float:
    """整数值的浮点数转为 int（2.0 -> 2）"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def resolve_node_type(obj: VisualObject) -> NodeType:
    """解析节点语义类型"""
    override = obj.meta.component_type
    if obj.kind == ShapeKind.RECT and override:
        try:
            node_type = NodeType(override)
        except ValueError:
            node_type = None
        if node_type in COMPONENT_OVERRIDES:
            return node_type
        logger.debug(f"忽略不支持的组件类型覆盖: {obj.id} ({override})")

    return _KIND_TO_TYPE.get(obj.kind, NodeType.CONTAINER)


class NodeMapper:
    """节点映射器"""

    def __init__(
        self,
        assets: dict[str, str] | None = None,
        style_defaults: StyleDefaults | None = None,
        flags: list[str] | None = None,
    ):
        self.assets = assets or {}
        self.style_defaults = style_defaults or StyleDefaults()
        self.flags = flags

    def map(self, obj: VisualObject, children: list[SchemaNode]) -> SchemaNode:
        """映射单个对象（children 为已映射的子节点）"""
        node = SchemaNode(
            id=obj.meta.kovar_id or obj.short_id,
            type=resolve_node_type(obj),
            style=self._build_style(obj),
        )

        if obj.meta.kovar_id:
            node.binding = obj.meta.kovar_id

        if obj.kind == ShapeKind.TEXT:
            text = obj.plain_text()
            if text:
                node.text = text
            if obj.meta.is_display:
                node.is_display = True

        if obj.kind == ShapeKind.IMAGE and obj.asset_id:
            node.src = self._resolve_src(obj)

        if children:
            node.children = children

        return node

    def _build_style(self, obj: VisualObject) -> NodeStyle:
        defaults = self.style_defaults
        style = NodeStyle(
            x=round_half_up(obj.x),
            y=round_half_up(obj.y),
            width=round_half_up(obj.w),
            height=round_half_up(obj.h),
        )

        if obj.style.color and obj.style.color != defaults.default_color:
            style.color = obj.style.color
        if obj.style.fill and obj.style.fill != defaults.default_fill:
            style.background_color = obj.style.fill
        if obj.style.opacity is not None and obj.style.opacity != 1:
            style.opacity = compact_number(obj.style.opacity)

        if obj.kind == ShapeKind.RECT:
            style.border_width = compact_number(
                obj.meta.border_width or defaults.default_border_width
            )

        return style

    def _resolve_src(self, obj: VisualObject) -> str:
        src = self.assets.get(obj.asset_id)
        if src:
            return src

        logger.debug(f"图片资源未解析，使用原始引用: {obj.id} ({obj.asset_id})")
        if self.flags is not None:
            flag = f"资源未解析:{obj.asset_id}"
            if flag not in self.flags:
                self.flags.append(flag)
        return obj.asset_id
