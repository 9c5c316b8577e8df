"""
HTML 渲染器 - Schema 递归渲染为标记字符串

纯函数式遍历，无共享状态，同一 Schema 多次渲染结果逐字节一致。

标签映射：
- list-item: <template>（无论有无子节点都包裹）
- text: <k-text> / <k-display>（is_display）
- button / canvas: 同名标签
- image: 自闭合 <img>
- container: <div>
"""

from __future__ import annotations

from html import escape

from ..interfaces import IMarkupRenderer
from ..models import NodeType, Schema, SchemaNode

INDENT = "  "

_TAGS = {
    NodeType.BUTTON: "button",
    NodeType.CANVAS: "canvas",
    NodeType.CONTAINER: "div",
}


def format_number(value: int | float) -> str:
    """数值格式化（整数值不带小数部分）"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_style(node: SchemaNode) -> str:
    """生成内联样式，可选属性按固定顺序追加"""
    style = node.style
    parts = [
        "position: absolute",
        f"left: {style.x}px",
        f"top: {style.y}px",
        f"width: {style.width}px",
        f"height: {style.height}px",
    ]
    if style.color:
        parts.append(f"color: {style.color}")
    if style.background_color:
        parts.append(f"background-color: {style.background_color}")
    if style.border_width:
        parts.append(f"border: {format_number(style.border_width)}px solid currentColor")
    if style.opacity is not None:
        parts.append(f"opacity: {format_number(style.opacity)}")
    return "; ".join(parts)


class HtmlRenderer(IMarkupRenderer):
    """HTML 渲染器实现"""

    def render(self, schema: Schema) -> str:
        return self.render_node(schema.root)

    def render_node(self, node: SchemaNode, depth: int = 0) -> str:
        pad = INDENT * depth
        node_id = escape(node.dom_id)
        style = escape(build_style(node))

        if node.type == NodeType.LIST_ITEM:
            inner = self._render_children(node, depth)
            return f'{pad}<template id="{node_id}">\n{inner}\n{pad}</template>'

        if node.type == NodeType.IMAGE:
            src = escape(node.src or "")
            return f'{pad}<img id="{node_id}" src="{src}" style="{style}" />'

        if node.type == NodeType.TEXT:
            tag = "k-display" if node.is_display else "k-text"
        else:
            tag = _TAGS.get(node.type, "div")

        open_tag = f'{pad}<{tag} id="{node_id}" style="{style}">'

        if node.children:
            inner = self._render_children(node, depth)
            return f"{open_tag}\n{inner}\n{pad}</{tag}>"

        if node.text:
            return f"{open_tag}{escape(node.text, quote=False)}</{tag}>"

        return f"{open_tag}</{tag}>"

    def _render_children(self, node: SchemaNode, depth: int) -> str:
        return "\n".join(self.render_node(child, depth + 1) for child in node.children or [])


def schema_to_html(schema: Schema) -> str:
    """便捷函数：Schema -> HTML"""
    return HtmlRenderer().render(schema)
