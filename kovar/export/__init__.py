"""
Schema 派生模块 - 扁平对象 -> 有序树 -> Schema -> HTML

子模块：
- tree_builder: 按 parent_id/排序键重建有序树
- node_mapper: 单个对象映射为 Schema 节点
- assembler: 组装带版本号的 Schema
- html_renderer: Schema 渲染为 HTML
"""

from .tree_builder import TreeBuilder, TreeEntry
from .node_mapper import NodeMapper, resolve_node_type
from .assembler import SchemaAssembler
from .html_renderer import HtmlRenderer, schema_to_html

__all__ = [
    "TreeBuilder",
    "TreeEntry",
    "NodeMapper",
    "resolve_node_type",
    "SchemaAssembler",
    "HtmlRenderer",
    "schema_to_html",
]
