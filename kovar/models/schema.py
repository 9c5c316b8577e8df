"""
Kovar UI Schema - 画布对象与最终 HTML 之间的中间表示

每次导出重新构建，导出后丢弃
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class NodeType(str, Enum):
    """节点语义类型"""
    CONTAINER = "container"
    TEXT = "text"
    IMAGE = "image"
    BUTTON = "button"
    CANVAS = "canvas"
    LIST_ITEM = "list-item"


# 矩形可覆盖的组件类型
COMPONENT_OVERRIDES = frozenset({NodeType.CONTAINER, NodeType.BUTTON, NodeType.CANVAS})


class NodeStyle(BaseModel):
    """节点几何与可选样式"""
    x: int
    y: int
    width: int
    height: int
    color: str | None = None
    background_color: str | None = Field(None, alias="backgroundColor")
    border_width: int | float | None = Field(None, alias="borderWidth")
    opacity: int | float | None = None

    model_config = {"populate_by_name": True}


class SchemaNode(BaseModel):
    """Schema 节点"""
    id: str
    type: NodeType = NodeType.CONTAINER
    style: NodeStyle
    binding: str | None = None
    text: str | None = None
    src: str | None = None
    is_display: bool | None = None
    children: list[SchemaNode] | None = None

    @property
    def dom_id(self) -> str:
        """HTML 中使用的 id（绑定名优先）"""
        return self.binding or self.id


class Schema(BaseModel):
    """带版本号的 Schema 文档"""
    version: str
    root: SchemaNode

    def to_dict(self) -> dict[str, Any]:
        """序列化为字典（驼峰样式键，省略空字段）"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_json(cls, text: str) -> Schema:
        return cls.model_validate_json(text)
