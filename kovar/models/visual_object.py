"""
画布对象模型 - 编辑器提供的扁平对象

核心只读取几何/类型/样式，只写入 meta.kovar_id
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, FiniteFloat, field_validator

SHAPE_ID_PREFIX = "shape:"


class ShapeKind(str, Enum):
    """对象类型（封闭集合）"""
    RECT = "rect"
    FRAME = "frame"
    TEXT = "text"
    IMAGE = "image"

    @classmethod
    def from_editor_type(cls, value: str) -> ShapeKind:
        """编辑器类型名转换（geo 即矩形类）"""
        if value == "geo":
            return cls.RECT
        return cls(value)


class ShapeStyle(BaseModel):
    """编辑器样式属性（None 表示未设置）"""
    color: str | None = None
    fill: str | None = None
    dash: str | None = None
    opacity: FiniteFloat | None = None


class ShapeMeta(BaseModel):
    """对象元数据（由核心与属性面板读写）"""
    kovar_id: str | None = Field(None, description="对外唯一名称")
    component_type: str | None = Field(None, description="矩形组件类型覆盖: container/button/canvas")
    visibility_binding: str | None = Field(None, description="可见性绑定变量")
    is_display: bool = Field(False, description="文本使用 k-display 渲染")
    border_width: float | None = Field(None, description="边框宽度(1-10px)")
    is_main_window: bool = Field(False, description="主画框标记")

    model_config = {"extra": "allow"}


class VisualObject(BaseModel):
    """画布上的单个对象"""
    id: str = Field(..., description="编辑器分配的稳定句柄")
    kind: ShapeKind
    x: FiniteFloat = 0
    y: FiniteFloat = 0
    w: FiniteFloat | None = None
    h: FiniteFloat | None = None

    parent_id: str | None = Field(None, description="父对象句柄或主画框句柄")
    index: Any = Field(None, description="兄弟排序键（字典序比较）")

    style: ShapeStyle = Field(default_factory=ShapeStyle)
    rich_text: dict[str, Any] | None = None
    text_content: str | None = None
    asset_id: str | None = None
    meta: ShapeMeta = Field(default_factory=ShapeMeta)

    @field_validator("kind", mode="before")
    @classmethod
    def _accept_editor_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return ShapeKind.from_editor_type(v)
        return v

    @property
    def is_root_frame(self) -> bool:
        return self.kind == ShapeKind.FRAME and self.meta.is_main_window

    @property
    def kovar_id(self) -> str | None:
        return self.meta.kovar_id

    @property
    def short_id(self) -> str:
        """去掉 shape: 前缀的句柄（无名称时作为节点ID）"""
        return self.id.replace(SHAPE_ID_PREFIX, "", 1)

    def plain_text(self) -> str:
        """纯文本内容（优先已提取文本，其次富文本）"""
        if self.text_content is not None:
            return self.text_content
        return extract_text(self.rich_text)


def extract_text(rich_text: Any) -> str:
    """从编辑器富文本结构提取纯文本（段落直接拼接）"""
    if not isinstance(rich_text, dict):
        return ""

    blocks = rich_text.get("content")
    if not blocks:
        return ""

    parts = []
    for block in blocks:
        for node in (block or {}).get("content") or []:
            parts.append(node.get("text") or "")
    return "".join(parts)
