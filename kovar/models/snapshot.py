"""
快照文档 - 画布对象集合的持久化形态

快照是唯一的事实来源，Schema/HTML 按需重新派生。
支持两种输入：
- 本项目格式 {"schema_version", "objects", "assets"}
- 编辑器 store 导出（shape:* / asset:* 记录）
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..interfaces import SnapshotError
from .visual_object import ShapeKind, ShapeMeta, ShapeStyle, VisualObject

logger = logging.getLogger(__name__)

SNAPSHOT_SCHEMA_VERSION = "1"


class Snapshot(BaseModel):
    """画布快照"""
    schema_version: str = SNAPSHOT_SCHEMA_VERSION
    objects: list[VisualObject] = Field(default_factory=list)
    assets: dict[str, str] = Field(default_factory=dict, description="asset_id -> src")

    def find_root_frame(self) -> VisualObject | None:
        """按主画框标记查找根画框"""
        for obj in self.objects:
            if obj.is_root_frame:
                return obj
        return None

    def to_json(self, indent: int = 2) -> str:
        data = self.model_dump(mode="json", exclude_none=True)
        return json.dumps(data, ensure_ascii=False, indent=indent)

    @classmethod
    def from_json(cls, text: str) -> Snapshot:
        """解析 JSON 文本（自动识别格式）"""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"快照JSON解析失败: {e}") from e
        return cls.from_data(data)

    @classmethod
    def from_data(cls, data: Any) -> Snapshot:
        if not isinstance(data, dict):
            raise SnapshotError("快照根节点必须是对象")

        if "objects" in data:
            try:
                return cls.model_validate(data)
            except ValidationError as e:
                raise SnapshotError(f"快照结构不合法: {e}") from e

        return cls.from_editor_store(data)

    @classmethod
    def load(cls, path: str | Path) -> Snapshot:
        path = Path(path)
        if not path.exists():
            raise SnapshotError(f"快照文件不存在: {path}")
        return cls.from_json(path.read_text(encoding="utf-8"))

    @classmethod
    def from_editor_store(cls, data: dict[str, Any]) -> Snapshot:
        """从编辑器 store 导出构建快照"""
        store = _locate_store(data)

        objects: list[VisualObject] = []
        assets: dict[str, str] = {}
        for record_id, record in store.items():
            if not isinstance(record, dict):
                continue
            if record_id.startswith("asset:"):
                src = (record.get("props") or {}).get("src")
                if src:
                    assets[record_id] = src
            elif record_id.startswith("shape:"):
                obj = _shape_from_record(record)
                if obj is not None:
                    objects.append(obj)

        return cls(objects=objects, assets=assets)


def _locate_store(data: dict[str, Any]) -> dict[str, Any]:
    """兼容 {document: {store}} / {store} / 直接记录表 三种结构"""
    document = data.get("document")
    if isinstance(document, dict) and isinstance(document.get("store"), dict):
        return document["store"]
    if isinstance(data.get("store"), dict):
        return data["store"]
    return data


def _shape_from_record(record: dict[str, Any]) -> VisualObject | None:
    """编辑器 shape 记录 -> VisualObject，不支持的类型返回 None"""
    shape_type = record.get("type", "")
    try:
        kind = ShapeKind.from_editor_type(shape_type)
    except ValueError:
        logger.debug(f"跳过不支持的对象类型: {record.get('id')} ({shape_type})")
        return None

    props = record.get("props") or {}
    meta = record.get("meta") or {}
    opacity = record.get("opacity")

    try:
        return VisualObject(
            id=record["id"],
            kind=kind,
            x=record.get("x", 0),
            y=record.get("y", 0),
            w=props.get("w"),
            h=props.get("h"),
            parent_id=record.get("parentId"),
            index=record.get("index"),
            style=ShapeStyle(
                color=props.get("color"),
                fill=props.get("fill"),
                dash=props.get("dash"),
                opacity=opacity if isinstance(opacity, (int, float)) else None,
            ),
            rich_text=props.get("richText"),
            text_content=props.get("text"),
            asset_id=props.get("assetId"),
            meta=ShapeMeta(**meta),
        )
    except (KeyError, ValidationError) as e:
        raise SnapshotError(f"对象记录不合法: {record.get('id')}: {e}") from e
