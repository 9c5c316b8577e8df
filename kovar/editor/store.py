"""
对象仓库 - 编辑器侧的扁平对象表

职责：
1. 以句柄为键保存画布对象（父子关系由 parent_id 表示，按需重建树）
2. 事务提交后同步通知监听器本批新增对象（不重入）
3. 复制/粘贴、主画框创建、属性面板写入 meta

测试要点：
- test_transaction_batches_added: 事务内新增对象一次性通知
- test_duplicate_renames: 复制对象由命名器重新命名
- test_duplicate_copies_descendants: 复制时连同后代一起复制
- test_failed_transaction_still_names: 事务异常退出仍通知命名器
- test_update_meta_clamps_border: 边框宽度限制在 1-10
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from ..config import RuntimeConfig, get_config
from ..models import ShapeKind, ShapeMeta, Snapshot, VisualObject
from ..models.visual_object import SHAPE_ID_PREFIX
from ..naming import NameAllocator

logger = logging.getLogger(__name__)

Listener = Callable[[list[VisualObject], list[VisualObject]], None]


class ShapeStore:
    """画布对象仓库"""

    def __init__(self, config: RuntimeConfig | None = None):
        self.config = config or get_config()
        self._shapes: dict[str, VisualObject] = {}
        self._listeners: list[Listener] = []
        self._remove_listeners: list[Callable[[set[str]], None]] = []
        self._pending: list[VisualObject] | None = None
        self._notifying = False

    # === 查询 ===

    def get(self, shape_id: str) -> VisualObject | None:
        return self._shapes.get(shape_id)

    def all(self) -> list[VisualObject]:
        return list(self._shapes.values())

    def __len__(self) -> int:
        return len(self._shapes)

    def __contains__(self, shape_id: object) -> bool:
        return shape_id in self._shapes

    def root_frame(self) -> VisualObject | None:
        for obj in self._shapes.values():
            if obj.is_root_frame:
                return obj
        return None

    def snapshot(self, assets: dict[str, str] | None = None) -> Snapshot:
        """导出不可变快照（深拷贝）"""
        return Snapshot(
            objects=[obj.model_copy(deep=True) for obj in self._shapes.values()],
            assets=dict(assets or {}),
        )

    # === 监听 ===

    def listen(self, listener: Listener) -> Callable[[], None]:
        """注册新增对象监听器，返回取消函数"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_remove(self, callback: Callable[[set[str]], None]) -> None:
        """注册删除回调（参数为被删除的句柄集合）"""
        self._remove_listeners.append(callback)

    # === 写入 ===

    @contextmanager
    def transaction(self) -> Iterator[ShapeStore]:
        """事务：退出时一次性通知本批新增对象"""
        if self._pending is not None:
            # 嵌套事务并入外层
            yield self
            return

        self._pending = []
        try:
            yield self
        finally:
            added, self._pending = self._pending, None
            # 异常退出时已写入的对象同样通知，保证被命名
            added = [obj for obj in added if self._shapes.get(obj.id) is obj]
            if added:
                self._notify(added)

    def add(self, *objects: VisualObject) -> None:
        with self.transaction():
            for obj in objects:
                self._shapes[obj.id] = obj
                self._pending.append(obj)

    def remove(self, *shape_ids: str) -> list[VisualObject]:
        """删除对象及其全部后代"""
        to_remove = set()
        queue = list(shape_ids)
        while queue:
            shape_id = queue.pop()
            if shape_id in to_remove or shape_id not in self._shapes:
                continue
            to_remove.add(shape_id)
            queue.extend(o.id for o in self._shapes.values() if o.parent_id == shape_id)

        removed = [self._shapes.pop(shape_id) for shape_id in to_remove]
        for callback in list(self._remove_listeners):
            callback(to_remove)
        return removed

    def duplicate(
        self,
        shape_ids: Iterable[str],
        offset: tuple[float, float] = (16.0, 16.0),
    ) -> list[VisualObject]:
        """
        复制对象及其全部后代（meta 原样复制，重名由命名器处理）

        只有最外层副本偏移 offset；子对象坐标相对父对象，保持不变。
        已选对象的后代同时被选中时只随祖先复制一次。
        """
        dx, dy = offset
        selected = [
            shape_id for shape_id in shape_ids
            if shape_id in self._shapes and not self._shapes[shape_id].is_root_frame
        ]
        selected_set = set(selected)

        copies: list[VisualObject] = []
        for shape_id in selected:
            if self._ancestor_ids(shape_id) & selected_set:
                continue
            source = self._shapes[shape_id]
            top = self._copy_subtree(source, source.parent_id, copies, seen=set())
            top.x += dx
            top.y += dy

        if copies:
            self.add(*copies)
        return copies

    def ensure_root_frame(self, width: int | None = None, height: int | None = None) -> VisualObject:
        """确保主画框存在"""
        existing = self.root_frame()
        if existing is not None:
            return existing

        export_cfg = self.config.export
        frame = VisualObject(
            id=f"{SHAPE_ID_PREFIX}{export_cfg.main_frame_id}",
            kind=ShapeKind.FRAME,
            w=width or export_cfg.default_width,
            h=height or export_cfg.default_height,
            index="a0",
            meta=ShapeMeta(is_main_window=True),
        )
        self.add(frame)
        logger.info(f"创建主画框: {frame.id} ({frame.w}x{frame.h})")
        return frame

    def update_meta(self, shape_id: str, **fields: Any) -> VisualObject:
        """属性面板写入 meta"""
        obj = self._shapes.get(shape_id)
        if obj is None:
            raise KeyError(shape_id)

        if "border_width" in fields:
            fields["border_width"] = self.config.clamp_border_width(fields["border_width"])
        if "component_type" in fields and not fields["component_type"]:
            # container 即默认值
            fields["component_type"] = None

        obj.meta = obj.meta.model_copy(update=fields)
        return obj

    def _children_of(self, shape_id: str) -> list[VisualObject]:
        return [obj for obj in self._shapes.values() if obj.parent_id == shape_id]

    def _ancestor_ids(self, shape_id: str) -> set[str]:
        ancestors: set[str] = set()
        parent_id = self._shapes[shape_id].parent_id
        while parent_id in self._shapes and parent_id not in ancestors:
            ancestors.add(parent_id)
            parent_id = self._shapes[parent_id].parent_id
        return ancestors

    def _copy_subtree(
        self,
        source: VisualObject,
        parent_id: str | None,
        copies: list[VisualObject],
        seen: set[str],
    ) -> VisualObject:
        seen.add(source.id)
        copy = source.model_copy(deep=True)
        copy.id = new_shape_id()
        copy.parent_id = parent_id
        copies.append(copy)

        for child in self._children_of(source.id):
            if child.id not in seen:
                self._copy_subtree(child, copy.id, copies, seen)
        return copy

    def _notify(self, added: list[VisualObject]) -> None:
        if self._notifying:
            logger.warning(f"监听器回调中新增对象，忽略重入通知: {len(added)} 个")
            return

        self._notifying = True
        try:
            snapshot = self.all()
            for listener in list(self._listeners):
                listener(added, snapshot)
        finally:
            self._notifying = False


def new_shape_id() -> str:
    """生成新的对象句柄"""
    return f"{SHAPE_ID_PREFIX}{uuid.uuid4().hex[:12]}"


def attach_allocator(store: ShapeStore, allocator: NameAllocator | None = None) -> NameAllocator:
    """把命名器挂到仓库上（每次事务提交后命名新增对象）"""
    allocator = allocator or NameAllocator()
    store.listen(allocator.on_objects_added)
    store.on_remove(allocator.forget)
    return allocator
