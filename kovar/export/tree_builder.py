"""
树构建器 - 由扁平对象集合重建有序树

职责：
1. 按 parent_id 筛选子对象
2. 按排序键字典序稳定排序（非字符串键视为最小）
3. 递归构建子树，重复访问同一句柄视为环

测试要点：
- test_order_preserved: a0/a1/a2 乱序输入按序输出
- test_malformed_key_sorts_first: 非法排序键排在最前
- test_cycle_detected: 重复访问抛出 CycleDetectedError
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..interfaces import CycleDetectedError
from ..models import VisualObject

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256


@dataclass
class TreeEntry:
    """树节点（对象 + 已排序子节点）"""
    obj: VisualObject
    children: list[TreeEntry] = field(default_factory=list)


def order_key(obj: VisualObject) -> tuple[int, str]:
    """排序键：字符串按字典序，其他类型排在最前"""
    if isinstance(obj.index, str):
        return (1, obj.index)
    return (0, "")


class TreeBuilder:
    """树构建器"""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, flags: list[str] | None = None):
        self.max_depth = max_depth
        # 非致命问题收集（可选）
        self.flags = flags

    def build_children(
        self,
        objects: Sequence[VisualObject],
        parent_id: str,
    ) -> list[TreeEntry]:
        """构建 parent_id 下的完整有序子树"""
        by_parent: dict[Any, list[VisualObject]] = {}
        for obj in objects:
            by_parent.setdefault(obj.parent_id, []).append(obj)

        visited = {parent_id}
        return self._build(by_parent, parent_id, visited, depth=1)

    def sorted_children(
        self,
        objects: Sequence[VisualObject],
        parent_id: str,
    ) -> list[VisualObject]:
        """仅返回直接子对象（已排序）"""
        return self._sort([obj for obj in objects if obj.parent_id == parent_id])

    def _build(
        self,
        by_parent: dict[Any, list[VisualObject]],
        parent_id: str,
        visited: set[str],
        depth: int,
    ) -> list[TreeEntry]:
        children = by_parent.get(parent_id)
        if not children:
            return []

        if depth > self.max_depth:
            raise CycleDetectedError(
                f"对象层级超过上限 {self.max_depth}: {parent_id}", shape_id=parent_id
            )

        entries = []
        for obj in self._sort(children):
            if obj.id in visited:
                raise CycleDetectedError(f"检测到循环引用: {obj.id}", shape_id=obj.id)
            visited.add(obj.id)
            entries.append(
                TreeEntry(obj=obj, children=self._build(by_parent, obj.id, visited, depth + 1))
            )
        return entries

    def _sort(self, siblings: list[VisualObject]) -> list[VisualObject]:
        for obj in siblings:
            if not isinstance(obj.index, str):
                logger.debug(f"排序键不合法，按最小处理: {obj.id} ({obj.index!r})")
                self._flag(f"排序键不合法:{obj.id}")
        return sorted(siblings, key=order_key)

    def _flag(self, flag: str) -> None:
        if self.flags is not None and flag not in self.flags:
            self.flags.append(flag)
