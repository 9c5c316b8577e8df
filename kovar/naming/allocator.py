"""
命名分配器 - 自动分配 kovar_id

职责：
1. 新建对象：按 "<kind>-<count>" 生成名称，冲突时递增数字后缀
2. 复制/粘贴对象：名称与其他对象重复时为新对象重新命名，原对象保持不变
3. 同一批次内先分配的名称对后续对象可见

测试要点：
- test_unique_names: 任意新增/复制序列后名称唯一
- test_suffix_monotonic: rect-1, rect-2 已存在时新矩形命名 rect-3
- test_copy_collision: btn_submit 的副本命名为 btn_submit-1
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..interfaces import INameAllocator
from ..models import VisualObject

logger = logging.getLogger(__name__)

_NAME_NUMBER_RE = re.compile(r"^(.+)-(\d+)$")

FALLBACK_BASE = "shape"


def parse_name_number(name: str) -> tuple[str, int | None]:
    """拆分 "base-N" 形式的名称，无数字后缀时 N 为 None"""
    match = _NAME_NUMBER_RE.match(name)
    if match:
        return match.group(1), int(match.group(2))
    return name, None


def next_name(name: str, taken: set[str]) -> str:
    """从 name 的后缀 +1 开始（无后缀从 1 开始）找第一个未占用名称"""
    base, num = parse_name_number(name)
    candidate_num = num + 1 if num is not None else 1
    while f"{base}-{candidate_num}" in taken:
        candidate_num += 1
    return f"{base}-{candidate_num}"


def collect_names(objects: Iterable[VisualObject]) -> set[str]:
    """收集所有已分配的 kovar_id"""
    return {obj.meta.kovar_id for obj in objects if obj.meta.kovar_id}


def count_kind(objects: Iterable[VisualObject], kind: str) -> int:
    """统计同类型对象数（不含主画框）"""
    return sum(1 for obj in objects if obj.kind.value == kind and not obj.is_root_frame)


class NameAllocator(INameAllocator):
    """命名分配器实现"""

    def __init__(self):
        # 已处理过的句柄，同一对象不重复命名
        self._processed: set[str] = set()

    def on_objects_added(
        self,
        newly: list[VisualObject],
        all_objects: list[VisualObject],
    ) -> None:
        """处理一批新增对象的命名"""
        taken = collect_names(all_objects)

        for obj in newly:
            if obj.is_root_frame:
                continue
            if obj.id in self._processed:
                continue

            current = obj.meta.kovar_id
            if not current:
                obj.meta.kovar_id = self._allocate_new(obj, all_objects, taken)
                taken.add(obj.meta.kovar_id)
                logger.debug(f"分配名称: {obj.id} -> {obj.meta.kovar_id}")
            elif self._has_duplicate(obj, all_objects):
                renamed = next_name(current, taken)
                obj.meta.kovar_id = renamed
                taken.add(renamed)
                logger.debug(f"名称重复，重新命名: {obj.id} {current} -> {renamed}")

            self._processed.add(obj.id)

    def forget(self, shape_ids: Iterable[str]) -> None:
        """对象被删除后清除处理记录，重新加入时再次检查"""
        self._processed.difference_update(shape_ids)

    def _allocate_new(
        self,
        obj: VisualObject,
        all_objects: list[VisualObject],
        taken: set[str],
    ) -> str:
        kind = obj.kind.value or FALLBACK_BASE
        candidate = f"{kind}-{count_kind(all_objects, kind)}"
        if candidate in taken:
            candidate = next_name(candidate, taken)

        assert candidate not in taken, f"名称分配失败: {candidate}"
        return candidate

    @staticmethod
    def _has_duplicate(obj: VisualObject, all_objects: list[VisualObject]) -> bool:
        return any(
            other.meta.kovar_id == obj.meta.kovar_id and other.id != obj.id
            for other in all_objects
        )
