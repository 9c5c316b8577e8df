"""
树构建器单元测试
"""

import pytest

from kovar.export import TreeBuilder
from kovar.interfaces import CycleDetectedError


def _ids(entries):
    return [entry.obj.id for entry in entries]


class TestTreeBuilder:
    """树构建器测试"""

    def test_order_preserved(self, root_frame, make_shape):
        """a0/a1/a2 乱序输入按序输出"""
        objects = [
            root_frame,
            make_shape("shape:c", index="a2"),
            make_shape("shape:a", index="a0"),
            make_shape("shape:b", index="a1"),
        ]
        tree = TreeBuilder().build_children(objects, root_frame.id)
        assert _ids(tree) == ["shape:a", "shape:b", "shape:c"]

    def test_lexicographic_not_numeric(self, root_frame, make_shape):
        objects = [
            root_frame,
            make_shape("shape:nine", index="a9"),
            make_shape("shape:ten", index="a10"),
        ]
        tree = TreeBuilder().build_children(objects, root_frame.id)
        assert _ids(tree) == ["shape:ten", "shape:nine"]

    def test_equal_keys_stable(self, root_frame, make_shape):
        objects = [
            root_frame,
            make_shape("shape:y", index="a1"),
            make_shape("shape:x", index="a1"),
        ]
        tree = TreeBuilder().build_children(objects, root_frame.id)
        assert _ids(tree) == ["shape:y", "shape:x"]

    def test_malformed_key_sorts_first(self, root_frame, make_shape):
        """非字符串排序键视为最小，并记录告警"""
        flags: list[str] = []
        objects = [
            root_frame,
            make_shape("shape:ok", index="a0"),
            make_shape("shape:bad", index=5),
        ]
        tree = TreeBuilder(flags=flags).build_children(objects, root_frame.id)

        assert _ids(tree) == ["shape:bad", "shape:ok"]
        assert flags == ["排序键不合法:shape:bad"]

    def test_nested_children(self, root_frame, sample_objects):
        tree = TreeBuilder().build_children(sample_objects, root_frame.id)

        assert _ids(tree) == ["shape:header", "shape:logo", "shape:submit"]
        assert _ids(tree[0].children) == ["shape:title"]
        assert tree[1].children == []

    def test_root_not_in_output(self, root_frame, sample_objects):
        tree = TreeBuilder().build_children(sample_objects, root_frame.id)
        assert root_frame.id not in _ids(tree)

    def test_sorted_children_direct_only(self, root_frame, sample_objects):
        children = TreeBuilder().sorted_children(sample_objects, root_frame.id)
        assert [o.id for o in children] == ["shape:header", "shape:logo", "shape:submit"]


class TestCycleDetection:
    """循环引用检测测试"""

    def test_duplicate_handle_detected(self, root_frame, make_shape):
        objects = [
            root_frame,
            make_shape("shape:dup", index="a1"),
            make_shape("shape:dup", index="a2"),
        ]
        with pytest.raises(CycleDetectedError) as exc_info:
            TreeBuilder().build_children(objects, root_frame.id)
        assert exc_info.value.shape_id == "shape:dup"

    def test_root_parented_to_itself(self, root_frame):
        root_frame.parent_id = root_frame.id
        with pytest.raises(CycleDetectedError):
            TreeBuilder().build_children([root_frame], root_frame.id)

    def test_depth_limit(self, root_frame, make_shape):
        objects = [root_frame]
        parent = root_frame.id
        for i in range(5):
            shape_id = f"shape:level{i}"
            objects.append(make_shape(shape_id, parent_id=parent))
            parent = shape_id

        with pytest.raises(CycleDetectedError):
            TreeBuilder(max_depth=3).build_children(objects, root_frame.id)

        tree = TreeBuilder(max_depth=5).build_children(objects, root_frame.id)
        assert len(tree) == 1
