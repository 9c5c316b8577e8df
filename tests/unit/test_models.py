"""
数据模型单元测试
"""

import json

import pytest

from kovar.interfaces import SnapshotError
from kovar.models import (
    ExportResult,
    ExportStatus,
    NodeStyle,
    SchemaNode,
    ShapeKind,
    ShapeMeta,
    Snapshot,
    VisualObject,
    extract_text,
)


class TestVisualObject:
    """画布对象测试"""

    def test_editor_geo_type(self):
        obj = VisualObject(id="shape:g", kind="geo")
        assert obj.kind == ShapeKind.RECT

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            VisualObject(id="shape:a", kind="arrow")

    def test_is_root_frame(self):
        """只有带主画框标记的 frame 是根画框"""
        frame = VisualObject(id="shape:f", kind="frame", meta=ShapeMeta(is_main_window=True))
        plain = VisualObject(id="shape:p", kind="frame")
        rect = VisualObject(id="shape:r", kind="rect", meta=ShapeMeta(is_main_window=True))

        assert frame.is_root_frame
        assert not plain.is_root_frame
        assert not rect.is_root_frame

    def test_short_id(self):
        assert VisualObject(id="shape:abc", kind="rect").short_id == "abc"

    def test_meta_extra_kept(self):
        meta = ShapeMeta(kovar_id="a", env="dev")
        assert meta.model_dump()["env"] == "dev"


class TestExtractText:
    """富文本提取测试"""

    def test_paragraphs_concatenated(self):
        rich = {
            "content": [
                {"content": [{"text": "Hello"}, {"text": ", "}]},
                {"content": [{"text": "world"}]},
                {"type": "paragraph"},
            ]
        }
        assert extract_text(rich) == "Hello, world"

    @pytest.mark.parametrize("value", [None, {}, {"content": []}, "text"])
    def test_empty(self, value):
        assert extract_text(value) == ""

    def test_text_content_preferred(self):
        obj = VisualObject(
            id="shape:t",
            kind="text",
            text_content="plain",
            rich_text={"content": [{"content": [{"text": "rich"}]}]},
        )
        assert obj.plain_text() == "plain"


class TestSchemaNode:
    """Schema 节点测试"""

    def test_dom_id(self):
        style = NodeStyle(x=0, y=0, width=1, height=1)
        assert SchemaNode(id="abc", style=style).dom_id == "abc"
        assert SchemaNode(id="abc", binding="header", style=style).dom_id == "header"

    def test_style_aliases(self):
        style = NodeStyle(x=0, y=0, width=1, height=1, background_color="red", border_width=2)
        data = style.model_dump(by_alias=True, exclude_none=True)
        assert data["backgroundColor"] == "red"
        assert data["borderWidth"] == 2


class TestSnapshot:
    """快照测试"""

    def test_json_roundtrip(self, sample_snapshot):
        reloaded = Snapshot.from_json(sample_snapshot.to_json())

        assert [o.id for o in reloaded.objects] == [o.id for o in sample_snapshot.objects]
        assert reloaded.assets == sample_snapshot.assets
        assert reloaded.find_root_frame().id == "shape:kovar:main-frame"

    def test_invalid_json(self):
        with pytest.raises(SnapshotError):
            Snapshot.from_json("{not json")

    def test_non_object_root(self):
        with pytest.raises(SnapshotError):
            Snapshot.from_json("[]")

    def test_invalid_structure(self):
        with pytest.raises(SnapshotError):
            Snapshot.from_data({"objects": [{"kind": "rect"}]})

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(SnapshotError):
            Snapshot.load(temp_dir / "absent.json")

    def test_from_editor_store(self):
        """编辑器 store 导出：解析 shape/asset 记录，跳过不支持的类型"""
        data = {
            "document": {
                "store": {
                    "shape:kovar:main-frame": {
                        "id": "shape:kovar:main-frame",
                        "type": "frame",
                        "x": 0,
                        "y": 0,
                        "parentId": "page:page",
                        "index": "a1",
                        "opacity": 1,
                        "props": {"w": 800, "h": 600},
                        "meta": {"is_main_window": True},
                    },
                    "shape:box": {
                        "id": "shape:box",
                        "type": "geo",
                        "x": 10,
                        "y": 20,
                        "parentId": "shape:kovar:main-frame",
                        "index": "a1",
                        "opacity": 0.5,
                        "props": {"w": 100, "h": 40, "color": "red", "fill": "solid"},
                        "meta": {"kovar_id": "box", "component_type": "button"},
                    },
                    "shape:pic": {
                        "id": "shape:pic",
                        "type": "image",
                        "parentId": "shape:kovar:main-frame",
                        "index": "a2",
                        "props": {"w": 64, "h": 64, "assetId": "asset:1"},
                        "meta": {},
                    },
                    "shape:arrow": {
                        "id": "shape:arrow",
                        "type": "arrow",
                        "parentId": "shape:kovar:main-frame",
                        "index": "a3",
                        "props": {},
                    },
                    "asset:1": {"id": "asset:1", "type": "image", "props": {"src": "a.png"}},
                    "page:page": {"id": "page:page", "name": "Page 1"},
                }
            }
        }
        snapshot = Snapshot.from_json(json.dumps(data))

        assert {o.id for o in snapshot.objects} == {
            "shape:kovar:main-frame",
            "shape:box",
            "shape:pic",
        }
        assert snapshot.assets == {"asset:1": "a.png"}

        box = next(o for o in snapshot.objects if o.id == "shape:box")
        assert box.kind == ShapeKind.RECT
        assert (box.w, box.h) == (100, 40)
        assert box.style.opacity == 0.5
        assert box.style.fill == "solid"
        assert box.meta.component_type == "button"
        assert box.parent_id == "shape:kovar:main-frame"

    def test_editor_record_without_id(self):
        with pytest.raises(SnapshotError):
            Snapshot.from_editor_store({"shape:x": {"type": "geo"}})


class TestExportResult:
    """导出结果测试"""

    def test_mark_running(self):
        result = ExportResult()
        result.mark_running()

        assert result.status == ExportStatus.RUNNING
        assert result.stage == "BUILD_SCHEMA"
        assert result.started_at is not None

    def test_mark_failed_discards_partial(self):
        result = ExportResult(schema_text="{}", html="<div></div>")
        result.mark_running()
        result.mark_failed("boom")

        assert result.status == ExportStatus.FAILED
        assert result.errors == ["boom"]
        assert result.schema_text is None
        assert result.html is None

    def test_add_flag_dedup(self):
        result = ExportResult()
        result.add_flag("资源未解析:asset:1")
        result.add_flag("资源未解析:asset:1")
        assert result.flags == ["资源未解析:asset:1"]


class TestFiniteGeometry:
    """几何与透明度必须是有限数"""

    @pytest.mark.parametrize("field", ["x", "y", "w", "h"])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, field, value):
        with pytest.raises(ValueError):
            VisualObject(id="shape:a", kind="rect", **{field: value})

    def test_snapshot_with_nan_rejected(self):
        text = '{"objects": [{"id": "shape:a", "kind": "rect", "x": NaN}]}'
        with pytest.raises(SnapshotError):
            Snapshot.from_json(text)

    def test_editor_record_with_infinite_opacity_rejected(self):
        record = {"id": "shape:a", "type": "geo", "opacity": float("inf"), "props": {}}
        with pytest.raises(SnapshotError):
            Snapshot.from_editor_store({"shape:a": record})
