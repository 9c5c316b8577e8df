"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(make_shape, root_frame):
        rect = make_shape("shape:r1", "rect", kovar_id="header")
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generator

import pytest

from kovar.config import RuntimeConfig
from kovar.models import ShapeMeta, ShapeStyle, Snapshot, VisualObject

ROOT_FRAME_ID = "shape:kovar:main-frame"


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """默认运行期配置"""
    return RuntimeConfig()


# ============================================================================
# 画布对象 Fixtures
# ============================================================================

@pytest.fixture
def make_shape() -> Callable[..., VisualObject]:
    """画布对象工厂（默认挂在主画框下）"""

    def _make(
        shape_id: str,
        kind: str = "rect",
        *,
        parent_id: str = ROOT_FRAME_ID,
        index: Any = "a1",
        kovar_id: str | None = None,
        meta: ShapeMeta | None = None,
        **kwargs: Any,
    ) -> VisualObject:
        meta = meta or ShapeMeta()
        if kovar_id is not None:
            meta.kovar_id = kovar_id
        return VisualObject(
            id=shape_id,
            kind=kind,
            parent_id=parent_id,
            index=index,
            meta=meta,
            **kwargs,
        )

    return _make


@pytest.fixture
def root_frame() -> VisualObject:
    """主画框 800x600"""
    return VisualObject(
        id=ROOT_FRAME_ID,
        kind="frame",
        w=800,
        h=600,
        parent_id="page:page",
        index="a1",
        meta=ShapeMeta(is_main_window=True),
    )


def _rich_text(text: str) -> dict[str, Any]:
    return {
        "type": "doc",
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": text}]}],
    }


@pytest.fixture
def sample_objects(
    root_frame: VisualObject,
    make_shape: Callable[..., VisualObject],
) -> list[VisualObject]:
    """
    示例画布：
        root
        ├── header (rect, fill=solid)
        │   └── title (text, is_display)
        ├── logo (image)
        └── btn_submit (rect -> button, border 2)
    """
    header = make_shape(
        "shape:header",
        "rect",
        index="a1",
        kovar_id="header",
        x=10.4,
        y=20.6,
        w=200,
        h=50,
        style=ShapeStyle(color="black", fill="solid"),
    )
    title = make_shape(
        "shape:title",
        "text",
        parent_id="shape:header",
        index="a1",
        meta=ShapeMeta(kovar_id="title", is_display=True),
        rich_text=_rich_text("Hello"),
    )
    logo = make_shape(
        "shape:logo",
        "image",
        index="a2",
        kovar_id="logo",
        x=300,
        y=20,
        w=64,
        h=64,
        asset_id="asset:logo",
    )
    submit = make_shape(
        "shape:submit",
        "rect",
        index="a3",
        meta=ShapeMeta(kovar_id="btn_submit", component_type="button", border_width=2),
        x=20,
        y=500,
        w=120,
        h=40,
    )
    # 乱序输入，树构建按排序键恢复顺序
    return [submit, title, root_frame, logo, header]


@pytest.fixture
def sample_assets() -> dict[str, str]:
    return {"asset:logo": "data:image/png;base64,AAAA"}


@pytest.fixture
def sample_snapshot(
    sample_objects: list[VisualObject],
    sample_assets: dict[str, str],
) -> Snapshot:
    return Snapshot(objects=sample_objects, assets=sample_assets)


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
