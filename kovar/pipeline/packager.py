"""
打包器 - 写出导出产物和manifest

产物：
- kovar-ui.snapshot.json: 画布快照（事实来源）
- kovar-schema.json: Schema
- kovar-ui.html: HTML
- manifest.json: 产物清单与告警
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

from .. import __version__
from ..config import RuntimeConfig, get_config
from ..interfaces import ExportError, IPackager

if TYPE_CHECKING:
    from ..models import ExportResult


class Packager(IPackager):
    """打包器实现"""

    def __init__(self, config: RuntimeConfig | None = None):
        self.config = config or get_config()

    def write(self, result: ExportResult, output_dir: Path | None = None) -> dict[str, Path]:
        """写出全部产物，返回 产物名 -> 路径"""
        if result.schema_text is None or result.html is None:
            raise ExportError("导出结果不完整，无法写出产物")

        out_cfg = self.config.output
        output_dir = Path(output_dir or out_cfg.output_dir)

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            written = {
                "schema": self._write_text(output_dir / out_cfg.schema_filename, result.schema_text),
                "html": self._write_text(output_dir / out_cfg.html_filename, result.html),
            }
            if result.snapshot_text is not None:
                written["snapshot"] = self._write_text(
                    output_dir / out_cfg.snapshot_filename, result.snapshot_text
                )

            result.artifacts.schema_file = written["schema"]
            result.artifacts.html_file = written["html"]
            result.artifacts.snapshot_file = written.get("snapshot")

            written["manifest"] = self.generate_manifest(result, output_dir)
        except OSError as e:
            raise ExportError(f"产物写出失败: {output_dir}: {e}") from e

        return written

    def generate_manifest(self, result: ExportResult, output_dir: Path) -> Path:
        """生成manifest.json"""
        manifest = {
            "kovar_version": __version__,
            "schema_version": result.schema_doc.version if result.schema_doc else None,
            "artifacts": {
                "snapshot": _name_or_none(result.artifacts.snapshot_file),
                "schema": _name_or_none(result.artifacts.schema_file),
                "html": _name_or_none(result.artifacts.html_file),
            },
            "flags": result.flags,
            "errors": result.errors,
            "timestamps": {
                "started_at": result.started_at.isoformat() if result.started_at else None,
            },
        }

        manifest_path = output_dir / self.config.output.manifest_filename
        with open(manifest_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, ensure_ascii=False, indent=2)

        result.artifacts.manifest_file = manifest_path
        return manifest_path

    @staticmethod
    def _write_text(path: Path, content: str) -> Path:
        path.write_text(content, encoding="utf-8")
        return path


def _name_or_none(path: Path | None) -> str | None:
    return path.name if path else None
