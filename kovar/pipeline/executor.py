"""
导出执行器 - 快照 -> Schema -> HTML -> 产物

职责：
1. 按顺序执行各阶段
2. 收集非致命告警（资源未解析/排序键不合法）
3. 致命错误（主画框缺失/循环引用）包装为单一 ExportError，原因挂在 __cause__

测试要点：
- test_execute_builds_schema_and_html: 完整导出
- test_missing_root_raises_export_error: 致命错误不返回部分结果
- test_idempotent: 同一快照多次导出结果一致
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import RuntimeConfig, get_config
from ..export import HtmlRenderer, SchemaAssembler
from ..interfaces import ExportError, IExportPipeline, KovarError
from ..models import ExportResult, Snapshot
from .packager import Packager
from .stages import EXPORT_STAGES, PipelineStage, StageEnum

logger = logging.getLogger(__name__)


class ExportPipeline(IExportPipeline):
    """导出执行器"""

    def __init__(self, config: RuntimeConfig | None = None):
        self.config = config or get_config()
        self.assembler = SchemaAssembler(self.config)
        self.renderer = HtmlRenderer()
        self.packager = Packager(self.config)

    def execute(
        self,
        snapshot: Snapshot,
        *,
        output_dir: Path | None = None,
        frame_id: str | None = None,
    ) -> ExportResult:
        """执行一次导出（output_dir 为空时不落盘）"""
        result = ExportResult()
        result.mark_running()

        # 在副本上派生，调用方后续修改不影响本次结果
        snapshot = snapshot.model_copy(deep=True)

        try:
            for stage in EXPORT_STAGES:
                if stage.needs_output and output_dir is None:
                    continue
                self._execute_stage(result, stage, snapshot, output_dir, frame_id)
        except KovarError as e:
            logger.exception(f"导出失败: 阶段 {result.stage}")
            result.mark_failed(str(e))
            raise ExportError(f"导出失败（{result.stage}）: {e}") from e

        result.mark_succeeded()
        return result

    def _execute_stage(
        self,
        result: ExportResult,
        stage: PipelineStage,
        snapshot: Snapshot,
        output_dir: Path | None,
        frame_id: str | None,
    ) -> None:
        result.stage = stage.name
        logger.info(f"开始阶段: {stage.name}")

        if stage.name == StageEnum.BUILD_SCHEMA.value:
            result.schema_doc = self.assembler.assemble(
                snapshot.objects,
                snapshot.assets,
                frame_id=frame_id,
                flags=result.flags,
            )
            result.schema_text = result.schema_doc.to_json()
            result.snapshot_text = snapshot.to_json()
            if result.flags:
                logger.info(f"非致命告警 {len(result.flags)} 项: {result.flags}")

        elif stage.name == StageEnum.RENDER_HTML.value:
            result.html = self.renderer.render(result.schema_doc)

        elif stage.name == StageEnum.PACKAGE.value:
            self.packager.write(result, output_dir)


def export_snapshot(snapshot: Snapshot, config: RuntimeConfig | None = None) -> tuple[str, str]:
    """便捷函数：快照 -> (Schema JSON, HTML)"""
    result = ExportPipeline(config).execute(snapshot)
    return result.schema_text, result.html
