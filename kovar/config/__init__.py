"""
配置层 - 加载运行期配置

职责：
- 加载 kovar.yaml（导出/样式默认值/输出路径）
- 提供类型安全的配置访问接口
"""

from .runtime_config import (
    ExportConfig,
    LoggingConfig,
    OutputConfig,
    RuntimeConfig,
    StyleDefaults,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "ExportConfig",
    "StyleDefaults",
    "OutputConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
]
