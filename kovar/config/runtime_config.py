"""
运行期配置 - 读取 kovar.yaml

职责：
- 加载导出/样式默认值/输出路径等运行参数
- 提供环境变量覆盖机制（KOVAR_ 前缀）
- 类型安全的配置访问
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ExportConfig(BaseModel):
    """Schema 导出配置"""

    schema_version: str = "1.0"
    root_id: str = "root"
    main_frame_id: str = "kovar:main-frame"
    default_width: int = 800
    default_height: int = 600
    max_depth: int = 256


class StyleDefaults(BaseModel):
    """编辑器样式默认值（与默认值相同的属性不输出）"""

    default_color: str = "black"
    default_fill: str = "none"
    default_border_width: int = 1
    min_border_width: int = 1
    max_border_width: int = 10


class OutputConfig(BaseModel):
    """产物输出配置"""

    output_dir: Path = Path("output")
    snapshot_filename: str = "kovar-ui.snapshot.json"
    schema_filename: str = "kovar-schema.json"
    html_filename: str = "kovar-ui.html"
    manifest_filename: str = "manifest.json"


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    export: ExportConfig = Field(default_factory=ExportConfig)
    style: StyleDefaults = Field(default_factory=StyleDefaults)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "KOVAR_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置，文件不存在时使用默认值"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        config = cls(
            export=ExportConfig(**cls._extract(data, "export")),
            style=StyleDefaults(**cls._extract(data, "style")),
            output=OutputConfig(**cls._extract(data, "output")),
            logging=LoggingConfig(**cls._extract(data, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置（支持 {default: x} 写法）"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """相对输出目录按配置文件所在目录解析"""
        if not self.output.output_dir.is_absolute():
            self.output.output_dir = (base_dir / self.output.output_dir).resolve()

    def configure_logging(self) -> None:
        """按配置设置 kovar 日志级别"""
        logging.getLogger("kovar").setLevel(self.logging.log_level.upper())

    def clamp_border_width(self, value: float | None) -> int:
        """边框宽度限制在 [min, max] 内，空值取默认"""
        if not value:
            return self.style.default_border_width
        return max(self.style.min_border_width, min(self.style.max_border_width, int(value)))


# 全局配置实例
_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("kovar.yaml")


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        default_path = DEFAULT_CONFIG_PATH
        if not default_path.exists():
            fallback_path = Path("config/kovar.yaml")
            if fallback_path.exists():
                default_path = fallback_path
        _config = RuntimeConfig.from_yaml(default_path)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
