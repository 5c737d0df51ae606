"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。
配置在启动时解析一次，各组件通过参数拿到普通值，不直接读取环境。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("KAGI_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


def parse_model_list(raw: Optional[str]) -> List[str]:
    """把逗号分隔的模型列表拆成去空白、去空项的列表。"""

    if not raw:
        return []
    return [m.strip() for m in raw.split(",") if m.strip()]


class KagiSettings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- 凭证 ----
    kagi_session_token: Optional[str] = Field(
        default=None,
        description="Kagi session token；为空时回退到 ~/.kagi_session_token",
    )
    kagi_search_cookie: Optional[str] = Field(
        default=None,
        description="_kagi_search_ cookie 值，assistant 必需",
    )

    # ---- Assistant 模型 ----
    kagi_model_list: Optional[str] = Field(
        default=None,
        description="逗号分隔的可用模型列表，例如 o3-pro,claude-4-sonnet",
    )
    kagi_default_model: Optional[str] = Field(
        default=None,
        description="默认模型，为空时取模型列表第一项",
    )

    # ---- Summarizer ----
    kagi_summarizer_engine: str = Field(
        default="default",
        description="摘要引擎（会话接口不支持选择，仅提示）",
    )

    # ---- HTTP ----
    kagi_base_url: str = Field(default="https://kagi.com", description="Kagi Web 根地址")
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")
    search_timeout: float = Field(default=10.0, ge=1.0, description="单条搜索的硬超时（秒）")

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("kagi_session_token", "kagi_search_cookie", "kagi_default_model")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("kagi_model_list")
    @classmethod
    def normalize_model_list(cls, v: Optional[str]) -> Optional[str]:
        models = parse_model_list(v)
        return ",".join(models) if models else None

    @property
    def available_models(self) -> List[str]:
        return parse_model_list(self.kagi_model_list)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = KagiSettings()

# 类型别名，让外部代码可以使用 Settings 类型
Settings = KagiSettings
