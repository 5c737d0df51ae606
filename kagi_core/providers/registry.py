"""Provider 端点与模型配置。

本模块集中维护：

- KagiEndpoints：各工具使用的 Kagi Web 端点（assistant / search / summarizer）。
- AssistantConfig：assistant 所需的凭证与模型列表，启动时由 settings 解析一次。
- resolve_model：校验请求的模型是否在允许列表中，或计算默认模型。

上层只传入普通值，不直接读取环境变量，便于测试与替换。"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from kagi_core.domain.exceptions import ConfigurationError, ValidationError


@dataclass
class KagiEndpoints:
    """Kagi Web 端点配置。"""

    base_url: str = "https://kagi.com"

    @property
    def assistant_prompt(self) -> str:
        return f"{self.base_url}/assistant/prompt"

    @property
    def assistant_referer(self) -> str:
        return f"{self.base_url}/assistant"

    @property
    def html_search(self) -> str:
        return f"{self.base_url}/html/search"

    @property
    def summary_labs(self) -> str:
        return f"{self.base_url}/mother/summary_labs"


@dataclass
class AssistantConfig:
    """assistant 调用所需的全部配置值。"""

    session_token: str
    search_cookie: str
    available_models: List[str]
    default_model: Optional[str] = None
    http_timeout: float = 30.0
    endpoints: KagiEndpoints = field(default_factory=KagiEndpoints)


MISSING_MODEL_LIST_MESSAGE = (
    "KAGI_MODEL_LIST environment variable not set. Please provide a comma-separated list of "
    "available models (e.g., 'o3-pro,claude-4-sonnet,gemini-2-5-pro')"
)


def resolve_model(
    requested: Optional[str],
    available: Optional[Sequence[str]],
    default: Optional[str] = None,
) -> str:
    """返回本次对话使用的模型名。

    - 允许列表为空或未配置：ConfigurationError。
    - 未请求时优先使用配置的默认模型，否则取允许列表第一项。
    - 最终选中的模型（包括配置的默认模型）必须在允许列表中，否则 ValidationError（错误信息列出可选模型）。
    """

    models = list(available or [])
    if not models:
        raise ConfigurationError(code="MISSING_MODEL_LIST", message=MISSING_MODEL_LIST_MESSAGE)
    model = requested or default or models[0]
    if model not in models:
        raise ValidationError(
            code="INVALID_MODEL",
            message=f'Invalid model "{model}". Available models: {", ".join(models)}',
            model=model,
            available=models,
        )
    return model
