"""Kagi Provider 集成层。

该包下的模块负责：
- 维护端点、凭证与模型配置，解析默认模型 (registry)。
- 解析 assistant 的流式响应 (stream_parser)。
- 提供各端点的具体实现 (kagi_assistant、kagi_search、kagi_summarizer)。
"""

from typing import Optional

from kagi_core.config.auth import resolve_token
from kagi_core.config.settings import settings
from kagi_core.domain.exceptions import ConfigurationError
from kagi_core.providers.kagi_assistant import KagiAssistantClient
from kagi_core.providers.kagi_search import KagiSearchClient
from kagi_core.providers.kagi_summarizer import KagiSummarizerClient
from kagi_core.providers.registry import AssistantConfig, KagiEndpoints, MISSING_MODEL_LIST_MESSAGE


def load_assistant_config(cfg=None) -> AssistantConfig:
    """从 settings 解析 assistant 所需配置，缺失项抛出 ConfigurationError。"""

    cfg = cfg or settings
    token = resolve_token(getattr(cfg, "kagi_session_token", None))
    cookie = getattr(cfg, "kagi_search_cookie", None)
    if not cookie:
        raise ConfigurationError(
            code="MISSING_SEARCH_COOKIE",
            message="KAGI_SEARCH_COOKIE environment variable not set. Please set it to your _kagi_search_ cookie value.",
        )
    models = list(getattr(cfg, "available_models", []) or [])
    if not models:
        raise ConfigurationError(code="MISSING_MODEL_LIST", message=MISSING_MODEL_LIST_MESSAGE)
    return AssistantConfig(
        session_token=token,
        search_cookie=cookie,
        available_models=models,
        default_model=getattr(cfg, "kagi_default_model", None),
        http_timeout=getattr(cfg, "http_timeout", 30.0),
        endpoints=KagiEndpoints(base_url=getattr(cfg, "kagi_base_url", None) or "https://kagi.com"),
    )


def create_search_client(cfg=None) -> KagiSearchClient:
    cfg = cfg or settings
    return KagiSearchClient(
        token=resolve_token(getattr(cfg, "kagi_session_token", None)),
        timeout=getattr(cfg, "search_timeout", 10.0),
        endpoints=KagiEndpoints(base_url=getattr(cfg, "kagi_base_url", None) or "https://kagi.com"),
    )


def create_summarizer_client(cfg=None) -> KagiSummarizerClient:
    cfg = cfg or settings
    return KagiSummarizerClient(
        token=resolve_token(getattr(cfg, "kagi_session_token", None)),
        timeout=getattr(cfg, "http_timeout", 30.0),
        engine=getattr(cfg, "kagi_summarizer_engine", "default") or "default",
        endpoints=KagiEndpoints(base_url=getattr(cfg, "kagi_base_url", None) or "https://kagi.com"),
    )


def create_assistant_client(config: Optional[AssistantConfig] = None) -> KagiAssistantClient:
    return KagiAssistantClient(config or load_assistant_config())
