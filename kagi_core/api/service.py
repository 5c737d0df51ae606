"""对外 API 服务模块。

提供三个工具的函数接口供宿主适配层调用。
所有错误都在这里转换为 "Error: <message>" 文本，不会抛出到调用方。
"""

from typing import List, Optional

from kagi_core.agents.assistant_agent import AssistantEngine, validate_prompt
from kagi_core.domain.conversation import ConversationSession
from kagi_core.domain.exceptions import BusinessError
from kagi_core.domain.models import ExchangeRequest, SummaryRequest
from kagi_core.formatting.results import format_error, format_search_report
from kagi_core.infrastructure.logging.logger import logger
from kagi_core.providers import (
    create_assistant_client,
    create_search_client,
    create_summarizer_client,
    load_assistant_config,
)
from kagi_core.providers.kagi_search import validate_queries
from kagi_core.providers.kagi_summarizer import validate_summary_request


_session: Optional[ConversationSession] = None


def get_default_session() -> ConversationSession:
    """获取进程级默认会话（单例）。"""
    global _session
    if _session is None:
        _session = ConversationSession()
    return _session


def _failure(tool: str, error: Exception) -> str:
    fields = {"tool": tool, "error": str(error)}
    if isinstance(error, BusinessError):
        fields["code"] = error.code
        logger.warning(f"{tool} failed: {error.message}", extra={"extra": fields})
    else:
        logger.exception(f"{tool} failed unexpectedly", extra={"extra": fields})
    return format_error(error)


def converse(
    prompt: str,
    new_conversation: bool = True,
    model: Optional[str] = None,
    internet_access: bool = True,
    format: str = "markdown",
    session: Optional[ConversationSession] = None,
) -> str:
    """与 Kagi Assistant 对话。

    Args:
        prompt: 用户消息
        new_conversation: 是否开启新会话；False 时在当前线程上续聊
        model: 模型名（可选，默认取 KAGI_DEFAULT_MODEL 或模型列表第一项）
        internet_access: 是否允许联网
        format: 输出格式 html / markdown / plain
        session: 会话（可选，默认使用进程级会话）

    Returns:
        格式化后的回复文本，或 "Error: ..." 文本
    """
    try:
        validate_prompt(prompt)
        config = load_assistant_config()
        engine = AssistantEngine(create_assistant_client(config), config)
        result = engine.exchange(
            ExchangeRequest(
                prompt=prompt,
                new_conversation=new_conversation,
                model=model,
                internet_access=internet_access,
                output_format=format,
            ),
            session or get_default_session(),
        )
        return result.text
    except Exception as e:
        return _failure("kagi_assistant", e)


def search_fetch(queries: List[str]) -> str:
    """执行一条或多条搜索，失败的查询以部分结果的形式附在报告末尾。"""
    try:
        validate_queries(queries)
        client = create_search_client()
        return format_search_report(client.search_many(queries))
    except Exception as e:
        return _failure("kagi_search_fetch", e)


def summarize(url: str, summary_type: str = "summary", target_language: Optional[str] = None) -> str:
    """摘要给定 URL 的内容。"""
    try:
        req = SummaryRequest(url=url, summary_type=summary_type, target_language=target_language)
        validate_summary_request(req)
        return create_summarizer_client().summarize(req)
    except Exception as e:
        return _failure("kagi_summarizer", e)
