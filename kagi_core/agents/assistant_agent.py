"""Assistant 对话引擎。

一次 exchange 的顺序链：
校验/解析模型 -> （新会话时）重置会话 -> 构造请求体 -> 发送 -> 解析 thread/message 文档 -> 格式化回复。

唯一的阻塞点是 Provider 的网络等待；会话在整个链路期间被独占，
同一个 ConversationSession 上的并发调用会被串行化。
"""

import logging
import time
from typing import Any, Dict, Protocol
from uuid import uuid4

from kagi_core.domain.conversation import ConversationSession
from kagi_core.domain.exceptions import ValidationError
from kagi_core.domain.models import ExchangeRequest, ExchangeResult, OutboundPayload
from kagi_core.formatting.reply import format_reply
from kagi_core.infrastructure.logging.logger import logger
from kagi_core.providers.kagi_assistant import build_payload
from kagi_core.providers.registry import AssistantConfig, resolve_model
from kagi_core.providers.stream_parser import parse_message_document, parse_thread_document, require_done


def validate_prompt(prompt: str) -> None:
    if not prompt or not prompt.strip():
        raise ValidationError(code="EMPTY_PROMPT", message="Assistant called with no prompt.")


class AssistantTransport(Protocol):
    """发送请求体并返回原始流式文本。"""

    name: str

    def send(self, payload: OutboundPayload) -> str:
        ...


class AssistantEngine:
    def __init__(self, transport: AssistantTransport, config: AssistantConfig):
        self._transport = transport
        self._config = config

    def exchange(self, request: ExchangeRequest, session: ConversationSession) -> ExchangeResult:
        """执行一次 assistant 对话。

        Args:
            request: 调用方输入
            session: 本次对话所属的会话，调用结束后可能被推进到新的 thread_id

        Returns:
            ExchangeResult，text 为按 output_format 格式化后的回复

        Raises:
            ValidationError / ConfigurationError / TransportError / ParseError / ResponseStateError
        """
        start_time = time.time()
        log_ctx: Dict[str, Any] = {"trace_id": f"tr-{uuid4().hex}", "provider": self._transport.name}

        validate_prompt(request.prompt)
        model = resolve_model(request.model, self._config.available_models, self._config.default_model)
        log_ctx["model"] = model

        with session.exclusive():
            if request.new_conversation:
                session.reset()
            payload = build_payload(request.prompt, model, request.internet_access, session.thread_id)
            self._log(
                logging.INFO,
                "exchange.start",
                log_ctx,
                continued=session.is_continued,
                internet_access=request.internet_access,
            )

            raw = self._transport.send(payload)

            thread = parse_thread_document(raw)
            if thread is not None and thread.id:
                session.advance(thread.id)
            message = parse_message_document(raw)
            reply = require_done(message)
            thread_id = session.thread_id

        text = format_reply(reply, request.output_format)
        self._log(
            logging.INFO,
            "exchange.end",
            log_ctx,
            thread_id=thread_id,
            reply_chars=len(text),
            elapsed_ms=int((time.time() - start_time) * 1000),
        )
        return ExchangeResult(text=text, model=model, thread_id=thread_id, message=message)

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
