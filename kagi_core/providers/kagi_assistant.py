"""Kagi Assistant Provider 适配器。

本模块负责：

1. 根据 prompt、模型、联网开关和当前会话的 thread_id 构造请求体（build_payload）。
2. 以浏览器会话的方式调用 /assistant/prompt（session token + _kagi_search_ cookie）。
3. 把 HTTP 层失败统一包装为 TransportError，不做重试。

响应体是流式文本，解析交给 stream_parser。
"""

from typing import Dict, Optional
from uuid import uuid4

import httpx

from kagi_core.domain.exceptions import TransportError
from kagi_core.domain.models import (
    BRANCH_SENTINEL,
    FocusBlock,
    OutboundPayload,
    ProfileBlock,
    ThreadsDescriptor,
)
from kagi_core.providers.registry import AssistantConfig


USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/140.0.0.0 Safari/537.36"
)


def build_payload(
    prompt: str,
    model: str,
    internet_access: bool,
    thread_id: Optional[str],
) -> OutboundPayload:
    """构造 OutboundPayload，无 I/O。

    thread_id 存在时为续聊：带上 thread_id 并为本轮生成新的 message_id；
    否则两者都留空，由 Provider 新建线程。
    """

    message_id = str(uuid4()) if thread_id else None
    return OutboundPayload(
        focus=FocusBlock(
            thread_id=thread_id or None,
            branch_id=BRANCH_SENTINEL,
            prompt=prompt,
            message_id=message_id,
        ),
        profile=ProfileBlock(model=model, internet_access=internet_access),
        threads=[ThreadsDescriptor()],
    )


class KagiAssistantClient:
    """Kagi Assistant 客户端实现。

    - name: Provider 名称（供日志/调试使用）。
    - send: 发送一次请求，返回原始流式文本。
    """

    name = "kagi-assistant"

    def __init__(self, config: AssistantConfig):
        self._config = config

    def _headers(self) -> Dict[str, str]:
        endpoints = self._config.endpoints
        return {
            "accept": "application/vnd.kagi.stream",
            "accept-language": "en-US,en;q=0.9",
            "content-type": "application/json",
            "origin": endpoints.base_url,
            "referer": endpoints.assistant_referer,
            "priority": "u=1, i",
            "sec-fetch-dest": "empty",
            "sec-fetch-mode": "cors",
            "sec-fetch-site": "same-origin",
            "user-agent": USER_AGENT,
            "cookie": f"kagi_session={self._config.session_token}; _kagi_search_={self._config.search_cookie}",
        }

    def send(self, payload: OutboundPayload) -> str:
        """POST 请求体并返回原始响应文本。

        - 401/403 -> TransportError(kind="unauthorized")
        - 其他非 2xx -> TransportError(kind="http_status")
        - 连接失败 / 超时 -> TransportError(kind="network_failure")
        """

        try:
            with httpx.Client(timeout=self._config.http_timeout, trust_env=False) as client:
                resp = client.post(
                    self._config.endpoints.assistant_prompt,
                    json=payload.to_wire(),
                    headers=self._headers(),
                )
        except httpx.RequestError as e:
            raise TransportError("network_failure", f"Network error: {e}")
        if resp.status_code in (401, 403):
            raise TransportError("unauthorized", "Invalid or expired session token", http_status=resp.status_code)
        if not 200 <= resp.status_code < 300:
            reason = getattr(resp, "reason_phrase", "") or ""
            message = f"HTTP {resp.status_code}: {reason}" if reason else f"HTTP {resp.status_code}"
            raise TransportError("http_status", message, http_status=resp.status_code)
        return resp.text
