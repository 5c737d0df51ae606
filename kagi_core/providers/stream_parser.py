"""Kagi assistant 流式响应解析。

/assistant/prompt 返回的是 application/vnd.kagi.stream：一段非结构化文本，
其中以 "thread.json:"、"new_message.json:" 等标记引出内嵌的 JSON 文档。
同一标记可能因增量帧重复出现，只有最后一次出现之后的内容是完整的。

这里不实现完整的流协议，只做"定位标记 + 花括号配平"提取。
"""

import json
from typing import Optional

from kagi_core.domain.exceptions import ParseError, ResponseStateError
from kagi_core.domain.models import MessageDocument, ThreadDocument
from kagi_core.infrastructure.logging.logger import logger


THREAD_MARKER = "thread.json:"
MESSAGE_MARKER = "new_message.json:"


def extract_json(text: str, marker: str) -> Optional[str]:
    """提取 marker 最后一次出现之后的第一个完整 JSON 对象文本。

    字符串字面量中的花括号（无论是否转义）不计入深度；
    找不到标记、找不到 "{" 或对象被截断时返回 None。
    """

    pos = text.rfind(marker)
    if pos == -1:
        return None

    tail = text[pos + len(marker):].strip()
    start = tail.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape = False
    chars = []
    for ch in tail[start:]:
        chars.append(ch)
        if not in_string:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return "".join(chars)
            elif ch == '"':
                in_string = True
        elif ch == "\\" and not escape:
            escape = True
            continue
        elif ch == '"' and not escape:
            in_string = False
        escape = False
    return None


def parse_thread_document(text: str) -> Optional[ThreadDocument]:
    """尽力解析 thread.json；失败只记日志，不影响回复。"""

    raw = extract_json(text, THREAD_MARKER)
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("thread_document.invalid", extra={"extra": {"error": str(exc)}})
        return None
    if not isinstance(data, dict):
        logger.warning("thread_document.not_object", extra={"extra": {"type": type(data).__name__}})
        return None
    thread_id = data.get("id")
    return ThreadDocument(id=thread_id if isinstance(thread_id, str) and thread_id else None, raw=data)


def parse_message_document(text: str) -> MessageDocument:
    """解析 new_message.json，缺失或非法即为致命错误。"""

    raw = extract_json(text, MESSAGE_MARKER)
    if raw is None:
        raise ParseError(code="PARSE_ERROR", message="Failed to parse assistant response", http_status=502)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise ParseError(code="PARSE_ERROR", message="Failed to parse message JSON response", http_status=502)
    if not isinstance(data, dict):
        raise ParseError(code="PARSE_ERROR", message="Failed to parse message JSON response", http_status=502)
    return MessageDocument(state=data.get("state"), reply=data.get("reply"), raw=data)


def require_done(message: MessageDocument) -> str:
    """返回已完成消息的 reply，否则抛出 ResponseStateError。"""

    if not message.is_done or not isinstance(message.reply, str):
        raise ResponseStateError(
            code="RESPONSE_STATE_ERROR",
            message="Assistant response not in expected format",
            http_status=502,
            state=message.state,
        )
    return message.reply
