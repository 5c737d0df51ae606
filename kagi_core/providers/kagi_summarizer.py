"""Kagi Summarizer Provider 适配器。

- URL: {base_url}/mother/summary_labs?url=...&summary_type=...&target_language=...&stream=1
- 认证: Cookie kagi_session=<token>

响应是以 NUL 字符分隔的若干 JSON 片段，最后一个可解析的片段为最终结果。
结果结构并不稳定，extract_summary_text 按固定顺序尽力提取摘要文本。
"""

import json
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from kagi_core.domain.exceptions import ParseError, TransportError, ValidationError
from kagi_core.domain.models import SummaryRequest
from kagi_core.infrastructure.logging.logger import logger
from kagi_core.providers.registry import KagiEndpoints


SUMMARY_TYPES = ("summary", "takeaway")
DEFAULT_LANGUAGE = "EN"
SUPPORTED_LANGUAGES = (
    "BG", "CS", "DA", "DE", "EL", "EN", "ES", "ET", "FI", "FR", "HU", "ID", "IT", "JA",
    "KO", "LT", "LV", "NB", "NL", "PL", "PT", "RO", "RU", "SK", "SL", "SV", "TR", "UK",
    "ZH", "ZH-HANT",
)


def validate_summary_request(req: SummaryRequest) -> None:
    if not req.url:
        raise ValidationError(code="EMPTY_URL", message="Summarizer called with no URL.")
    parsed = urlparse(req.url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(code="INVALID_URL", message=f"Invalid URL: {req.url}")
    if req.summary_type not in SUMMARY_TYPES:
        raise ValidationError(
            code="INVALID_SUMMARY_TYPE",
            message=f"Invalid summary_type: {req.summary_type}. Must be 'summary' or 'takeaway'.",
        )


class KagiSummarizerClient:
    """Kagi 摘要客户端实现。"""

    name = "kagi-summarizer"

    def __init__(
        self,
        token: str,
        timeout: float = 30.0,
        engine: str = "default",
        endpoints: Optional[KagiEndpoints] = None,
    ):
        self._token = token
        self._timeout = timeout
        self._engine = engine
        self._endpoints = endpoints or KagiEndpoints()

    def summarize(self, req: SummaryRequest) -> str:
        validate_summary_request(req)
        language = req.target_language or DEFAULT_LANGUAGE
        if req.target_language and language.upper() not in SUPPORTED_LANGUAGES:
            logger.warning(
                "summarizer.unsupported_language",
                extra={"extra": {"language": language, "supported": list(SUPPORTED_LANGUAGES)}},
            )
        if self._engine and self._engine != "default":
            logger.info("summarizer.engine_ignored", extra={"extra": {"engine": self._engine}})

        try:
            with httpx.Client(timeout=self._timeout, trust_env=False, follow_redirects=True) as client:
                resp = client.get(
                    self._endpoints.summary_labs,
                    params={
                        "url": req.url,
                        "summary_type": req.summary_type,
                        "target_language": language,
                        "stream": "1",
                    },
                    headers={"cookie": f"kagi_session={self._token}"},
                )
        except httpx.RequestError as e:
            raise TransportError("network_failure", f"Network error: {e}")
        if resp.status_code in (401, 403):
            raise TransportError("unauthorized", "Invalid or expired session token", http_status=resp.status_code)
        if resp.status_code >= 400:
            raise TransportError("http_status", f"HTTP {resp.status_code}", http_status=resp.status_code)
        return extract_summary_text(parse_summary_stream(resp.text))


def parse_summary_stream(text: str) -> Any:
    """返回最后一个可解析的 JSON 片段；全部不可解析时原样返回非空文本。"""

    last: Any = None
    for chunk in text.split("\x00"):
        chunk = chunk.strip()
        if not chunk:
            continue
        try:
            last = json.loads(chunk)
        except json.JSONDecodeError:
            continue
    if last is None:
        if text.strip():
            return text.strip()
        raise ParseError(code="PARSE_ERROR", message="Empty summarizer response", http_status=502)
    return last


def extract_summary_text(result: Any) -> str:
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        if result.get("summary"):
            return result["summary"]
        data = result.get("data")
        if isinstance(data, dict) and data.get("output"):
            return data["output"]
        output_data = result.get("output_data")
        if isinstance(output_data, dict) and output_data.get("markdown"):
            return output_data["markdown"]
        if result.get("output"):
            return result["output"]
    return json.dumps(result, ensure_ascii=False, indent=2)
