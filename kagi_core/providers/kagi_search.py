"""Kagi Search Provider 适配器。

使用会话 token 请求 Kagi 的 HTML 搜索页，并用 BeautifulSoup 解析结果：
- URL: {base_url}/html/search?q=<query>
- 认证: Cookie kagi_session=<token>

多条查询并发执行，每条都有硬超时；单条失败不影响其他查询，
失败信息保存在 SearchResponse.error 中，由上层汇总为部分结果。
"""

import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import List, Optional, Sequence

import httpx
from bs4 import BeautifulSoup

from kagi_core.domain.exceptions import TransportError, ValidationError
from kagi_core.domain.models import SearchResponse, SearchResult
from kagi_core.infrastructure.logging.logger import logger
from kagi_core.providers.registry import KagiEndpoints


def validate_queries(queries: Sequence[str]) -> List[str]:
    """校验并去除首尾空白，返回清洗后的查询列表。"""

    if not queries:
        raise ValidationError(code="EMPTY_QUERIES", message="Search called with no queries.")
    cleaned: List[str] = []
    for q in queries:
        if not isinstance(q, str) or not q.strip():
            raise ValidationError(code="INVALID_QUERY", message="All queries must be non-empty strings")
        cleaned.append(q.strip())
    return cleaned


class KagiSearchClient:
    """Kagi 搜索客户端实现。"""

    name = "kagi-search"

    def __init__(self, token: str, timeout: float = 10.0, endpoints: Optional[KagiEndpoints] = None):
        self._token = token
        self._timeout = timeout
        self._endpoints = endpoints or KagiEndpoints()

    # ---- 单条查询 ----

    def search(self, query: str) -> List[SearchResult]:
        try:
            with httpx.Client(timeout=self._timeout, trust_env=False, follow_redirects=True) as client:
                resp = client.get(
                    self._endpoints.html_search,
                    params={"q": query},
                    headers={
                        "accept": "text/html",
                        "cookie": f"kagi_session={self._token}",
                    },
                )
        except httpx.TimeoutException:
            raise TransportError("network_failure", "Search timeout")
        except httpx.RequestError as e:
            raise TransportError("network_failure", f"Network error: {e}")
        if resp.status_code in (401, 403):
            raise TransportError("unauthorized", "Invalid or expired session token", http_status=resp.status_code)
        if resp.status_code >= 400:
            raise TransportError("http_status", f"HTTP {resp.status_code}", http_status=resp.status_code)
        return parse_search_html(resp.text)

    # ---- 多条并发 ----

    def search_many(self, queries: Sequence[str]) -> List[SearchResponse]:
        """并发执行所有查询，返回与 queries 下标对齐的结果。"""

        cleaned = validate_queries(queries)

        # 每条查询一个线程，所有查询同时开始计时
        pool = ThreadPoolExecutor(max_workers=len(cleaned))
        try:
            futures = [pool.submit(self.search, q) for q in cleaned]
            deadline = time.monotonic() + self._timeout
            responses: List[SearchResponse] = []
            for original, future in zip(queries, futures):
                remaining = max(0.0, deadline - time.monotonic())
                try:
                    results = future.result(timeout=remaining)
                    responses.append(SearchResponse(query=original, results=results))
                except FutureTimeoutError:
                    future.cancel()
                    responses.append(SearchResponse(query=original, error="Search timeout"))
                except Exception as exc:
                    message = getattr(exc, "message", None) or str(exc)
                    responses.append(SearchResponse(query=original, error=message))
            for r in responses:
                if r.error:
                    logger.warning("search.query_failed", extra={"extra": {"query": r.query, "error": r.error}})
            return responses
        finally:
            pool.shutdown(wait=False, cancel_futures=True)


def _text(node) -> str:
    return node.get_text(" ", strip=True) if node is not None else ""


def parse_search_html(html: str) -> List[SearchResult]:
    """从 Kagi 搜索结果页中提取结果列表。"""

    soup = BeautifulSoup(html, "html.parser")
    results: List[SearchResult] = []
    for item in soup.select(".search-result, .__srgi"):
        link = item.select_one(".__sri_title_link, .__srgi-title a")
        if link is None or not link.get("href"):
            continue
        published = _text(item.select_one(".__sri-time")) or None
        results.append(
            SearchResult(
                title=_text(link),
                url=link["href"],
                snippet=_text(item.select_one(".__sri-desc")),
                published=published,
            )
        )
    return results
