"""Search report and error text, matching the official Kagi MCP output."""

from typing import List, Sequence

from kagi_core.domain.exceptions import BusinessError
from kagi_core.domain.models import SearchResponse


def _format_result(number: int, title: str, url: str, published: str, snippet: str) -> str:
    return f"{number}: {title}\n{url}\nPublished Date: {published}\n{snippet}"


def format_search_results(responses: Sequence[SearchResponse]) -> str:
    """Render every query's results, numbered continuously across queries."""

    blocks: List[str] = []
    start = 1
    for response in responses:
        lines = [
            _format_result(
                start + i,
                r.title or "No Title",
                r.url or "",
                r.published or "Not Available",
                r.snippet or "No snippet available",
            )
            for i, r in enumerate(response.results)
        ]
        start += len(response.results)
        body = "\n\n".join(lines)
        blocks.append(f'-----\nResults for search query "{response.query}":\n-----\n{body}')
    return "\n\n".join(blocks)


def format_search_report(responses: Sequence[SearchResponse]) -> str:
    """Search results followed by the per-query failures, if any."""

    report = format_search_results(responses)
    errors = [f'Query "{r.query}": {r.error}' for r in responses if r.error]
    if errors:
        report += "\n\nErrors encountered:\n" + "\n".join(errors)
    return report


def format_error(error: object) -> str:
    if isinstance(error, BusinessError):
        return f"Error: {error.message}"
    if isinstance(error, BaseException):
        return f"Error: {str(error) or type(error).__name__}"
    return f"Error: {error or 'Unknown error occurred'}"
