from typing import Any, Callable, Dict, Optional

from kagi_core.formatting.results import format_error
from .definitions import ASSISTANT_TOOL, SEARCH_TOOL, SUMMARIZER_TOOL, ToolCall, ToolResult


ToolFunc = Callable[[Dict[str, Any]], str]


class ToolExecutor:
    """按名称分发工具调用；工具函数自行把异常转成 "Error: ..." 文本。"""

    def __init__(self, tools: Dict[str, ToolFunc]):
        self._tools = tools

    def execute(self, call: ToolCall) -> ToolResult:
        func = self._tools.get(call.name)
        if not func:
            return ToolResult(call_id=call.id, content=f"Error: Tool not registered: {call.name}", is_error=True)
        try:
            content = func(call.arguments or {})
        except Exception as exc:
            return ToolResult(call_id=call.id, content=format_error(exc), is_error=True)
        return ToolResult(call_id=call.id, content=content, is_error=content.startswith("Error: "))


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() in {"1", "true", "yes"}


def default_tools(service: Optional[Any] = None) -> Dict[str, ToolFunc]:
    """把三个工具名绑定到 api.service 中对应的函数。"""

    if service is None:
        from kagi_core.api import service as service_module

        service = service_module

    def _search(args: Dict[str, Any]) -> str:
        queries = args.get("queries")
        if isinstance(queries, str):
            queries = [queries]
        return service.search_fetch(queries or [])

    def _summarize(args: Dict[str, Any]) -> str:
        return service.summarize(
            url=str(args.get("url") or ""),
            summary_type=str(args.get("summary_type") or "summary"),
            target_language=args.get("target_language") or None,
        )

    def _assistant(args: Dict[str, Any]) -> str:
        return service.converse(
            prompt=str(args.get("prompt") or ""),
            new_conversation=_as_bool(args.get("new_conversation"), True),
            model=args.get("model") or None,
            internet_access=_as_bool(args.get("internet_access"), True),
            format=str(args.get("format") or "markdown"),
        )

    return {
        SEARCH_TOOL: _search,
        SUMMARIZER_TOOL: _summarize,
        ASSISTANT_TOOL: _assistant,
    }
