from kagi_core.formatting.reply import format_reply, html_to_markdown, html_to_plain
from kagi_core.formatting.results import format_error, format_search_report, format_search_results

__all__ = [
    "format_reply",
    "html_to_markdown",
    "html_to_plain",
    "format_error",
    "format_search_report",
    "format_search_results",
]
