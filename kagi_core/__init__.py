"""Kagi Core 顶层包。

该包通过 Kagi 的会话 token 提供三个工具：搜索、摘要与 Assistant 对话，
包括配置加载、领域模型、Provider 适配、流式响应解析、回复格式转换
以及供宿主注册的工具定义与执行器。
"""

from kagi_core.api.service import converse, search_fetch, summarize

__all__ = ["converse", "search_fetch", "summarize"]
