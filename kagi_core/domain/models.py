"""统一的请求与结果数据模型。

本模块定义了三个工具在各 Provider 适配层之间共享的标准数据结构：

- ExchangeRequest: 一次 assistant 对话请求（调用方输入）。
- OutboundPayload: 发给 Kagi assistant 端点的请求体（focus/profile/threads 三段）。
- ThreadDocument / MessageDocument: 从流式响应中解析出的两个 JSON 文档。
- SearchResult / SearchResponse: 搜索结果。
- SummaryRequest: 摘要请求。

所有 Provider 适配器都只依赖这些模型，并负责在各自的 HTTP 报文和这些模型之间做转换。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional


SummaryType = Literal["summary", "takeaway"]

# Provider 的分支功能未使用，始终发送固定的占位 branch_id
BRANCH_SENTINEL = "00000000-0000-4000-0000-000000000000"


@dataclass
class ExchangeRequest:
    """一次 assistant 对话请求。

    - prompt: 用户消息，不能为空。
    - new_conversation: True 时先清空会话，再作为新线程发送。
    - model: 模型名；为 None 时由 registry 解析默认值。
    - internet_access: 是否允许模型联网。
    - output_format: 回复输出格式。
    """

    prompt: str
    new_conversation: bool = True
    model: Optional[str] = None
    internet_access: bool = True
    output_format: str = "markdown"


@dataclass
class FocusBlock:
    thread_id: Optional[str]
    prompt: str
    branch_id: str = BRANCH_SENTINEL
    message_id: Optional[str] = None


@dataclass
class ProfileBlock:
    model: str
    internet_access: bool
    personalizations: bool = True
    lens_id: Optional[str] = None
    id: Optional[str] = None


@dataclass
class ThreadsDescriptor:
    tag_ids: List[str] = field(default_factory=list)
    saved: bool = False
    shared: bool = False


@dataclass
class OutboundPayload:
    """发往 /assistant/prompt 的完整请求体。

    不变式：focus.message_id 存在当且仅当 focus.thread_id 存在（续聊而非新线程）。
    """

    focus: FocusBlock
    profile: ProfileBlock
    threads: List[ThreadsDescriptor] = field(default_factory=lambda: [ThreadsDescriptor()])

    def to_wire(self) -> Dict[str, Any]:
        """转换为 Provider 使用的 JSON 结构。"""

        focus: Dict[str, Any] = {
            "thread_id": self.focus.thread_id,
            "branch_id": self.focus.branch_id,
            "prompt": self.focus.prompt,
        }
        if self.focus.message_id:
            focus["message_id"] = self.focus.message_id
        return {
            "focus": focus,
            "profile": {
                "id": self.profile.id,
                "personalizations": self.profile.personalizations,
                "internet_access": self.profile.internet_access,
                "model": self.profile.model,
                "lens_id": self.profile.lens_id,
            },
            "threads": [
                {"tag_ids": list(t.tag_ids), "saved": t.saved, "shared": t.shared}
                for t in self.threads
            ],
        }


@dataclass
class ThreadDocument:
    """thread.json 文档，只用于刷新会话的 thread_id。"""

    id: Optional[str]
    raw: Optional[dict] = None


@dataclass
class MessageDocument:
    """new_message.json 文档。

    只有 state == "done" 且 reply 非空才算成功。
    """

    state: Optional[str]
    reply: Optional[str]
    raw: Optional[dict] = None

    @property
    def is_done(self) -> bool:
        return self.state == "done" and bool(self.reply)


@dataclass
class ExchangeResult:
    """一次对话的最终结果。"""

    text: str
    model: str
    thread_id: Optional[str]
    message: MessageDocument


@dataclass
class SearchResult:
    title: str
    url: str
    snippet: str
    published: Optional[str] = None


@dataclass
class SearchResponse:
    """单条查询的结果列表，失败的查询保留空列表以保持下标对齐。"""

    query: str
    results: List[SearchResult] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class SummaryRequest:
    url: str
    summary_type: SummaryType = "summary"
    target_language: Optional[str] = None
