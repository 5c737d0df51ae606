"""工具数据结构定义。

这些 dataclass 描述了"工具调用"的 schema，既用于：
- 将三个 Kagi 工具暴露给宿主（ToolDef / ToolParam），由宿主适配层注册；
- 在 ToolExecutor 中分发和执行宿主转发过来的调用（ToolCall / ToolResult）。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ToolParam:
    """单个工具参数的定义。"""

    name: str
    description: str
    required: bool
    schema: Dict[str, Any]


@dataclass
class ToolDef:
    """一个可供宿主调用的工具定义。"""

    name: str
    description: str
    params: Dict[str, ToolParam]
    title: Optional[str] = None

    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema 形式的参数描述。"""

        properties: Dict[str, Any] = {}
        required: List[str] = []
        for name, param in self.params.items():
            properties[name] = {**(param.schema or {"type": "string"}), "description": param.description}
            if param.required:
                required.append(name)
        return {"type": "object", "properties": properties, "required": required}


@dataclass
class ToolCall:
    """宿主发起的一次工具调用请求。"""

    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolResult:
    """工具执行结果的封装（文本形式）。"""

    call_id: str
    content: str
    is_error: bool = False


SEARCH_TOOL = "kagi_search_fetch"
SUMMARIZER_TOOL = "kagi_summarizer"
ASSISTANT_TOOL = "kagi_assistant"


def kagi_tool_defs(available_models: Optional[List[str]] = None, default_model: Optional[str] = None) -> List[ToolDef]:
    """三个 Kagi 工具的定义；模型列表只用于描述与 enum。"""

    models = list(available_models or [])
    model_schema: Dict[str, Any] = {"type": "string"}
    if models:
        model_schema["enum"] = models
        model_schema["default"] = default_model if default_model in models else models[0]

    return [
        ToolDef(
            name=SEARCH_TOOL,
            title="Kagi Search",
            description=(
                "Fetch web results based on one or more queries using the Kagi.com web search engine. "
                "Use for general search and when the user explicitly tells you to 'fetch' results/information. "
                "Results are from all queries given. They are numbered continuously, so that a user may be "
                "able to refer to a result by a specific number."
            ),
            params={
                "queries": ToolParam(
                    name="queries",
                    description=(
                        "One or more concise, keyword-focused search queries. Include essential context "
                        "within each query for standalone use."
                    ),
                    required=True,
                    schema={"type": "array", "items": {"type": "string"}, "minItems": 1},
                ),
            },
        ),
        ToolDef(
            name=SUMMARIZER_TOOL,
            title="Kagi Summarizer",
            description=(
                "Summarize content from a URL using the Kagi.com Summarizer API. The Summarizer can "
                "summarize any document type (text webpage, video, audio, etc.)"
            ),
            params={
                "url": ToolParam(
                    name="url",
                    description="A URL to a document to summarize.",
                    required=True,
                    schema={"type": "string", "format": "uri"},
                ),
                "summary_type": ToolParam(
                    name="summary_type",
                    description=(
                        "Type of summary to produce. Options are 'summary' for paragraph prose and "
                        "'takeaway' for a bulleted list of key points."
                    ),
                    required=False,
                    schema={"type": "string", "enum": ["summary", "takeaway"], "default": "summary"},
                ),
                "target_language": ToolParam(
                    name="target_language",
                    description=(
                        "Desired output language using language codes (e.g., 'EN' for English). If not "
                        "specified, the document's original language influences the output."
                    ),
                    required=False,
                    schema={"type": "string"},
                ),
            },
        ),
        ToolDef(
            name=ASSISTANT_TOOL,
            title="Kagi Assistant",
            description=(
                "Interact with Kagi AI Assistant for conversations and questions. Supports multiple AI "
                "models and can maintain conversation context across multiple exchanges. Provides access "
                "to current information through internet connectivity."
            ),
            params={
                "prompt": ToolParam(
                    name="prompt",
                    description="The message to send to the Kagi AI assistant.",
                    required=True,
                    schema={"type": "string"},
                ),
                "new_conversation": ToolParam(
                    name="new_conversation",
                    description=(
                        "Whether to start a new conversation. If false, continues the existing "
                        "conversation thread."
                    ),
                    required=False,
                    schema={"type": "boolean", "default": True},
                ),
                "model": ToolParam(
                    name="model",
                    description=(
                        "AI model to use for the conversation. Available models: " + ", ".join(models)
                        if models
                        else "AI model to use for the conversation."
                    ),
                    required=False,
                    schema=model_schema,
                ),
                "internet_access": ToolParam(
                    name="internet_access",
                    description="Whether to allow the AI assistant to access the internet for current information.",
                    required=False,
                    schema={"type": "boolean", "default": True},
                ),
                "format": ToolParam(
                    name="format",
                    description=(
                        "Output format: 'html' preserves original formatting, 'markdown' converts to "
                        "Markdown, 'plain' strips all formatting."
                    ),
                    required=False,
                    schema={"type": "string", "enum": ["html", "markdown", "plain"], "default": "markdown"},
                ),
            },
        ),
    ]
