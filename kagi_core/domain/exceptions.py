"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在工具层 / service 层做统一捕获，并转换为 "Error: ..." 文本返回给调用方。
"""

from typing import Literal


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "PARSE_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 status、model 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ConfigurationError(BusinessError):
    """凭证、Cookie 或模型列表等必需配置缺失。"""


class ValidationError(BusinessError):
    """参数校验失败：空 prompt、模型不在允许列表中等。"""


TransportKind = Literal["unauthorized", "http_status", "network_failure"]


class TransportError(BusinessError):
    """HTTP 层失败，不做重试，由上层直接展示。

    kind:
        - "unauthorized": 401/403，session token 无效或过期。
        - "http_status": 其他非 2xx 状态码。
        - "network_failure": 连接失败、超时等。
    """

    def __init__(self, kind: TransportKind, message: str, http_status: int = 502, **extra):
        self.kind = kind
        super().__init__(code=kind.upper(), message=message, http_status=http_status, **extra)


class ParseError(BusinessError):
    """流式响应中找不到必需的 JSON 文档，或文档无法解析。"""


class ResponseStateError(BusinessError):
    """消息文档格式正确，但 state 不是 "done" 或缺少 reply。"""
