"""领域层模型与协议。

包含：
- models: ExchangeRequest / OutboundPayload / MessageDocument 等统一模型。
- conversation: 内存中的 ConversationSession（thread_id 状态机）。
- exceptions: 业务异常类型定义。
"""
