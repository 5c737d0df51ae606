"""Assistant 会话状态。

ConversationSession 只保存当前 Provider 线程的 thread_id，驻留内存、不做持久化。

两个逻辑状态：
- NEW: 未持有 thread_id，下一次请求作为新线程发送。
- CONTINUED: 持有 thread_id，下一次请求在该线程上续聊。

reset() 任意状态 -> NEW；advance(id) 任意状态 -> CONTINUED。
会话对象由调用方显式传入每次 exchange；exclusive() 用于把
"构建请求 -> 发送 -> 解析 -> 更新" 串行化，避免并发调用互相覆盖 thread_id。
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Literal, Optional

SessionState = Literal["new", "continued"]


class ConversationSession:
    def __init__(self, thread_id: Optional[str] = None):
        self._thread_id = thread_id
        self._lock = threading.RLock()

    @property
    def thread_id(self) -> Optional[str]:
        return self._thread_id

    @property
    def state(self) -> SessionState:
        return "continued" if self._thread_id else "new"

    @property
    def is_continued(self) -> bool:
        return self.state == "continued"

    def reset(self) -> None:
        """清空 thread_id，回到 NEW 状态。"""

        with self._lock:
            self._thread_id = None

    def advance(self, thread_id: str) -> None:
        """记录 Provider 返回的 thread_id，进入 CONTINUED 状态。"""

        with self._lock:
            self._thread_id = thread_id

    @contextmanager
    def exclusive(self) -> Iterator["ConversationSession"]:
        """在一次完整对话期间独占会话。"""

        with self._lock:
            yield self

    def __repr__(self) -> str:
        return f"ConversationSession(state={self.state!r}, thread_id={self._thread_id!r})"
