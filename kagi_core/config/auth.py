"""会话 token 解析。

优先级：
1. KAGI_SESSION_TOKEN（环境变量 / .env / config.yaml，经由 settings 读取）
2. ~/.kagi_session_token 文件
"""

from pathlib import Path
from typing import Optional

from kagi_core.domain.exceptions import ConfigurationError


TOKEN_FILE = Path.home() / ".kagi_session_token"

MISSING_TOKEN_MESSAGE = (
    "No valid Kagi session token found. Please either:\n"
    "1. Set KAGI_SESSION_TOKEN environment variable, or\n"
    "2. Save your token to ~/.kagi_session_token file\n\n"
    "Get your token from: https://kagi.com/settings?p=api"
)


def is_valid_token_format(token: Optional[str]) -> bool:
    return isinstance(token, str) and len(token.strip()) > 0


def read_token_from_file(path: Optional[Path] = None) -> Optional[str]:
    """读取 token 文件；文件不存在时返回 None，其他读取错误转为 ConfigurationError。"""

    token_path = path or TOKEN_FILE
    try:
        token = token_path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise ConfigurationError(code="TOKEN_FILE_ERROR", message=f"Failed to read token file: {exc}")
    return token or None


def resolve_token(env_token: Optional[str], token_file: Optional[Path] = None) -> str:
    """环境变量优先，其次读取 token 文件；都没有时抛出 ConfigurationError。"""

    if is_valid_token_format(env_token):
        return env_token.strip()
    file_token = read_token_from_file(token_file)
    if is_valid_token_format(file_token):
        return file_token
    raise ConfigurationError(code="MISSING_SESSION_TOKEN", message=MISSING_TOKEN_MESSAGE)
