from contextvars import ContextVar, Token
from typing import Optional

_current_request_id: ContextVar[Optional[str]] = ContextVar(
    "current_request_id", default=None
)


def get_current_request_id() -> Optional[str]:
    return _current_request_id.get()


def set_current_request_id(request_id: Optional[str]) -> Token:
    return _current_request_id.set(request_id)


def reset_current_request_id(token: Token) -> None:
    _current_request_id.reset(token)
