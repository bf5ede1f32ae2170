from .user import User
from .http_session import HttpSession

__all__ = [
    "User",
    "HttpSession",
]
