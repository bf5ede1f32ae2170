"""Application services.

- user_store: the ``users`` table behind lookup-by-email and create
- auth_flow: the Google login state machine built on the stores
"""

from app.services.auth_flow import AuthFlow, CallbackResult, LoginStart
from app.services.user_store import UserStore

__all__ = [
    "AuthFlow",
    "CallbackResult",
    "LoginStart",
    "UserStore",
]
