"""Auth package: bearer-token dependency and signup/login routes."""

from portfolai.auth.dependencies import get_current_user

__all__ = [
    "get_current_user",
]
