"""Aggregate application use cases."""

from .notifications import notify
from .users import authenticate_user, create_user

__all__ = [
    "authenticate_user",
    "create_user",
    "notify",
]
