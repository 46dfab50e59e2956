"""
Core module - data models and shared utilities.
"""

from userapi.core.models import User, UserCreate, UserUpdate
from userapi.core.utils import generate_id, utc_now

__all__ = [
    "User",
    "UserCreate",
    "UserUpdate",
    "generate_id",
    "utc_now",
]
