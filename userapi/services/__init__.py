"""
Services - business logic between the API and storage.
"""

from userapi.services.users import UserService

__all__ = ["UserService"]
