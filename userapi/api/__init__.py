"""
HTTP API.
"""

from userapi.api.app import create_app

__all__ = ["create_app"]
