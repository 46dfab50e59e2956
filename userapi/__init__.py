"""
User API - CRUD over users with bearer-token authentication.
"""

__version__ = "0.1.0"
