"""
confsync API Module

FastAPI front-end serving cached configuration and health status.
"""

from confsync.api.app import create_app

__all__ = [
    "create_app",
]
