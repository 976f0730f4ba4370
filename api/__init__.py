"""API Package.

FastAPI proxy gateway between the dashboard app and SAP.
"""

from api.server import create_app, app

__all__ = [
    "create_app",
    "app",
]
