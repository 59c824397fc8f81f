"""
SubVault API package.

Provides the FastAPI application for wallet sign-in, vaults and payments.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
