"""
API module - routes and schemas.
Routes are split by domain: tasks, tree, decompose, settings.
"""

from .routes import register_routes

__all__ = ["register_routes"]
