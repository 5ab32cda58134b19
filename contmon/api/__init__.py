"""
contmon JSON API endpoint group
"""

from .routes import API_RESOURCE, create_api_routes, register_handlers

__all__ = ["API_RESOURCE", "create_api_routes", "register_handlers"]
