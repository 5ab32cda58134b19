"""
contmon dashboard pages and their static assets
"""

from .routes import CONTAINERS_PAGE, create_page_routes, register_handlers

__all__ = ["CONTAINERS_PAGE", "create_page_routes", "register_handlers"]
