#!/usr/bin/env python3
"""
Path-pattern router over a FastAPI application

Patterns:
- "/healthz"   exact path
- "/static/"   subtree: the path itself and everything below it
- "/"          exact root only

Registering a pattern that is already present replaces the earlier handler in
place (last registration wins).
"""

import logging
from typing import Callable, List, Optional

from fastapi import APIRouter, FastAPI
from starlette.routing import BaseRoute, Route

logger = logging.getLogger("contmon.server")

SUBPATH_PARAM = "subpath"


class Mux:
    def __init__(self, app: FastAPI) -> None:
        self.app = app

    @staticmethod
    def route_path(pattern: str) -> str:
        """Translate a mux pattern into a Starlette route path."""
        if pattern != "/" and pattern.endswith("/"):
            return pattern + "{" + SUBPATH_PARAM + ":path}"
        return pattern

    def handle(self, pattern: str, endpoint: Callable, methods: Optional[List[str]] = None) -> None:
        """Register a plain request -> response endpoint for pattern."""
        if not pattern or not pattern.startswith("/"):
            raise ValueError(f"invalid pattern {pattern!r}: must start with '/'")
        self._put(Route(self.route_path(pattern), endpoint, methods=methods, name=pattern))

    def include_router(self, router: APIRouter) -> None:
        """Register every route of an APIRouter with the same replace semantics."""
        for route in router.routes:
            self._put(route)

    def _put(self, route: BaseRoute) -> None:
        routes = self.app.router.routes
        for i, existing in enumerate(routes):
            if getattr(existing, "path", None) == route.path:
                logger.debug(f"Replacing handler for {route.path}")
                routes[i] = route
                return
        routes.append(route)

    def paths(self) -> List[str]:
        return [r.path for r in self.app.router.routes if hasattr(r, "path")]

    def endpoint_for(self, pattern: str) -> Optional[Callable]:
        path = self.route_path(pattern)
        for route in self.app.router.routes:
            if getattr(route, "path", None) == path:
                return route.endpoint
        return None
