#!/usr/bin/env python3
"""
JSON API Routes - machine, container and version information
"""

import logging
import time

from fastapi import APIRouter, HTTPException

from ..manager import ContainerManager, ContainerNotFound

logger = logging.getLogger("contmon.server")

API_RESOURCE = "/api/"


def create_api_routes(manager: ContainerManager) -> APIRouter:
    """Create read-only API routes bound to manager."""
    router = APIRouter(prefix="/api")

    @router.get("/v1.0/machine")
    def machine_info():
        """Static machine information (cores, memory, hostname)."""
        return manager.machine_info()

    @router.get("/v1.0/containers/{name:path}")
    def container_info(name: str):
        """Info and latest stats for a container; empty name is the root container."""
        container = "/" + name.strip("/")
        try:
            return manager.container_info(container).to_dict()
        except ContainerNotFound:
            raise HTTPException(status_code=404, detail=f"unknown container {container!r}")

    @router.get("/v2.0/version")
    def version():
        return manager.version_info()

    @router.get("/v2.0/summary")
    def summary():
        """One-line-per-container usage summary."""
        items = {}
        for name in manager.container_names():
            try:
                stats = manager.container_info(name).stats
            except ContainerNotFound:
                # Container went away between listing and lookup
                continue
            items[name] = {
                "timestamp": stats.timestamp,
                "cpu_usage_seconds": stats.cpu_usage_seconds,
                "memory_usage_bytes": stats.memory_usage_bytes,
                "fs_usage_bytes": stats.fs_usage_bytes,
            }
        return {"timestamp": int(time.time()), "containers": items}

    return router


def register_handlers(mux, manager: ContainerManager) -> None:
    """Register the API group on mux."""
    if manager is None:
        raise ValueError("API handlers require a container manager")
    mux.include_router(create_api_routes(manager))
    logger.debug(f"Registered API handlers under {API_RESOURCE}")
