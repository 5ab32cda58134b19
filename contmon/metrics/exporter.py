#!/usr/bin/env python3
"""
Prometheus exporter wiring

Usage:
    exporter = get_exporter()
    exporter.install(manager)
    mux.handle("/metrics", exporter.scrape)

The process-wide exporter is created on first access. install() may be called
again (e.g. when an app is rebuilt in the same process): the previous
collector is unregistered first, so the registry never sees duplicate names.
"""

import logging
import threading
from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest
from starlette.requests import Request
from starlette.responses import Response

from ..manager import ContainerManager
from .collector import ContainerCollector

logger = logging.getLogger("contmon.server")


class MetricsExporter:
    """Owns the container collector registered with one CollectorRegistry."""

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry if registry is not None else REGISTRY
        self.collector: Optional[ContainerCollector] = None
        self._lock = threading.Lock()

    def install(self, manager: ContainerManager) -> ContainerCollector:
        """Bind a fresh collector to manager and register it."""
        collector = ContainerCollector(manager)
        with self._lock:
            if self.collector is not None:
                logger.info("Replacing previously registered container collector")
                self.registry.unregister(self.collector)
                self.collector = None
            self.registry.register(collector)
            self.collector = collector
        return collector

    def scrape(self, request: Request) -> Response:
        """Prometheus text exposition of the registry."""
        return Response(generate_latest(self.registry), media_type=CONTENT_TYPE_LATEST)


_exporter: Optional[MetricsExporter] = None
_exporter_lock = threading.Lock()


def get_exporter() -> MetricsExporter:
    """Get the process-wide exporter bound to the global prometheus registry."""
    global _exporter
    with _exporter_lock:
        if _exporter is None:
            _exporter = MetricsExporter()
        return _exporter
