"""
contmon Prometheus metrics export
"""

from .collector import ContainerCollector
from .exporter import MetricsExporter, get_exporter

__all__ = ["ContainerCollector", "MetricsExporter", "get_exporter"]
