#!/usr/bin/env python3
"""
Container Manager - read-only source of machine and container state

Every HTTP endpoint group reads through a ContainerManager. LocalManager
reports the host itself as the root container "/" using psutil.
"""

import logging
import platform
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict, field
from typing import Dict, Any, List

import psutil

from . import __version__

logger = logging.getLogger("contmon.server")

ROOT_CONTAINER = "/"


class ContainerNotFound(KeyError):
    """Raised when a container name is not known to the manager."""


@dataclass
class ContainerStats:
    timestamp: float
    cpu_usage_seconds: float = 0.0
    memory_usage_bytes: int = 0
    memory_working_set_bytes: int = 0
    network_rx_bytes: int = 0
    network_tx_bytes: int = 0
    fs_usage_bytes: int = 0
    fs_limit_bytes: int = 0


@dataclass
class ContainerInfo:
    name: str
    start_time: float
    stats: ContainerStats
    aliases: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ContainerManager(ABC):
    """Interface consumed by the HTTP endpoint groups and the metrics collector."""

    @abstractmethod
    def machine_info(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def version_info(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def container_names(self) -> List[str]:
        ...

    @abstractmethod
    def container_info(self, name: str) -> ContainerInfo:
        """Return info for `name`, raising ContainerNotFound if unknown."""

    def health_check(self) -> None:
        """Raise if the manager cannot serve data."""
        self.container_info(ROOT_CONTAINER)


class LocalManager(ContainerManager):
    """Host-level manager: the machine is exposed as the root container."""

    def __init__(self, fs_path: str = "/") -> None:
        self.fs_path = fs_path
        self.start_time = psutil.boot_time()

    def machine_info(self) -> Dict[str, Any]:
        mem = psutil.virtual_memory()
        return {
            "hostname": platform.node(),
            "num_cores": psutil.cpu_count() or 0,
            "num_physical_cores": psutil.cpu_count(logical=False) or 0,
            "memory_capacity": mem.total,
            "boot_time": int(self.start_time),
        }

    def version_info(self) -> Dict[str, Any]:
        return {
            "contmon_version": __version__,
            "python_version": platform.python_version(),
            "os": platform.platform(),
            "kernel_version": platform.release(),
        }

    def container_names(self) -> List[str]:
        return [ROOT_CONTAINER]

    def container_info(self, name: str) -> ContainerInfo:
        if name != ROOT_CONTAINER:
            raise ContainerNotFound(name)

        cpu = psutil.cpu_times()
        mem = psutil.virtual_memory()
        net = psutil.net_io_counters()
        disk = psutil.disk_usage(self.fs_path)

        stats = ContainerStats(
            timestamp=time.time(),
            cpu_usage_seconds=cpu.user + cpu.system,
            memory_usage_bytes=mem.used,
            # Working set excludes reclaimable page cache
            memory_working_set_bytes=mem.total - mem.available,
            network_rx_bytes=net.bytes_recv if net else 0,
            network_tx_bytes=net.bytes_sent if net else 0,
            fs_usage_bytes=disk.used,
            fs_limit_bytes=disk.total,
        )
        return ContainerInfo(name=ROOT_CONTAINER, start_time=self.start_time, stats=stats)
