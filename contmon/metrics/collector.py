#!/usr/bin/env python3
"""
Prometheus collector over the container manager

Values are read from the manager at scrape time; nothing is cached here.
"""

import logging
from typing import Iterator, List

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric

from ..manager import ContainerManager, ContainerNotFound

logger = logging.getLogger("contmon.server")

LABELS = ["id"]


class ContainerCollector:
    """Custom collector: one sample per container per family."""

    def __init__(self, manager: ContainerManager) -> None:
        self.manager = manager

    def _families(self) -> List[Metric]:
        return [
            CounterMetricFamily("container_cpu_usage_seconds", "Cumulative cpu time consumed in seconds.", labels=LABELS),
            GaugeMetricFamily("container_memory_usage_bytes", "Current memory usage in bytes.", labels=LABELS),
            GaugeMetricFamily("container_memory_working_set_bytes", "Current working set in bytes.", labels=LABELS),
            CounterMetricFamily("container_network_receive_bytes", "Cumulative count of bytes received.", labels=LABELS),
            CounterMetricFamily("container_network_transmit_bytes", "Cumulative count of bytes transmitted.", labels=LABELS),
            GaugeMetricFamily("container_fs_usage_bytes", "Number of bytes that are consumed by the container on this filesystem.", labels=LABELS),
            GaugeMetricFamily("container_fs_limit_bytes", "Number of bytes that can be consumed by the container on this filesystem.", labels=LABELS),
            GaugeMetricFamily("container_start_time_seconds", "Start time of the container since unix epoch in seconds.", labels=LABELS),
        ]

    def describe(self) -> Iterator[Metric]:
        # Lets the registry check names without touching the manager
        yield from self._families()
        yield GaugeMetricFamily("machine_cpu_cores", "Number of CPU cores on the machine.")
        yield GaugeMetricFamily("machine_memory_bytes", "Amount of memory installed on the machine.")
        yield GaugeMetricFamily("container_scrape_error", "1 if there was an error while getting container metrics, 0 otherwise.")

    def collect(self) -> Iterator[Metric]:
        (cpu, mem, working_set, rx, tx, fs_usage, fs_limit, start_time) = families = self._families()
        errored = 0

        try:
            machine = self.manager.machine_info()
            yield GaugeMetricFamily("machine_cpu_cores", "Number of CPU cores on the machine.",
                                    value=machine.get("num_cores", 0))
            yield GaugeMetricFamily("machine_memory_bytes", "Amount of memory installed on the machine.",
                                    value=machine.get("memory_capacity", 0))

            for name in self.manager.container_names():
                try:
                    info = self.manager.container_info(name)
                except ContainerNotFound:
                    continue
                s = info.stats
                cpu.add_metric([name], s.cpu_usage_seconds)
                mem.add_metric([name], s.memory_usage_bytes)
                working_set.add_metric([name], s.memory_working_set_bytes)
                rx.add_metric([name], s.network_rx_bytes)
                tx.add_metric([name], s.network_tx_bytes)
                fs_usage.add_metric([name], s.fs_usage_bytes)
                fs_limit.add_metric([name], s.fs_limit_bytes)
                start_time.add_metric([name], info.start_time)
        except Exception as e:
            logger.error(f"Failed to collect container metrics: {e}")
            errored = 1

        yield from families
        yield GaugeMetricFamily("container_scrape_error",
                                "1 if there was an error while getting container metrics, 0 otherwise.",
                                value=errored)
