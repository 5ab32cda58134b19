#!/usr/bin/env python3
"""
Validation / debug page

Plain-text dump of what the daemon can see: versions, kernel, cgroup
controllers and the manager's machine and container state.
"""

from pathlib import Path
from typing import List

from .manager import ContainerManager

VALIDATE_PAGE = "/validate/"
PROC_CGROUPS = Path("/proc/cgroups")


class ValidationError(Exception):
    """The manager could not produce the state needed for the report."""


def cgroup_controllers(path: Path = PROC_CGROUPS) -> List[str]:
    """Enabled controllers from /proc/cgroups, empty if unavailable."""
    try:
        lines = path.read_text().splitlines()
    except OSError:
        return []
    controllers = []
    for line in lines:
        if line.startswith("#") or not line.strip():
            continue
        fields = line.split()
        # subsys_name hierarchy num_cgroups enabled
        if len(fields) >= 4 and fields[3] == "1":
            controllers.append(fields[0])
    return controllers


def handle_request(manager: ContainerManager, auth_mode: str = "none") -> str:
    """Build the validation report for manager."""
    try:
        version = manager.version_info()
        machine = manager.machine_info()
        names = manager.container_names()
    except Exception as e:
        raise ValidationError(f"failed to query container manager: {e}") from e

    out = []
    out.append(f"contmon version: {version.get('contmon_version', 'unknown')}")
    out.append(f"OS version: {version.get('os', 'unknown')}")
    out.append(f"Kernel version: {version.get('kernel_version', 'unknown')}")
    out.append(f"HTTP authentication: {auth_mode}")
    out.append("")

    controllers = cgroup_controllers()
    if controllers:
        out.append(f"Cgroup controllers enabled: {', '.join(controllers)}")
    else:
        out.append("Cgroup controllers: not available (no /proc/cgroups)")
    out.append("")

    out.append("Machine:")
    for key in sorted(machine):
        out.append(f"\t{key}: {machine[key]}")
    out.append("")

    out.append(f"Containers ({len(names)}):")
    for name in names:
        out.append(f"\t{name}")

    return "\n".join(out) + "\n"
