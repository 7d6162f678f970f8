"""Host platform and architecture names as used in release file names."""

from __future__ import annotations

import platform
import sys
from typing import Any

_MACHINE_TO_ARCH: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "armv7l": "armv7l",
    "armv6l": "armv6l",
}

DEPRECATED_IA32_MIN_MAJOR = 4


def get_host_platform() -> str:
    """Release platform name for the running interpreter (``linux``, ``darwin``, ``win32``)."""
    if sys.platform.startswith("linux"):
        return "linux"
    return sys.platform


def get_node_arch(arch: str) -> str:
    """Normalise an architecture name for use in a release file name.

    Plain ``arm`` means ARMv7 unless the host itself is ARMv6.
    """
    if arch == "arm":
        machine = platform.machine().lower()
        if machine.startswith("armv6"):
            return machine
        return "armv7l"
    return arch


def get_host_arch() -> str:
    """Release architecture name for the host machine."""
    machine = platform.machine().lower()
    return _MACHINE_TO_ARCH.get(machine, machine)


def is_official_linux_ia32_download(
    platform_name: str,
    arch: str,
    version: str,
    mirror_options: Any | None,
) -> bool:
    """Whether the request targets the deprecated official linux/ia32 builds.

    ``version`` is the normalised ``v``-prefixed version.  Requests through a
    mirror are exempt.
    """
    if platform_name != "linux" or arch != "ia32" or mirror_options is not None:
        return False
    major = version.removeprefix("v").split(".", 1)[0]
    return major.isdigit() and int(major) >= DEPRECATED_IA32_MIN_MAJOR
