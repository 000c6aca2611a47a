"""Physical memory of the machine, in megabytes."""

from __future__ import annotations

import psutil


def available_ram() -> int:
    """Return the memory currently available, in megabytes (10**6 bytes)."""
    return int(psutil.virtual_memory().available / 1e6)


def total_ram() -> int:
    """Return the total physical memory, in megabytes (10**6 bytes)."""
    return int(psutil.virtual_memory().total / 1e6)