"""Queries about the running system: word size, processes and memory."""

from __future__ import annotations

import sys

import psutil


def platform_bits() -> int:
    """Return 64 on a 64-bit interpreter, 32 otherwise."""
    return 64 if sys.maxsize > 2**32 else 32


def running_pids() -> set[int]:
    """Return the ids of all running processes, or an empty set on failure."""
    try:
        return set(psutil.pids())
    except (psutil.Error, OSError):
        return set()


def total_ram_bytes() -> int:
    """Return the total physical memory in bytes, or 0 on failure."""
    try:
        return int(psutil.virtual_memory().total)
    except (psutil.Error, OSError):
        return 0