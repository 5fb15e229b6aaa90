"""Telemetry and observability scaffolds.

This package emits discovery events for deterministic diagnostics.
"""

from .logger import DiscoveryLogger

__all__ = ["DiscoveryLogger"]
