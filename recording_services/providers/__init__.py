"""
Provider capability probing and selection
"""

from .registry import CapabilityRegistry, select_provider

__all__ = [
    "CapabilityRegistry",
    "select_provider",
]
