"""Core utilities shared across the rules, catalog and runtime packages.

Python 3.13+.
"""

from .depth_guard import DepthGuard, depth_clamp
from .rwlock import RWLock

__all__ = [
    "DepthGuard",
    "RWLock",
    "depth_clamp",
]
