"""
Boundary access strategies for lattice interpolation.

This module provides the AccessStrategy base class and its registered
variants. Interpolators depend only on the base class contract.
"""

from .strategies import (
    AccessStrategy,
    ClampedAccess,
    ConstantAccess,
    MirroredAccess,
    PeriodicAccess,
    available_access_strategies,
    get_access_strategy,
    register_access_strategy,
    resolve_access_strategy,
)

__all__ = [
    "AccessStrategy",
    "ClampedAccess",
    "ConstantAccess",
    "MirroredAccess",
    "PeriodicAccess",
    "available_access_strategies",
    "get_access_strategy",
    "register_access_strategy",
    "resolve_access_strategy",
]
