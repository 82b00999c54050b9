"""Core functionality for trilattice package."""

from .access import AccessStrategy, ClampedAccess, ConstantAccess, MirroredAccess, PeriodicAccess
from .interpolation import BatchedTrilinearInterpolator, TrilinearInterpolator

__all__ = [
    "AccessStrategy",
    "ClampedAccess",
    "ConstantAccess",
    "MirroredAccess",
    "PeriodicAccess",
    "TrilinearInterpolator",
    "BatchedTrilinearInterpolator",
]
