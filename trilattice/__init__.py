"""
Trilinear interpolation of scalar fields sampled on regular 3D lattices.

This package maps a physical bounding region onto a dense lattice of samples
and evaluates the field at arbitrary points, with the boundary behaviour
(clamped, periodic, mirrored, constant fill) supplied by a pluggable access
strategy.
"""

from .region import BoundingRegion
from .lattice import Lattice
from .core.access import (
    AccessStrategy,
    ClampedAccess,
    ConstantAccess,
    MirroredAccess,
    PeriodicAccess,
    register_access_strategy,
)
from .core.interpolation import BatchedTrilinearInterpolator, TrilinearInterpolator
from .config import InterpolationConfig

__all__ = [
    "BoundingRegion",
    "Lattice",
    "AccessStrategy",
    "ClampedAccess",
    "ConstantAccess",
    "MirroredAccess",
    "PeriodicAccess",
    "register_access_strategy",
    "TrilinearInterpolator",
    "BatchedTrilinearInterpolator",
    "InterpolationConfig",
]
