"""
Interpolation utilities for the trilattice library.

This module provides classes for interpolating lattice samples at arbitrary
points. TrilinearInterpolator evaluates one point per call;
BatchedTrilinearInterpolator evaluates tensors of points with PyTorch.
"""

from .trilinear_interpolator import TrilinearInterpolator
from .batched_interpolator import BatchedTrilinearInterpolator

__all__ = ["TrilinearInterpolator", "BatchedTrilinearInterpolator"]
