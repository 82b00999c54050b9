"""
Bounding regions for lattice interpolation.

This module contains the BoundingRegion class, which describes the physical
rectangular domain a lattice is sampled over and maps world coordinates into
the lattice's local frame.
"""

from typing import Sequence, Union

import numpy as np


class BoundingRegion:
    """
    An axis-aligned rectangular domain in world coordinates.

    The region can be built three ways:
    - ``BoundingRegion(1.0)``: centered cube ``[-0.5, 0.5]^3``
    - ``BoundingRegion((3.0, 4.0, 5.0))``: centered cuboid with these side lengths
    - ``BoundingRegion(low, high)``: explicit corners, arbitrary placement

    Coordinates are always in [x, y, z] order. The region is immutable once
    built.
    """

    def __init__(
        self,
        low_or_size: Union[float, Sequence[float]],
        high: Sequence[float] = None,
    ):
        """
        Initialize a bounding region.

        Args:
            low_or_size: Cube side length, per-axis side lengths, or the low corner
                when ``high`` is given
            high: High corner (only with an explicit low corner)
        """
        if high is None:
            size = np.broadcast_to(np.asarray(low_or_size, dtype=np.float64), (3,))
            low = -size / 2.0
            top = size / 2.0
        else:
            low = np.asarray(low_or_size, dtype=np.float64).reshape(3)
            top = np.asarray(high, dtype=np.float64).reshape(3)

        if not np.all(low < top):
            raise ValueError(f"Region corners must satisfy low < high on every axis, got low={low}, high={top}")

        self._low = np.array(low)
        self._high = np.array(top)
        self._size = self._high - self._low
        for array in (self._low, self._high, self._size):
            array.flags.writeable = False

    @classmethod
    def from_corners(cls, low: Sequence[float], high: Sequence[float]) -> "BoundingRegion":
        """Create a region from its low and high corners."""
        return cls(low, high)

    @property
    def low(self) -> np.ndarray:
        return self._low

    @property
    def high(self) -> np.ndarray:
        return self._high

    @property
    def size(self) -> np.ndarray:
        return self._size

    @property
    def center(self) -> np.ndarray:
        return (self._low + self._high) / 2.0

    def get_ith_size(self, axis: int) -> float:
        """Side length along the given axis (0=x, 1=y, 2=z)."""
        return float(self._size[axis])

    @property
    def size_x(self) -> float:
        return float(self._size[0])

    @property
    def size_y(self) -> float:
        return float(self._size[1])

    @property
    def size_z(self) -> float:
        return float(self._size[2])

    def inside(self, point: Sequence[float]) -> bool:
        """
        Check whether a point lies in the closed region.

        Args:
            point: 3D point in [x, y, z] order

        Returns:
            True if ``low <= point <= high`` componentwise
        """
        p = np.asarray(point, dtype=np.float64)
        return bool(np.all(p >= self._low) and np.all(p <= self._high))

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoundingRegion):
            return NotImplemented
        return np.array_equal(self._low, other._low) and np.array_equal(self._high, other._high)

    def __hash__(self) -> int:
        return hash((tuple(self._low), tuple(self._high)))

    def __repr__(self) -> str:
        return f"BoundingRegion(low={self._low.tolist()}, high={self._high.tolist()})"
