"""
Dense lattice storage for sampled scalar fields.

This module contains the Lattice class, a fixed-size 3D array of scalar
samples kept in a single contiguous buffer. It provides raw element access
only; boundary handling belongs to the access strategies in
``trilattice.core.access``.
"""

from typing import Callable, Optional, Sequence, Tuple

import numpy as np
import torch

from .region import BoundingRegion


class Lattice:
    """
    A dense 3D lattice of scalar samples.

    Samples are stored row-major in a flat buffer, so sample (i, j, k)
    lives at offset ``(i * n1 + j) * n2 + k``. Element access does no
    bounds checking: callers (normally an access strategy) must keep
    indices in ``[0, n_axis)``.
    """

    def __init__(self, n0: int, n1: int, n2: int, dtype: type = np.float64):
        """
        Initialize a zero-filled lattice.

        Args:
            n0: Number of samples along axis 0 (x)
            n1: Number of samples along axis 1 (y)
            n2: Number of samples along axis 2 (z)
            dtype: Sample data type
        """
        shape = (n0, n1, n2)
        for count in shape:
            if int(count) != count or count < 1:
                raise ValueError(f"Lattice sample counts must be positive integers, got {shape}")

        self._shape = tuple(int(count) for count in shape)
        self._stride0 = self._shape[1] * self._shape[2]
        self._stride1 = self._shape[2]
        self.dtype = np.dtype(dtype)
        self.data = np.zeros(self._shape[0] * self._stride0, dtype=self.dtype)

    @classmethod
    def from_array(cls, array, dtype: Optional[type] = None) -> "Lattice":
        """
        Create a lattice holding a copy of a 3D array.

        Args:
            array: 3D array-like indexed as [i, j, k]
            dtype: Sample data type (defaults to the array's float type)

        Returns:
            New Lattice with the same shape and values
        """
        if isinstance(array, torch.Tensor):
            array = array.detach().cpu().numpy()
        values = np.asarray(array)
        if values.ndim != 3:
            raise ValueError(f"Lattice data must be 3D, got shape {values.shape}")
        if dtype is None:
            dtype = values.dtype if np.issubdtype(values.dtype, np.floating) else np.float64

        lattice = cls(*values.shape, dtype=dtype)
        lattice.data[:] = values.astype(lattice.dtype, copy=False).ravel(order="C")
        return lattice

    @classmethod
    def from_function(
        cls,
        region: BoundingRegion,
        shape: Sequence[int],
        func: Callable[[np.ndarray], float],
        dtype: type = np.float64,
    ) -> "Lattice":
        """
        Sample a function at every node of a region.

        Node (i, j, k) sits at ``region.low + (i * h0, j * h1, k * h2)`` with
        ``h = region.size / (shape - 1)``, so the first and last nodes along
        each axis lie on the region's faces.

        Args:
            region: Physical extent of the lattice
            shape: Sample counts (n0, n1, n2), each at least 2
            func: Callable taking an [x, y, z] array and returning a scalar
            dtype: Sample data type

        Returns:
            New Lattice filled with ``func`` values
        """
        if min(shape) < 2:
            raise ValueError(f"Sampling a region needs at least 2 samples per axis, got {tuple(shape)}")
        lattice = cls(*shape, dtype=dtype)
        spacing = node_spacing(region, lattice.shape)
        n0, n1, n2 = lattice.shape
        for i in range(n0):
            for j in range(n1):
                for k in range(n2):
                    point = region.low + np.array([i, j, k]) * spacing
                    lattice[i, j, k] = func(point)
        return lattice

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._shape

    @property
    def count(self) -> int:
        return self.data.size

    def size(self, axis: int) -> int:
        """Number of samples along the given axis."""
        return self._shape[axis]

    def offset(self, i: int, j: int, k: int) -> int:
        """Linear offset of sample (i, j, k) in the flat buffer."""
        return i * self._stride0 + j * self._stride1 + k

    def __getitem__(self, index: Tuple[int, int, int]):
        i, j, k = index
        return self.data[i * self._stride0 + j * self._stride1 + k]

    def __setitem__(self, index: Tuple[int, int, int], value):
        i, j, k = index
        self.data[i * self._stride0 + j * self._stride1 + k] = value

    def to_array(self) -> np.ndarray:
        """3D view of the samples, indexed as [i, j, k]. Writes go through."""
        return self.data.reshape(self._shape)

    def to_tensor(self, device: Optional[torch.device] = None) -> torch.Tensor:
        """Copy of the samples as a tensor of shape (n0, n1, n2)."""
        return torch.tensor(self.to_array(), device=device)

    def __repr__(self) -> str:
        return f"Lattice(shape={self._shape}, dtype={self.dtype})"


def node_spacing(region: BoundingRegion, shape: Sequence[int]) -> np.ndarray:
    """
    Distance between adjacent nodes along each axis.

    Axes with a single sample have no defined spacing; callers must not
    pass them.
    """
    counts = np.asarray(shape, dtype=np.float64)
    return region.size / (counts - 1.0)
