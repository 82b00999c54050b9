"""Vectorized trilinear interpolation of many points with PyTorch."""

import logging
from typing import Optional, Type, Union

import numpy as np
import torch

from ...lattice import Lattice, node_spacing
from ...region import BoundingRegion
from ..access import AccessStrategy, ClampedAccess, resolve_access_strategy
from .trilinear_interpolator import NODE_SNAP_TOLERANCE

logger = logging.getLogger(__name__)


class BatchedTrilinearInterpolator:
    """
    PyTorch trilinear interpolator evaluating a whole batch of points at once.

    It follows the same conventions as TrilinearInterpolator and reads the
    lattice through the tensor methods of the same access strategy, so the
    two agree pointwise. The interpolation weights are built from tensor
    operations on the coordinates, so autograd flows from the result back to
    the query points.

    The samples are copied into a tensor at construction. Call ``refresh``
    after writing to the lattice again.
    """

    def __init__(
        self,
        region: BoundingRegion,
        lattice: Lattice,
        access: Union[str, Type[AccessStrategy], AccessStrategy] = ClampedAccess,
        device: Optional[Union[str, torch.device]] = None,
        **access_options,
    ):
        """
        Initialize the batched interpolator.

        Args:
            region: Physical extent the lattice represents
            lattice: Sampled values
            access: Strategy name, class, or instance bound to ``lattice``
            device: Torch device for samples and results (defaults to CPU)
            **access_options: Extra arguments for the strategy constructor
        """
        if min(lattice.shape) < 2:
            raise ValueError(f"Interpolation needs at least 2 samples per axis, got lattice shape {lattice.shape}")

        self.region = region
        self.lattice = lattice
        self.access = resolve_access_strategy(access, lattice, **access_options)
        self.device = torch.device(device) if device is not None else torch.device("cpu")

        self.refresh()
        self.dtype = self.samples.dtype
        self._low = torch.tensor(region.low.tolist(), dtype=self.dtype, device=self.device)
        self._inv_h = torch.tensor(1.0 / node_spacing(region, lattice.shape), dtype=self.dtype, device=self.device)
        self._last = torch.tensor(lattice.shape, dtype=torch.long, device=self.device) - 1

        logger.debug(
            "BatchedTrilinearInterpolator bound %r to %r through %s on %s",
            region, lattice, type(self.access).__name__, self.device,
        )

    def refresh(self):
        """Copy the current lattice samples to the device."""
        self.samples = torch.tensor(self.lattice.data, device=self.device)

    def evaluate(self, points: Union[torch.Tensor, np.ndarray]) -> torch.Tensor:
        """
        Interpolate the field at a batch of points.

        Args:
            points: Points of shape (..., 3) in [x, y, z] order

        Returns:
            Interpolated values of shape (...)
        """
        points = torch.as_tensor(points, dtype=self.dtype, device=self.device)
        if points.shape[-1] != 3:
            raise ValueError(f"Points must have a trailing dimension of 3, got shape {tuple(points.shape)}")

        coords = (points - self._low) * self._inv_h

        # Snap near-node coordinates without cutting the gradient
        nearest = torch.round(coords.detach())
        close = (coords.detach() - nearest).abs() <= NODE_SNAP_TOLERANCE
        coords = torch.where(close, coords + (nearest - coords).detach(), coords)

        fixed = coords.detach()
        cell = torch.floor(fixed).long()
        upper_face = (cell == self._last) & (fixed == cell.to(self.dtype))
        cell = cell - upper_face.long()
        frac = coords - cell.to(self.dtype)

        i0, j0, k0 = cell.unbind(-1)
        tx, ty, tz = frac.unbind(-1)

        access = self.access
        ia, ib = access.map_indices(i0, 0), access.map_indices(i0 + 1, 0)
        ja, jb = access.map_indices(j0, 1), access.map_indices(j0 + 1, 1)
        ka, kb = access.map_indices(k0, 2), access.map_indices(k0 + 1, 2)

        def get(i, j, k):
            return access.get_values(i, j, k, self.samples)

        # Interpolate along z, then y, then x
        c00 = get(ia, ja, ka) * (1 - tz) + get(ia, ja, kb) * tz
        c01 = get(ia, jb, ka) * (1 - tz) + get(ia, jb, kb) * tz
        c10 = get(ib, ja, ka) * (1 - tz) + get(ib, ja, kb) * tz
        c11 = get(ib, jb, ka) * (1 - tz) + get(ib, jb, kb) * tz

        c0 = c00 * (1 - ty) + c01 * ty
        c1 = c10 * (1 - ty) + c11 * ty

        return c0 * (1 - tx) + c1 * tx

    def __call__(self, points: Union[torch.Tensor, np.ndarray]) -> torch.Tensor:
        return self.evaluate(points)
