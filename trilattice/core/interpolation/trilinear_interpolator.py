"""Trilinear interpolation of a lattice over a bounding region."""

import logging
import math
from typing import Sequence, Tuple, Type, Union

import numpy as np

from ...lattice import Lattice, node_spacing
from ...region import BoundingRegion
from ..access import AccessStrategy, ClampedAccess, resolve_access_strategy

logger = logging.getLogger(__name__)

# Cell coordinates this close to an integer are treated as lying on the node,
# so node queries stay exact despite rounding in (point - low) / h.
NODE_SNAP_TOLERANCE = 1e-9


def split_cell_coordinate(coordinate: float, count: int) -> Tuple[int, float]:
    """
    Split a continuous cell coordinate into a cell index and a fraction.

    A coordinate on the upper face (``count - 1``) is folded into the last
    cell with fraction 1, so the upper node is reached as a cell corner.
    A non-finite coordinate is passed through as the fraction, so the
    interpolated value comes out as NaN instead of raising.

    Args:
        coordinate: Position in units of node spacing, measured from the low corner
        count: Number of samples along the axis

    Returns:
        Tuple of (cell index, fraction in [0, 1])
    """
    if not math.isfinite(coordinate):
        return 0, coordinate
    nearest = round(coordinate)
    if abs(coordinate - nearest) <= NODE_SNAP_TOLERANCE:
        coordinate = float(nearest)
    index = math.floor(coordinate)
    if index == count - 1 and coordinate == index:
        index -= 1
    return index, coordinate - index


class TrilinearInterpolator:
    """
    Trilinear interpolator over a lattice sampled on a bounding region.

    Node (i, j, k) of the lattice sits at ``region.low + (i, j, k) * h`` with
    ``h = region.size / (shape - 1)``. Every lattice read goes through the
    access strategy, so the same formula serves clamped, periodic and other
    boundary policies.

    Coordinate Convention:
    - Points are given in [x, y, z] order
    - Lattice axis 0 follows x, axis 1 follows y, axis 2 follows z

    ``compute`` does no domain check. With the default clamped strategy,
    points outside the region give edge-extended values rather than errors.
    """

    def __init__(
        self,
        region: BoundingRegion,
        lattice: Lattice,
        access: Union[str, Type[AccessStrategy], AccessStrategy] = ClampedAccess,
        **access_options,
    ):
        """
        Initialize the interpolator.

        Args:
            region: Physical extent the lattice represents
            lattice: Sampled values
            access: Strategy name, class, or instance bound to ``lattice``
            **access_options: Extra arguments for the strategy constructor
        """
        if min(lattice.shape) < 2:
            raise ValueError(f"Interpolation needs at least 2 samples per axis, got lattice shape {lattice.shape}")

        self._region = region
        self._lattice = lattice
        self._access = resolve_access_strategy(access, lattice, **access_options)
        self._spacing = node_spacing(region, lattice.shape)
        self._low = tuple(float(v) for v in region.low)
        self._inv_h = tuple(1.0 / float(h) for h in self._spacing)

        logger.debug(
            "TrilinearInterpolator bound %r to %r through %s, spacing=%s",
            region, lattice, type(self._access).__name__, self._spacing.tolist(),
        )

    @property
    def region(self) -> BoundingRegion:
        return self._region

    @property
    def lattice(self) -> Lattice:
        return self._lattice

    @property
    def access(self) -> AccessStrategy:
        return self._access

    @property
    def spacing(self) -> np.ndarray:
        return self._spacing.copy()

    def node_coordinate(self, i: int, j: int, k: int) -> np.ndarray:
        """World coordinate of lattice node (i, j, k)."""
        return self._region.low + np.array([i, j, k]) * self._spacing

    def compute(self, *point) -> float:
        """
        Interpolate the field at a point.

        Accepts either ``compute(x, y, z)`` or ``compute(point)`` with any
        3-sequence.

        Args:
            point: Query position in [x, y, z] order

        Returns:
            Interpolated value
        """
        if len(point) == 1:
            point = point[0]
        x, y, z = point

        n0, n1, n2 = self._lattice.shape
        i0, tx = split_cell_coordinate((x - self._low[0]) * self._inv_h[0], n0)
        j0, ty = split_cell_coordinate((y - self._low[1]) * self._inv_h[1], n1)
        k0, tz = split_cell_coordinate((z - self._low[2]) * self._inv_h[2], n2)

        access = self._access
        ia, ib = access.map_index(i0, 0), access.map_index(i0 + 1, 0)
        ja, jb = access.map_index(j0, 1), access.map_index(j0 + 1, 1)
        ka, kb = access.map_index(k0, 2), access.map_index(k0 + 1, 2)
        get = access.get_value

        # Interpolate along z, then y, then x
        c00 = get(ia, ja, ka) * (1.0 - tz) + get(ia, ja, kb) * tz
        c01 = get(ia, jb, ka) * (1.0 - tz) + get(ia, jb, kb) * tz
        c10 = get(ib, ja, ka) * (1.0 - tz) + get(ib, ja, kb) * tz
        c11 = get(ib, jb, ka) * (1.0 - tz) + get(ib, jb, kb) * tz

        c0 = c00 * (1.0 - ty) + c01 * ty
        c1 = c10 * (1.0 - ty) + c11 * ty

        return float(c0 * (1.0 - tx) + c1 * tx)

    def __call__(self, *point) -> float:
        return self.compute(*point)

    def __repr__(self) -> str:
        return f"TrilinearInterpolator({self._region!r}, {self._lattice!r}, access={type(self._access).__name__})"
