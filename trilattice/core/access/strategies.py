"""
Access strategies deciding how lattice indices are resolved at the boundary.

An access strategy sits between an interpolator and a Lattice. The
interpolator computes raw corner indices, which may fall outside the stored
range, and asks the strategy to map each index and fetch the sample. Every
strategy implements the same two operations, once for plain integers and once
for index tensors used by the batched path:

- ``map_index(raw, axis)`` / ``map_indices(raw, axis)``
- ``get_value(i, j, k)`` / ``get_values(i, j, k, samples)``

Strategies hold a reference to the lattice and never write to it.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Type, Union

import torch

from ...lattice import Lattice


_ACCESS_STRATEGIES: Dict[str, Type["AccessStrategy"]] = {}


def register_access_strategy(name: str):
    """Class decorator registering a strategy under a lookup name."""
    def decorator(cls: Type["AccessStrategy"]) -> Type["AccessStrategy"]:
        if name in _ACCESS_STRATEGIES:
            raise ValueError(f"Access strategy '{name}' is already registered")
        cls.name = name
        _ACCESS_STRATEGIES[name] = cls
        return cls
    return decorator


def get_access_strategy(name: str) -> Type["AccessStrategy"]:
    """Look up a registered strategy class by name."""
    cls = _ACCESS_STRATEGIES.get(name)
    if cls is None:
        raise KeyError(f"No access strategy registered as '{name}', known: {available_access_strategies()}")
    return cls


def available_access_strategies() -> List[str]:
    return sorted(_ACCESS_STRATEGIES)


class AccessStrategy(ABC):
    """
    Base class for boundary policies.

    Attributes:
        lattice: The lattice samples are read from (not owned)
        name: Registry name of the strategy
    """

    name = None

    def __init__(self, lattice: Lattice):
        self.lattice = lattice

    @abstractmethod
    def map_index(self, raw_index: int, axis: int) -> int:
        """Map a possibly out-of-range index along ``axis`` to a storage index."""

    @abstractmethod
    def get_value(self, i: int, j: int, k: int) -> float:
        """Sample value (or its substitute) at the given indices."""

    @abstractmethod
    def map_indices(self, raw_indices: torch.Tensor, axis: int) -> torch.Tensor:
        """Tensor form of ``map_index``."""

    @abstractmethod
    def get_values(self, i: torch.Tensor, j: torch.Tensor, k: torch.Tensor, samples: torch.Tensor) -> torch.Tensor:
        """
        Tensor form of ``get_value``.

        Args:
            i, j, k: Index tensors of identical shape
            samples: Flat tensor holding a copy of the lattice buffer

        Returns:
            Tensor of values with the shape of ``i``
        """

    def _offsets(self, i: torch.Tensor, j: torch.Tensor, k: torch.Tensor) -> torch.Tensor:
        return self.lattice.offset(i, j, k)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.lattice!r})"


@register_access_strategy("clamped")
class ClampedAccess(AccessStrategy):
    """
    Direct access for queries inside the bounding region.

    Inside the region the interpolator never produces an index outside
    ``[0, n_axis - 1]``, so indices pass through unchanged and no remapping
    takes place. Results outside the region are otherwise undefined; this
    implementation chooses to clamp indices beyond the lattice to the nearest
    end sample, extending the edge values outward instead of reading past
    the buffer.
    """

    def map_index(self, raw_index: int, axis: int) -> int:
        return min(max(raw_index, 0), self.lattice.size(axis) - 1)

    def get_value(self, i: int, j: int, k: int) -> float:
        return self.lattice[i, j, k]

    def map_indices(self, raw_indices: torch.Tensor, axis: int) -> torch.Tensor:
        return raw_indices.clamp(0, self.lattice.size(axis) - 1)

    def get_values(self, i, j, k, samples):
        return samples[self._offsets(i, j, k)]


@register_access_strategy("periodic")
class PeriodicAccess(AccessStrategy):
    """
    Periodic domain where the last sample along an axis duplicates the first.

    The period along an axis of ``n`` samples is ``n - 1``. Indices that
    already address a stored sample are used as is, so the duplicated upper
    sample is still read at the upper face; any other index is reduced
    modulo the period into ``[0, n - 2]``. Mapped indices therefore span
    ``[0, n - 1]`` rather than ``[0, n - 2]``, which keeps nodes on the upper
    face exact for fields that are not themselves periodic.

    ``get_value`` returns 0 when a received index reaches the axis count.
    This zeroing of the redundant upper boundary sample is kept as a
    documented rule. Since ``map_index`` never returns ``n`` or more, it
    cannot fire during interpolation and only triggers when indices are
    fetched without going through ``map_index`` first.
    """

    def map_index(self, raw_index: int, axis: int) -> int:
        count = self.lattice.size(axis)
        if 0 <= raw_index < count:
            return raw_index
        # Python's modulo is already non-negative for a positive period
        return raw_index % (count - 1)

    def get_value(self, i: int, j: int, k: int) -> float:
        n0, n1, n2 = self.lattice.shape
        if i >= n0 or j >= n1 or k >= n2:
            return 0.0
        return self.lattice[i, j, k]

    def map_indices(self, raw_indices, axis):
        count = self.lattice.size(axis)
        in_range = (raw_indices >= 0) & (raw_indices < count)
        return torch.where(in_range, raw_indices, torch.remainder(raw_indices, count - 1))

    def get_values(self, i, j, k, samples):
        n0, n1, n2 = self.lattice.shape
        overflow = (i >= n0) | (j >= n1) | (k >= n2)
        offsets = self._offsets(i.clamp(max=n0 - 1), j.clamp(max=n1 - 1), k.clamp(max=n2 - 1))
        return samples[offsets].masked_fill(overflow, 0.0)


@register_access_strategy("mirrored")
class MirroredAccess(AccessStrategy):
    """
    Reflect out-of-range indices about the end samples.

    The end samples are not repeated: ``-1 -> 1`` and ``n -> n - 2``.
    """

    def map_index(self, raw_index: int, axis: int) -> int:
        count = self.lattice.size(axis)
        if 0 <= raw_index < count:
            return raw_index
        period = 2 * (count - 1)
        index = raw_index % period
        if index >= count:
            index = period - index
        return index

    def get_value(self, i: int, j: int, k: int) -> float:
        return self.lattice[i, j, k]

    def map_indices(self, raw_indices, axis):
        count = self.lattice.size(axis)
        period = 2 * (count - 1)
        folded = torch.remainder(raw_indices, period)
        return torch.where(folded >= count, period - folded, folded)

    def get_values(self, i, j, k, samples):
        return samples[self._offsets(i, j, k)]


@register_access_strategy("constant")
class ConstantAccess(AccessStrategy):
    """
    Substitute a fill value for indices outside the lattice.

    With the default NaN fill, any interpolation touching a missing corner
    comes out as NaN, which marks queries outside the region.
    """

    def __init__(self, lattice: Lattice, fill_value: float = float("nan")):
        super().__init__(lattice)
        self.fill_value = fill_value

    def map_index(self, raw_index: int, axis: int) -> int:
        return raw_index

    def get_value(self, i: int, j: int, k: int) -> float:
        n0, n1, n2 = self.lattice.shape
        if not (0 <= i < n0 and 0 <= j < n1 and 0 <= k < n2):
            return self.fill_value
        return self.lattice[i, j, k]

    def map_indices(self, raw_indices, axis):
        return raw_indices

    def get_values(self, i, j, k, samples):
        n0, n1, n2 = self.lattice.shape
        outside = (i < 0) | (i >= n0) | (j < 0) | (j >= n1) | (k < 0) | (k >= n2)
        offsets = self._offsets(i.clamp(0, n0 - 1), j.clamp(0, n1 - 1), k.clamp(0, n2 - 1))
        return samples[offsets].masked_fill(outside, self.fill_value)


def resolve_access_strategy(
    access: Union[str, Type[AccessStrategy], AccessStrategy],
    lattice: Lattice,
    **options,
) -> AccessStrategy:
    """
    Build the strategy instance an interpolator reads through.

    Args:
        access: Registered name, strategy class, or an existing instance bound
            to ``lattice``
        lattice: Lattice to read from
        **options: Extra constructor arguments (e.g. ``fill_value``)

    Returns:
        AccessStrategy bound to ``lattice``
    """
    if isinstance(access, AccessStrategy):
        if access.lattice is not lattice:
            raise ValueError("Access strategy instance is bound to a different lattice")
        if options:
            raise ValueError("Options cannot be applied to an existing access strategy instance")
        return access
    if isinstance(access, str):
        access = get_access_strategy(access)
    if isinstance(access, type) and issubclass(access, AccessStrategy):
        return access(lattice, **options)
    raise TypeError(f"Expected an access strategy name, class or instance, got {access!r}")
