"""
Interpolation settings.

InterpolationConfig collects the choices made when binding a lattice to an
interpolator (boundary strategy, sample type, fill value, device) so they can
come from a YAML file or a plain dict instead of being spelled out at every
call site.

Example YAML::

    access: periodic
    dtype: float64
    device: cpu
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
import yaml

from .core.access import available_access_strategies, get_access_strategy
from .core.interpolation import BatchedTrilinearInterpolator, TrilinearInterpolator
from .lattice import Lattice
from .region import BoundingRegion

logger = logging.getLogger(__name__)

DEFAULT_ACCESS = "clamped"
DEFAULT_DTYPE = "float64"
DEFAULT_DEVICE = "cpu"


class InterpolationConfig:
    """
    Settings used to build interpolators.

    Attributes:
        access: Registered access strategy name
        dtype: Numpy dtype for lattice samples
        fill_value: Substitute value for the ``constant`` strategy
        device: Torch device name for the batched interpolator
    """

    def __init__(
        self,
        access: str = DEFAULT_ACCESS,
        dtype: Union[str, type] = DEFAULT_DTYPE,
        fill_value: Optional[float] = None,
        device: str = DEFAULT_DEVICE,
    ):
        if access not in available_access_strategies():
            raise ValueError(f"Unknown access strategy '{access}', expected one of {available_access_strategies()}")
        try:
            self.dtype = np.dtype(dtype)
        except TypeError as e:
            raise ValueError(f"Invalid sample dtype {dtype!r}") from e
        if not np.issubdtype(self.dtype, np.floating):
            raise ValueError(f"Sample dtype must be a floating point type, got {self.dtype}")

        self.access = access
        self.fill_value = None if fill_value is None else float(fill_value)
        self.device = device

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "InterpolationConfig":
        """Build a config from a mapping, applying defaults for missing keys."""
        config = dict(config or {})
        unknown = set(config) - {"access", "dtype", "fill_value", "device"}
        if unknown:
            raise ValueError(f"Unknown interpolation config keys: {sorted(unknown)}")
        return cls(
            access=config.get("access", DEFAULT_ACCESS),
            dtype=config.get("dtype", DEFAULT_DTYPE),
            fill_value=config.get("fill_value"),
            device=config.get("device", DEFAULT_DEVICE),
        )

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "InterpolationConfig":
        """Load a config from a YAML file."""
        config_path = Path(config_path)
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
        if config is not None and not isinstance(config, dict):
            raise ValueError(f"Interpolation config in {config_path} must be a mapping")

        logger.debug("Loaded interpolation config from %s: %s", config_path, config)
        return cls.from_dict(config)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access": self.access,
            "dtype": self.dtype.name,
            "fill_value": self.fill_value,
            "device": self.device,
        }

    def access_options(self) -> Dict[str, Any]:
        """Constructor arguments for the configured strategy."""
        if self.fill_value is not None and self.access == "constant":
            return {"fill_value": self.fill_value}
        return {}

    def new_lattice(self, n0: int, n1: int, n2: int) -> Lattice:
        """Create an empty lattice with the configured sample type."""
        return Lattice(n0, n1, n2, dtype=self.dtype)

    def build_interpolator(self, region: BoundingRegion, lattice: Lattice) -> TrilinearInterpolator:
        return TrilinearInterpolator(
            region, lattice, access=get_access_strategy(self.access), **self.access_options()
        )

    def build_batched_interpolator(self, region: BoundingRegion, lattice: Lattice) -> BatchedTrilinearInterpolator:
        return BatchedTrilinearInterpolator(
            region, lattice, access=get_access_strategy(self.access), device=self.device, **self.access_options()
        )

    def __repr__(self) -> str:
        return f"InterpolationConfig({self.to_dict()})"
