"""
Configuration for tile coders.

A ``TileCoderConfig`` holds everything needed to build a ``TileCoder`` and can
be created from a plain parameter dictionary, e.g. one loaded from a JSON file.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional
import logging
import math

from .errors import InvalidConfiguration
from .tile_coder import TileCoder
from .tiling import OFFSET_DIV


@dataclass
class TileCoderConfig:
    """
    Parameters of a tile coder.

    Attributes:
        min_dims: Lower bound of every input dimension
        max_dims: Upper bound of every input dimension
        bins: Bin counts per dimension, one list per tiling
        seed: Seed for the tiling offsets
        include_bias: Whether feature 0 is an always-active bias unit
        offset_div: Offsets lie within one bin length divided by this
        max_workers: Most tilings indexed concurrently (None: CPU count)
    """
    min_dims: List[float]
    max_dims: List[float]
    bins: List[List[int]] = field(default_factory=list)
    seed: int = 0
    include_bias: bool = False
    offset_div: float = OFFSET_DIV
    max_workers: Optional[int] = None

    @property
    def num_tilings(self) -> int:
        return len(self.bins)

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> 'TileCoderConfig':
        """
        Build a config from a parameter dictionary.

        Raises:
            InvalidConfiguration: On missing required keys, unknown keys or
                values of the wrong type
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            raise InvalidConfiguration(f"Unknown tile coder parameters: {unknown}")

        missing = [name for name in ("min_dims", "max_dims", "bins") if name not in params]
        if missing:
            raise InvalidConfiguration(f"Missing tile coder parameters: {missing}")

        include_bias = params.get("include_bias", False)
        if not isinstance(include_bias, bool):
            raise InvalidConfiguration(f"include_bias must be true or false, got {include_bias!r}")

        max_workers = params.get("max_workers")
        try:
            config = cls(
                min_dims=[float(v) for v in params["min_dims"]],
                max_dims=[float(v) for v in params["max_dims"]],
                bins=[[int(n) for n in b] for b in params["bins"]],
                seed=int(params.get("seed", 0)),
                include_bias=include_bias,
                offset_div=float(params.get("offset_div", OFFSET_DIV)),
                max_workers=None if max_workers is None else int(max_workers),
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"Malformed tile coder parameters: {e}") from e
        config.validate()
        return config

    def validate(self) -> None:
        """Structural checks that do not need the tilings to be built."""
        if self.num_tilings == 0:
            raise InvalidConfiguration("A tile coder needs at least one tiling")
        if not (math.isfinite(self.offset_div) and self.offset_div > 0):
            raise InvalidConfiguration(f"offset_div must be positive and finite, got {self.offset_div}")
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidConfiguration(f"max_workers must be at least 1, got {self.max_workers}")

    def build(self) -> TileCoder:
        """Create the ``TileCoder`` described by this config."""
        return TileCoder.from_config(self)


def setup_logging(level=logging.INFO, fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"):
    """Attach a stream handler to the pytile logger and return it."""
    logger = logging.getLogger("pytile")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
