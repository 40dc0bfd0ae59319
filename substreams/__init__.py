"""Substreams scalar core - arbitrary-precision numbers for blockchain data."""

from substreams.config import DEFAULT_SCALAR_CONFIG, ScalarConfig
from substreams.scalar import BigDecimal, BigInt, BigUint

__version__ = "0.1.0"
__all__ = ["BigInt", "BigUint", "BigDecimal", "ScalarConfig", "DEFAULT_SCALAR_CONFIG", "__version__"]
