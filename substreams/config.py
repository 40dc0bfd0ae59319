"""Configuration for the scalar numeric core."""

from __future__ import annotations

import os
from dataclasses import dataclass

import numpy as np

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ScalarConfig:
    """Centralized numeric and logging settings.

    Attributes:
        division_precision: Significant digits kept by BigDecimal division
            when the quotient does not terminate (default: 100)
        max_significant_digits: Advisory decimal128 digit limit (34)
        min_exp: Advisory decimal128 minimum exponent (-6143)
        max_exp: Advisory decimal128 maximum exponent (6144)
        f32_digits: Fractional digits used when formatting a float32 before
            parsing it as a BigDecimal
        f64_digits: Same for float64
        log_level: Minimum structlog level
        log_json: Render logs as JSON instead of console output
    """

    # BigDecimal arithmetic
    division_precision: int = 100

    # IEEE-754 decimal128 limits, not enforced
    max_significant_digits: int = 34
    min_exp: int = -6143
    max_exp: int = 6144

    # Float bridging: guaranteed decimal digits of each float type
    f32_digits: int = int(np.finfo(np.float32).precision)
    f64_digits: int = int(np.finfo(np.float64).precision)

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self) -> None:
        if self.division_precision <= 0:
            raise ValueError(f"division_precision must be positive, got {self.division_precision}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

    @classmethod
    def from_env(cls) -> ScalarConfig:
        """Build a config with logging settings taken from the environment.

        Environment variables:
        - SUBSTREAMS_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
        - SUBSTREAMS_LOG_JSON: true/1/yes for JSON output (default: false)
        """
        return cls(
            log_level=os.environ.get("SUBSTREAMS_LOG_LEVEL", "INFO").upper(),
            log_json=os.environ.get("SUBSTREAMS_LOG_JSON", "false").lower() in ("true", "1", "yes"),
        )


# Default configuration instance
DEFAULT_SCALAR_CONFIG = ScalarConfig()
