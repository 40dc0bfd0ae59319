"""Test helpers module for shared test utilities.

- strategies: hypothesis strategies for scalar values
"""

from tests.helpers.strategies import big_integers, bigdecimals, bigints, finite_decimals

__all__ = [
    "big_integers",
    "finite_decimals",
    "bigints",
    "bigdecimals",
]
