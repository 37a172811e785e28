"""
Datasets package public API.

Re-export the array generators so callers can write:
    from quicktrace.datasets import make_dataset, random_array, DEFAULT_ARRAY
"""

from .generators import (
    DEFAULT_ARRAY,
    DEFAULT_RANGE,
    SUPPORTED_DISTS,
    SUPPORTED_SIZES,
    make_dataset,
    random_array,
)

__all__ = [
    "make_dataset",
    "random_array",
    "DEFAULT_ARRAY",
    "DEFAULT_RANGE",
    "SUPPORTED_SIZES",
    "SUPPORTED_DISTS",
]
