"""Hypothesis strategies for histogram inputs."""

from ._bin_counts import bin_counts
from ._sample_sets import sample_sets
from ._sample_shapes import sample_shapes
from ._supported_dtypes import supported_dtypes
from ._tensors import tensors

__all__ = [
    # Tensor strategies
    "sample_shapes",
    "tensors",
    "sample_sets",
    "bin_counts",
    # Dtype strategies
    "supported_dtypes",
]
