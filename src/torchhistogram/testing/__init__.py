"""Hypothesis strategies for testing histograms.

Example usage:

    import hypothesis

    from torchhistogram.testing import bin_counts, sample_sets

    @hypothesis.given(samples=sample_sets(), data=hypothesis.strategies.data())
    def test_shape(samples, data):
        counts = data.draw(bin_counts(samples.size(-1)))
        ...
"""

from .strategies import (
    bin_counts,
    sample_sets,
    sample_shapes,
    supported_dtypes,
    tensors,
)

__all__ = [
    "bin_counts",
    "sample_sets",
    "sample_shapes",
    "supported_dtypes",
    "tensors",
]
