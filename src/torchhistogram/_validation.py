"""Argument checks shared by the histogram entry points."""

from typing import Optional, Sequence

import torch
from torch import Tensor

from ._exceptions import InvalidArgumentError

# Element types the accumulation kernels are dispatched for
_SUPPORTED_DTYPES = (torch.float32, torch.float64)

_VALID_ALGORITHMS = {"auto", "search", "linear"}


def check_dtype(input: Tensor) -> None:
    if input.dtype not in _SUPPORTED_DTYPES:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: input tensor should have one of the "
            f"dtypes {_SUPPORTED_DTYPES}, but got {input.dtype}"
        )


def check_algorithm(algorithm: str) -> None:
    if algorithm not in _VALID_ALGORITHMS:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: algorithm must be one of "
            f"{sorted(_VALID_ALGORITHMS)}, got '{algorithm}'"
        )


def check_samples(input: Tensor, weight: Optional[Tensor]) -> None:
    """Check the rank and dtype of ``input`` and the shape of ``weight``."""
    if not isinstance(input, Tensor):
        raise TypeError(
            f"input must be a Tensor, got {type(input).__name__}"
        )

    if input.dim() < 2:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: input tensor should have at least "
            f"2 dimensions, but got {input.dim()}"
        )

    check_dtype(input)

    if weight is None:
        return

    if not isinstance(weight, Tensor):
        raise TypeError(
            f"weight must be a Tensor, got {type(weight).__name__}"
        )

    if weight.dtype != input.dtype:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: if weight tensor is provided, input "
            f"tensor and weight tensor should have the same dtype, but got "
            f"input({input.dtype}), and weight({weight.dtype})"
        )

    # A weight shares the shape of input without its innermost dimension
    expected = list(input.shape[:-1])
    actual = list(weight.shape) or [1]

    if expected != actual:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: if weight tensor is provided it "
            f"should have the same shape as the input tensor excluding its "
            f"innermost dimension, but got input with shape "
            f"{tuple(input.shape)} and weight with shape {tuple(weight.shape)}"
        )


def check_bins(input: Tensor, bins: Sequence[Tensor]) -> None:
    """Check that ``bins`` holds one valid edge tensor per dimension."""
    n = input.size(-1)

    if len(bins) != n:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: expected {n} sequences of bin edges "
            f"for a {n}-dimensional histogram but got {len(bins)}"
        )

    for dim, edges in enumerate(bins):
        if not isinstance(edges, Tensor):
            raise TypeError(
                f"bins for dimension {dim} must be a Tensor, got "
                f"{type(edges).__name__}"
            )

        if edges.dtype != input.dtype:
            raise InvalidArgumentError(
                f"torchhistogram.histogramdd: input tensor and bins tensors "
                f"should have the same dtype, but got input with dtype "
                f"{input.dtype} and bins for dimension {dim} with dtype "
                f"{edges.dtype}"
            )

        if edges.dim() != 1:
            raise InvalidArgumentError(
                f"torchhistogram.histogramdd: bins tensor should have one "
                f"dimension, but got {edges.dim()} dimensions in the bins "
                f"tensor for dimension {dim}"
            )

        if edges.numel() < 1:
            raise InvalidArgumentError(
                f"torchhistogram.histogramdd: bins tensor should have at "
                f"least 1 element, but got {edges.numel()} elements in the "
                f"bins tensor for dimension {dim}"
            )

        # NaN edges fail this comparison as well
        if not bool(torch.all(edges[1:] >= edges[:-1])):
            raise InvalidArgumentError(
                f"torchhistogram.histogramdd: bins tensor should be "
                f"non-decreasing, but got {edges.tolist()} for dimension "
                f"{dim}"
            )


def check_inputs(
    input: Tensor,
    bins: Sequence[Tensor],
    weight: Optional[Tensor],
) -> None:
    """Check ``input``, the edge tensors ``bins`` and ``weight`` together.

    Raises
    ------
    InvalidArgumentError
        If ranks, shapes, dtypes or edge counts are inconsistent.
    TypeError
        If an argument is not a Tensor.
    """
    check_samples(input, weight)
    check_bins(input, bins)


def check_bin_counts(input: Tensor, bin_ct: Sequence[int]) -> None:
    """Check a count-mode request before any edges are allocated."""
    n = input.size(-1)

    if len(bin_ct) != n:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: expected {n} bin counts for a "
            f"{n}-dimensional histogram but got {len(bin_ct)}"
        )

    for dim, count in enumerate(bin_ct):
        if isinstance(count, bool) or not isinstance(count, int):
            raise TypeError(
                f"bin count for dimension {dim} must be an int, got "
                f"{type(count).__name__}"
            )

        if count <= 0:
            raise InvalidArgumentError(
                f"torchhistogram.histogramdd: bins must be > 0, but got "
                f"{count} for dimension {dim}"
            )
