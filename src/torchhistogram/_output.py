"""Allocation and resizing of histogram outputs."""

import warnings
from typing import List, Sequence

import torch
from torch import Tensor

from ._exceptions import InvalidArgumentError, OutputResizeWarning


def allocate_bin_edges(input: Tensor) -> List[Tensor]:
    """Allocate one empty edge tensor per dimension of ``input``."""
    if input.dim() < 2:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: input tensor should have at least "
            f"2 dimensions, but got {input.dim()}"
        )

    return [
        torch.empty(0, dtype=input.dtype, device=input.device)
        for _ in range(input.size(-1))
    ]


def resize_output(output: Tensor, shape: Sequence[int]) -> bool:
    """Resize ``output`` to ``shape`` in place.

    Returns
    -------
    bool
        ``True`` if the tensor was resized, ``False`` if it already had the
        requested shape.
    """
    shape = torch.Size(shape)

    if output.shape == shape:
        return False

    if output.numel() != 0:
        warnings.warn(
            f"An output with one or more elements was resized since it had "
            f"shape {list(output.shape)}, which does not match the required "
            f"output shape {list(shape)}. This behavior is deprecated; "
            f"pass outputs of the correct shape or with zero elements.",
            OutputResizeWarning,
            stacklevel=2,
        )

    output.resize_(shape)

    return True


def prepare_out(
    input: Tensor,
    bin_ct: Sequence[int],
    hist: Tensor,
    bin_edges: Sequence[Tensor],
) -> None:
    r"""Check the output tensors and resize them for ``bin_ct`` bins.

    ``hist`` becomes ``(K_0, ..., K_{N-1})`` and ``bin_edges[d]`` becomes
    ``(K_d + 1,)``.

    Raises
    ------
    InvalidArgumentError
        If an output has a dtype other than ``input.dtype`` or a bin count
        is not positive.
    """
    n = input.size(-1)

    if len(bin_ct) != n or len(bin_edges) != n:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: expected {n} bin counts and {n} "
            f"bin edge outputs, but got {len(bin_ct)} and {len(bin_edges)}"
        )

    if hist.dtype != input.dtype:
        raise InvalidArgumentError(
            f"torchhistogram.histogram: input tensor and hist tensor should "
            f"have the same dtype, but got input {input.dtype} and hist "
            f"{hist.dtype}"
        )

    for dim in range(n):
        if bin_edges[dim].dtype != input.dtype:
            raise InvalidArgumentError(
                f"torchhistogram.histogram: input tensor and bin_edges tensor "
                f"should have the same dtype, but got input {input.dtype} and "
                f"bin_edges {bin_edges[dim].dtype} for dimension {dim}"
            )

        if bin_ct[dim] <= 0:
            raise InvalidArgumentError(
                f"torchhistogram.histogram: bins must be > 0, but got "
                f"{bin_ct[dim]} for dimension {dim}"
            )

    for dim in range(n):
        resize_output(bin_edges[dim], (bin_ct[dim] + 1,))

    resize_output(hist, bin_ct)


def bin_counts_of(bins: Sequence[Tensor]) -> List[int]:
    """Number of bins described by each edge tensor."""
    return [edges.numel() - 1 for edges in bins]
