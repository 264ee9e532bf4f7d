"""Materialization of the per-dimension bin edge tensors."""

from typing import Sequence

import torch
from torch import Tensor

from ._outer_bin_edges import OuterBinEdges
from ._output import resize_output


def linspace_bin_edges(
    outer_bin_edges: OuterBinEdges,
    bin_ct: Sequence[int],
    bin_edges: Sequence[Tensor],
) -> None:
    """Write ``bin_ct[d] + 1`` evenly spaced edges into ``bin_edges[d]``.

    Each edge tensor is resized in place and spans the outer edges of its
    dimension, both ends included.
    """
    leftmost = outer_bin_edges.leftmost.tolist()
    rightmost = outer_bin_edges.rightmost.tolist()

    for dim, edges in enumerate(bin_edges):
        steps = bin_ct[dim] + 1
        resize_output(edges, (steps,))
        torch.linspace(leftmost[dim], rightmost[dim], steps, out=edges)


def copy_bin_edges(
    bins: Sequence[Tensor],
    bin_edges: Sequence[Tensor],
) -> None:
    """Copy the edges used for binning into the returned edge tensors."""
    for source, destination in zip(bins, bin_edges):
        if source is not destination:
            destination.copy_(source)
