from typing import NamedTuple, Tuple

from torch import Tensor


class HistogramResult(NamedTuple):
    """Result of a one-dimensional histogram.

    Parameters
    ----------
    hist : Tensor
        Counts (or densities) per bin. Shape ``(bins,)``.
    bin_edges : Tensor
        Edges of the bins, including the rightmost edge. Shape ``(bins + 1,)``.
    """

    hist: Tensor
    bin_edges: Tensor


class HistogramDDResult(NamedTuple):
    """Result of an N-dimensional histogram.

    Parameters
    ----------
    hist : Tensor
        Counts (or densities) per bin. Shape ``(K_0, ..., K_{N-1})``.
    bin_edges : tuple of Tensor
        ``N`` edge tensors; the ``d``-th has shape ``(K_d + 1,)``.
    """

    hist: Tensor
    bin_edges: Tuple[Tensor, ...]
