"""Accumulation of samples into the cells of a histogram.

Two strategies locate the bin of a coordinate:

- ``histogramdd_accumulate`` searches the edges of each dimension and works
  for any non-decreasing edges.
- ``histogramdd_linear_accumulate`` computes the bin arithmetically in O(1)
  and is only valid for evenly spaced edges.

Both drop a sample if any of its coordinates lies outside
``[edges[0], edges[-1]]`` and close the last bin of every dimension on the
right. Per-dimension bin indices are linearized in row-major order and the
weights are reduced into a partial histogram with ``index_add_`` before being
written to the output.
"""

from typing import Optional, Sequence

import torch
from torch import Tensor


def _search_bin_index(x: Tensor, edges: Tensor) -> Tensor:
    num_bins = edges.numel() - 1

    # Index of the last edge <= x; x == edges[-1] falls into the last bin
    index = torch.searchsorted(edges, x, right=True) - 1

    return index.clamp_(0, num_bins - 1)


def _linear_bin_index(x: Tensor, edges: Tensor, local_search: bool) -> Tensor:
    num_bins = edges.numel() - 1
    leftmost = edges[0]
    rightmost = edges[-1]

    # Truncation equals floor since x >= leftmost
    index = ((x - leftmost) * num_bins / (rightmost - leftmost)).to(
        torch.int64
    )
    index = index.clamp_(0, num_bins - 1)

    if local_search:
        # Move the estimate by one bin where rounding put it on the wrong
        # side of an edge
        below = x < edges[index]
        above = x >= edges[index + 1]
        index = index - below.to(torch.int64) + above.to(torch.int64)
        index = index.clamp_(0, num_bins - 1)

    return index


def _accumulate(
    input: Tensor,
    weight: Optional[Tensor],
    hist: Tensor,
    bin_edges: Sequence[Tensor],
    linear: bool,
    local_search: bool,
) -> None:
    m = input.size(0)

    keep = torch.ones(m, dtype=torch.bool, device=input.device)
    linear_index = torch.zeros(m, dtype=torch.int64, device=input.device)

    for dim, edges in enumerate(bin_edges):
        x = input[:, dim].contiguous()

        # NaN coordinates fail both comparisons and are dropped
        in_range = (x >= edges[0]) & (x <= edges[-1])
        keep &= in_range

        if linear:
            index = _linear_bin_index(
                torch.where(in_range, x, edges[0]),
                edges,
                local_search,
            )
        else:
            index = _search_bin_index(x, edges)

        linear_index = linear_index * (edges.numel() - 1) + index

    if weight is None:
        values = torch.ones(m, dtype=hist.dtype, device=hist.device)
    else:
        values = weight.reshape(m)

    partial = torch.zeros(hist.numel(), dtype=hist.dtype, device=hist.device)
    partial.index_add_(0, linear_index[keep], values[keep])

    hist.copy_(partial.view(hist.shape))


def histogramdd_accumulate(
    input: Tensor,
    weight: Optional[Tensor],
    hist: Tensor,
    bin_edges: Sequence[Tensor],
) -> None:
    r"""Fill ``hist`` by searching the bin edges of every dimension.

    Parameters
    ----------
    input : Tensor
        Samples of shape ``(M, N)``.
    weight : Tensor, optional
        Weight of every sample, ``M`` elements. Each sample counts ``1`` if
        not given.
    hist : Tensor
        Output of shape ``(K_0, ..., K_{N-1})``, overwritten in place.
    bin_edges : sequence of Tensor
        ``N`` non-decreasing edge tensors, the ``d``-th of length ``K_d + 1``.

    Notes
    -----
    A coordinate :math:`x_d` falls into bin :math:`i_d` if
    :math:`e_{d,i_d} \le x_d < e_{d,i_d+1}`, except for the last bin, which
    also contains :math:`x_d = e_{d,K_d}`.
    """
    _accumulate(input, weight, hist, bin_edges, False, False)


def histogramdd_linear_accumulate(
    input: Tensor,
    weight: Optional[Tensor],
    hist: Tensor,
    bin_edges: Sequence[Tensor],
    local_search: bool = True,
) -> None:
    r"""Fill ``hist`` computing bin indices arithmetically.

    Valid when the edges of each dimension are evenly spaced. The bin of
    :math:`x_d` is estimated as

    .. math::
        i_d = \left\lfloor \frac{(x_d - e_{d,0}) K_d}{e_{d,K_d} - e_{d,0}}
        \right\rfloor

    and clamped to :math:`[0, K_d - 1]`. With ``local_search`` the estimate
    is checked against its neighbouring edges, which makes the result equal
    to ``histogramdd_accumulate``. Without it the pure arithmetic estimate is
    used, as the legacy ``histc`` does.
    """
    _accumulate(input, weight, hist, bin_edges, True, local_search)
