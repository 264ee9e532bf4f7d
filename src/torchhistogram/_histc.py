"""Legacy fixed-range histogram."""

from typing import Optional

import torch
from torch import Tensor

from ._histogramdd import _histogramdd_from_outer_bin_edges
from ._outer_bin_edges import OuterBinEdges, histc_select_outer_bin_edges
from ._validation import check_bin_counts, check_samples


def histc(
    input: Tensor,
    bins: int = 100,
    min: float = 0,
    max: float = 0,
    *,
    out: Optional[Tensor] = None,
) -> Tensor:
    r"""Compute a histogram of equal-width bins between ``min`` and ``max``.

    Narrowed interface kept for compatibility with ``torch.histc``: no
    weights, no density, and bin indices are computed arithmetically
    without correcting for rounding at the edges.

    Parameters
    ----------
    input : Tensor
        Input tensor of any shape, ``float32`` or ``float64``.
    bins : int, optional
        Number of bins. Default: 100.
    min : float, optional
        Lower end of the range (inclusive). Default: 0.
    max : float, optional
        Upper end of the range (inclusive). Default: 0.
    out : Tensor, optional
        Tensor to write the histogram into.

    Returns
    -------
    Tensor
        Counts, shape ``(bins,)``.

    Raises
    ------
    DomainError
        If the range is not finite or ``min >= max``.

    Notes
    -----
    If ``min == max``, the minimum and maximum of ``input`` are used. If
    those are equal as well, the range is widened by 1 on each side.

    Examples
    --------
    >>> x = torch.tensor([1.0, 2.0, 1.0])
    >>> torchhistogram.histc(x, bins=4, min=0, max=3)
    tensor([0., 2., 1., 0.])
    """
    if not isinstance(input, Tensor):
        raise TypeError(
            f"input must be a Tensor, got {type(input).__name__}"
        )

    reshaped = input.reshape(input.numel(), 1)

    check_samples(reshaped, None)
    check_bin_counts(reshaped, [bins])

    leftmost, rightmost = histc_select_outer_bin_edges(input, min, max)

    outer_bin_edges = OuterBinEdges(
        leftmost=torch.tensor([leftmost], dtype=torch.float64),
        rightmost=torch.tensor([rightmost], dtype=torch.float64),
        batch_size=[1],
    )

    hist = (
        out
        if out is not None
        else torch.empty(0, dtype=input.dtype, device=input.device)
    )
    bin_edges = torch.empty(0, dtype=input.dtype, device=input.device)

    hist, _ = _histogramdd_from_outer_bin_edges(
        reshaped,
        [bins],
        outer_bin_edges,
        None,
        False,
        "linear",
        (hist, [bin_edges]),
        local_search=False,
    )

    return hist
