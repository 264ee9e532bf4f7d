"""Selection of the leftmost and rightmost bin edges."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import torch
from tensordict import tensorclass
from torch import Tensor

from ._exceptions import DomainError, InvalidArgumentError


@tensorclass
class OuterBinEdges:
    """Leftmost and rightmost bin edge of every dimension of a histogram.

    As a tensorclass, indexing ``outer[d]`` yields the bounds of dimension
    ``d`` and iteration walks the dimensions in order.

    Attributes
    ----------
    leftmost : Tensor
        Leftmost edge per dimension, float64, shape ``[N]``.
    rightmost : Tensor
        Rightmost edge per dimension, float64, shape ``[N]``.

    Examples
    --------
    >>> outer = select_outer_bin_edges(torch.tensor([[5.0, 0.0], [7.0, 1.0]]))
    >>> outer.leftmost
    tensor([5., 0.], dtype=torch.float64)
    >>> outer.rightmost
    tensor([7., 1.], dtype=torch.float64)
    """

    leftmost: Tensor
    rightmost: Tensor


def select_outer_bin_edges(
    input: Tensor,
    range: Optional[Sequence[float]] = None,
) -> OuterBinEdges:
    r"""Determine the outermost bin edges of every dimension.

    Parameters
    ----------
    input : Tensor
        Samples of shape ``(M, N)``.
    range : sequence of float, optional
        ``2 * N`` numbers ``(min_0, max_0, ..., min_{N-1}, max_{N-1})``. If not
        given, the per-dimension minimum and maximum of ``input`` are used, or
        ``(0, 1)`` for an empty ``input``.

    Returns
    -------
    OuterBinEdges
        Bounds with ``batch_size=[N]``. A dimension whose bounds coincide is
        widened by ``0.5`` on each side.

    Raises
    ------
    InvalidArgumentError
        If ``input`` is not 2-D or ``range`` does not have ``2 * N`` elements.
    DomainError
        If a bound is not finite or a minimum exceeds its maximum.
    """
    if input.dim() != 2:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: expected input to have shape "
            f"(M, N), but got {tuple(input.shape)}"
        )

    n = input.size(-1)

    if range is not None:
        range = list(range)

        if len(range) != 2 * n:
            raise InvalidArgumentError(
                f"torchhistogram.histogramdd: for a {n}-dimensional histogram "
                f"range should have {2 * n} elements, but got {len(range)}"
            )

        bounds = torch.tensor(range, dtype=torch.float64).reshape(n, 2)
        leftmost = bounds[:, 0]
        rightmost = bounds[:, 1]
    elif input.numel() > 0:
        minimum, maximum = torch.aminmax(input, dim=0)
        leftmost = minimum.to(device="cpu", dtype=torch.float64)
        rightmost = maximum.to(device="cpu", dtype=torch.float64)
    else:
        # Empty input defaults to the unit interval, as numpy.histogram does
        leftmost = torch.zeros(n, dtype=torch.float64)
        rightmost = torch.ones(n, dtype=torch.float64)

    for dim, (lo, hi) in enumerate(zip(leftmost.tolist(), rightmost.tolist())):
        if not (math.isfinite(lo) and math.isfinite(hi)):
            raise DomainError(
                f"torchhistogram.histogramdd: dimension {dim}'s range "
                f"[{lo}, {hi}] is not finite"
            )

        if lo > hi:
            raise DomainError(
                f"torchhistogram.histogramdd: min should not exceed max, but "
                f"got min {lo} max {hi} for dimension {dim}"
            )

    # Widen empty ranges so no bin has zero volume
    degenerate = leftmost == rightmost
    leftmost = torch.where(degenerate, leftmost - 0.5, leftmost)
    rightmost = torch.where(degenerate, rightmost + 0.5, rightmost)

    return OuterBinEdges(
        leftmost=leftmost,
        rightmost=rightmost,
        batch_size=[n],
    )


def histc_select_outer_bin_edges(
    input: Tensor,
    min: float,
    max: float,
) -> Tuple[float, float]:
    """Outer bin edges following the legacy ``histc`` rules.

    If ``min == max`` the extrema of ``input`` are used instead; if those
    coincide as well the range is widened by ``1`` on each side.

    Raises
    ------
    DomainError
        If the range is not finite or ``min >= max``.
    """
    leftmost = float(min)
    rightmost = float(max)

    if leftmost == rightmost and input.numel() > 0:
        minimum, maximum = torch.aminmax(input)
        leftmost = minimum.item()
        rightmost = maximum.item()

    if leftmost == rightmost:
        leftmost -= 1
        rightmost += 1

    if not (math.isfinite(leftmost) and math.isfinite(rightmost)):
        raise DomainError(
            f"torchhistogram.histc: range of [{leftmost}, {rightmost}] is "
            f"not finite"
        )

    if not leftmost < rightmost:
        raise DomainError("torchhistogram.histc: max must be larger than min")

    return leftmost, rightmost
