"""N-dimensional histogram."""

import math
import warnings
from typing import List, Optional, Sequence, Tuple, Union

import torch
from torch import Tensor

from ._accumulate import (
    histogramdd_accumulate,
    histogramdd_linear_accumulate,
)
from ._bin_edges import copy_bin_edges, linspace_bin_edges
from ._density import normalize_density
from ._exceptions import InvalidArgumentError, NotDifferentiableWarning
from ._outer_bin_edges import OuterBinEdges, select_outer_bin_edges
from ._output import allocate_bin_edges, bin_counts_of, prepare_out
from ._result import HistogramDDResult
from ._validation import (
    check_algorithm,
    check_bin_counts,
    check_inputs,
    check_samples,
)

_Bins = Union[int, Sequence[int], Sequence[Tensor]]
_Out = Tuple[Tensor, Sequence[Tensor]]


def _reshape_2d(input: Tensor) -> Tensor:
    m = math.prod(input.shape[:-1])

    return input.reshape(m, input.size(-1))


def _expand_bins(input: Tensor, bins: _Bins) -> list:
    if isinstance(bins, Tensor):
        raise TypeError(
            "bins must be an int, a sequence of ints or a sequence of "
            "Tensors, got a Tensor"
        )

    if isinstance(bins, int) and not isinstance(bins, bool):
        return [bins] * input.size(-1)

    return list(bins)


def _unpack_out(
    input: Tensor,
    out: Optional[_Out],
) -> Tuple[Tensor, List[Tensor]]:
    if out is None:
        hist = torch.empty(0, dtype=input.dtype, device=input.device)

        return hist, allocate_bin_edges(input)

    if len(out) != 2:
        raise InvalidArgumentError(
            f"torchhistogram.histogramdd: out should be a (hist, bin_edges) "
            f"pair, but got {len(out)} elements"
        )

    hist, bin_edges = out

    return hist, list(bin_edges)


def _warn_if_requires_grad(input: Tensor, weight: Optional[Tensor]) -> None:
    if input.requires_grad or (weight is not None and weight.requires_grad):
        warnings.warn(
            "histograms are not differentiable; the result is detached from "
            "the autograd graph",
            NotDifferentiableWarning,
            stacklevel=4,
        )


@torch.no_grad()
def _histogramdd_from_bin_tensors(
    input: Tensor,
    bins: Sequence[Tensor],
    weight: Optional[Tensor],
    density: bool,
    algorithm: str,
    out: Optional[_Out],
) -> Tuple[Tensor, List[Tensor]]:
    check_inputs(input, bins, weight)

    hist, bin_edges = _unpack_out(input, out)

    prepare_out(input, bin_counts_of(bins), hist, bin_edges)
    copy_bin_edges(bins, bin_edges)

    reshaped = _reshape_2d(input)

    # Caller edges are only binned arithmetically on request
    if algorithm == "linear":
        histogramdd_linear_accumulate(reshaped, weight, hist, bin_edges)
    else:
        histogramdd_accumulate(reshaped, weight, hist, bin_edges)

    if density:
        normalize_density(hist, bin_edges)

    return hist, bin_edges


@torch.no_grad()
def _histogramdd_from_outer_bin_edges(
    input: Tensor,
    bin_ct: Sequence[int],
    outer_bin_edges: OuterBinEdges,
    weight: Optional[Tensor],
    density: bool,
    algorithm: str,
    out: Optional[_Out],
    local_search: bool = True,
) -> Tuple[Tensor, List[Tensor]]:
    hist, bin_edges = _unpack_out(input, out)

    prepare_out(input, bin_ct, hist, bin_edges)
    linspace_bin_edges(outer_bin_edges, bin_ct, bin_edges)

    reshaped = _reshape_2d(input)

    # Evenly spaced by construction
    if algorithm == "search":
        histogramdd_accumulate(reshaped, weight, hist, bin_edges)
    else:
        histogramdd_linear_accumulate(
            reshaped, weight, hist, bin_edges, local_search
        )

    if density:
        normalize_density(hist, bin_edges)

    return hist, bin_edges


def _histogramdd_from_bin_cts(
    input: Tensor,
    bin_ct: Sequence[int],
    range: Optional[Sequence[float]],
    weight: Optional[Tensor],
    density: bool,
    algorithm: str,
    out: Optional[_Out],
) -> Tuple[Tensor, List[Tensor]]:
    check_bin_counts(input, bin_ct)

    outer_bin_edges = select_outer_bin_edges(_reshape_2d(input), range)

    return _histogramdd_from_outer_bin_edges(
        input,
        bin_ct,
        outer_bin_edges,
        weight,
        density,
        algorithm,
        out,
    )


def _histogramdd(
    input: Tensor,
    bins: _Bins,
    range: Optional[Sequence[float]],
    weight: Optional[Tensor],
    density: bool,
    algorithm: str,
    out: Optional[_Out],
) -> Tuple[Tensor, List[Tensor]]:
    check_algorithm(algorithm)
    check_samples(input, weight)

    _warn_if_requires_grad(input, weight)

    bins = _expand_bins(input, bins)

    if bins and isinstance(bins[0], Tensor):
        if range is not None:
            raise InvalidArgumentError(
                "torchhistogram.histogramdd: range cannot be combined with "
                "explicit bin edges"
            )

        return _histogramdd_from_bin_tensors(
            input, bins, weight, density, algorithm, out
        )

    return _histogramdd_from_bin_cts(
        input, bins, range, weight, density, algorithm, out
    )


def histogramdd(
    input: Tensor,
    bins: _Bins = 10,
    *,
    range: Optional[Sequence[float]] = None,
    weight: Optional[Tensor] = None,
    density: bool = False,
    algorithm: str = "auto",
    out: Optional[_Out] = None,
) -> HistogramDDResult:
    r"""Compute an N-dimensional histogram of the points in a tensor.

    The innermost dimension of ``input`` holds the ``N`` coordinates of a
    point; all other dimensions are flattened, so ``input`` is read as ``M``
    points of shape ``(M, N)``.

    Mathematical Definition
    -----------------------
    With edges :math:`e_{d,0} \le \ldots \le e_{d,K_d}` in every dimension
    :math:`d`, the histogram is

    .. math::
        h_{i_0 \ldots i_{N-1}} = \sum_{j=1}^{M} w_j \prod_{d=0}^{N-1}
        \mathbf{1}_{[e_{d,i_d}, e_{d,i_d+1})}(x_{j,d})

    where the last bin of every dimension is closed on both sides and
    :math:`w_j = 1` without ``weight``. With ``density=True`` each cell is
    divided by :math:`\sum h` times the volume of its bin, so the histogram
    integrates to 1.

    Parameters
    ----------
    input : Tensor
        Points, shape ``(..., N)`` with at least two dimensions. Must be
        ``float32`` or ``float64``.
    bins : int, sequence of int or sequence of Tensor, optional
        - ``int``: number of equal-width bins in every dimension.
        - sequence of ``N`` ints: number of equal-width bins per dimension.
        - sequence of ``N`` Tensors: non-decreasing bin edges per dimension,
          including the rightmost edge.

        Default: 10.
    range : sequence of float, optional
        ``2 * N`` numbers giving the leftmost and rightmost edge of every
        dimension, ``(min_0, max_0, min_1, max_1, ...)``. Only valid with bin
        counts. If not provided, the per-dimension minimum and maximum of
        ``input`` are used. Default: ``None``.
    weight : Tensor, optional
        Weight of every point, shape ``input.shape[:-1]``. Default: ``None``.
    density : bool, optional
        If ``True``, return the probability density over the bins instead
        of the counts. Default: ``False``.
    algorithm : {"auto", "search", "linear"}, optional
        How bins are located.

        - ``"auto"`` (default): arithmetic for bin counts, search for
          explicit edges.
        - ``"search"``: binary search over the edges.
        - ``"linear"``: O(1) arithmetic; only correct for evenly spaced
          edges.
    out : tuple of (Tensor, sequence of Tensor), optional
        Tensors ``(hist, bin_edges)`` to write the result into. They are
        resized to the result shape.

    Returns
    -------
    HistogramDDResult
        ``hist`` of shape ``(K_0, ..., K_{N-1})`` and ``bin_edges``, a tuple
        of ``N`` tensors of shape ``(K_d + 1,)``.

    Raises
    ------
    InvalidArgumentError
        If shapes, dtypes, bin counts, edges or ``range`` are invalid.
    DomainError
        If the inferred or given range is not finite or inverted.

    Examples
    --------
    >>> x = torch.tensor([[0.0, 0.0], [1.0, 1.0], [1.0, 0.0]])
    >>> hist, bin_edges = torchhistogram.histogramdd(x, bins=[2, 2])
    >>> hist
    tensor([[1., 0.],
            [1., 1.]])
    >>> bin_edges
    (tensor([0.0000, 0.5000, 1.0000]), tensor([0.0000, 0.5000, 1.0000]))

    Explicit, non-uniform edges:

    >>> edges = [torch.tensor([0.0, 0.1, 1.0]), torch.tensor([0.0, 1.0])]
    >>> torchhistogram.histogramdd(x, bins=edges).hist
    tensor([[1.],
            [2.]])

    Notes
    -----
    - A point is dropped if any of its coordinates lies outside the outer
      edges of its dimension.
    - An empty range (min equal to max) is widened by 0.5 on each side; an
      empty ``input`` without ``range`` uses ``(0, 1)``.
    - If every weight of the accepted points sums to zero, ``density=True``
      returns the histogram unchanged instead of NaN.

    See Also
    --------
    histogram : One-dimensional histogram.
    numpy.histogramdd : NumPy's N-dimensional histogram.
    """
    hist, bin_edges = _histogramdd(
        input, bins, range, weight, density, algorithm, out
    )

    return HistogramDDResult(hist, tuple(bin_edges))


def histogramdd_bin_edges(
    input: Tensor,
    bins: Union[int, Sequence[int]] = 10,
    *,
    range: Optional[Sequence[float]] = None,
) -> Tuple[Tensor, ...]:
    """Compute the bin edges ``histogramdd`` would use for bin counts.

    Parameters
    ----------
    input : Tensor
        Points, shape ``(..., N)``.
    bins : int or sequence of int, optional
        Number of equal-width bins, for every dimension or per dimension.
    range : sequence of float, optional
        ``2 * N`` outer edges, see ``histogramdd``.

    Returns
    -------
    tuple of Tensor
        ``N`` edge tensors of shape ``(K_d + 1,)``.

    Examples
    --------
    >>> x = torch.tensor([[0.0, 10.0], [4.0, 20.0]])
    >>> torchhistogram.histogramdd_bin_edges(x, bins=[2, 1])
    (tensor([0., 2., 4.]), tensor([10., 20.]))
    """
    check_samples(input, None)

    bin_ct = _expand_bins(input, bins)
    check_bin_counts(input, bin_ct)

    outer_bin_edges = select_outer_bin_edges(_reshape_2d(input), range)

    bin_edges = allocate_bin_edges(input)
    linspace_bin_edges(outer_bin_edges, bin_ct, bin_edges)

    return tuple(bin_edges)
