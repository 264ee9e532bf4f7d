"""One-dimensional histogram."""

from typing import Optional, Tuple, Union

from torch import Tensor

from ._histogramdd import _histogramdd
from ._result import HistogramResult


def histogram(
    input: Tensor,
    bins: Union[int, Tensor] = 100,
    *,
    range: Optional[Tuple[float, float]] = None,
    weight: Optional[Tensor] = None,
    density: bool = False,
    algorithm: str = "auto",
    out: Optional[Tuple[Tensor, Tensor]] = None,
) -> HistogramResult:
    r"""Compute a histogram of the values in a tensor.

    ``input`` is flattened and binned as ``numel()`` one-dimensional points.

    Mathematical Definition
    -----------------------
    For values :math:`x_1, \ldots, x_n` and edges :math:`e_0, \ldots, e_B`:

    .. math::
        h_i = \sum_{j=1}^{n} w_j \cdot \mathbf{1}_{[e_i, e_{i+1})}(x_j)

    with the last bin :math:`[e_{B-1}, e_B]` closed and :math:`w_j = 1`
    without ``weight``. With ``density=True``:

    .. math::
        h_i \leftarrow \frac{h_i}{(e_{i+1} - e_i) \sum_k h_k}

    Parameters
    ----------
    input : Tensor
        Input tensor of any shape, ``float32`` or ``float64``.
    bins : int or Tensor, optional
        If ``int``, the number of equal-width bins. If ``Tensor``, the
        non-decreasing bin edges including the rightmost edge. Default: 100.
    range : tuple of float, optional
        Leftmost and rightmost edge for equal-width bins. If not provided,
        ``(input.min(), input.max())``. Values outside are ignored.
    weight : Tensor, optional
        Weight of every value, same number of elements as ``input``.
    density : bool, optional
        If ``True``, return the probability density over the bins.
        Default: ``False``.
    algorithm : {"auto", "search", "linear"}, optional
        How bins are located, see ``histogramdd``. Default: ``"auto"``.
    out : tuple of Tensor, optional
        Tensors ``(hist, bin_edges)`` to write the result into.

    Returns
    -------
    HistogramResult
        ``hist`` of shape ``(bins,)`` and ``bin_edges`` of shape
        ``(bins + 1,)``.

    Examples
    --------
    >>> x = torch.tensor([1.0, 2.0, 1.0])
    >>> w = torch.tensor([1.0, 2.0, 4.0])
    >>> result = torchhistogram.histogram(
    ...     x, bins=4, range=(0.0, 3.0), weight=w
    ... )
    >>> result.hist
    tensor([0., 5., 2., 0.])
    >>> result.bin_edges
    tensor([0.0000, 0.7500, 1.5000, 2.2500, 3.0000])

    A single value is widened into a range of width one:

    >>> torchhistogram.histogram(torch.tensor([5.0]), bins=1)
    HistogramResult(hist=tensor([1.]), bin_edges=tensor([4.5000, 5.5000]))
    """
    if not isinstance(input, Tensor):
        raise TypeError(
            f"input must be a Tensor, got {type(input).__name__}"
        )

    if weight is not None and not isinstance(weight, Tensor):
        raise TypeError(
            f"weight must be a Tensor, got {type(weight).__name__}"
        )

    reshaped = input.reshape(input.numel(), 1)
    reshaped_weight = (
        weight.reshape(weight.numel()) if weight is not None else None
    )
    reshaped_out = (out[0], [out[1]]) if out is not None else None

    hist, bin_edges = _histogramdd(
        reshaped,
        [bins],
        list(range) if range is not None else None,
        reshaped_weight,
        density,
        algorithm,
        reshaped_out,
    )

    return HistogramResult(hist, bin_edges[0])
