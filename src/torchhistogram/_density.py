"""Normalization of a histogram into a probability density."""

from typing import Sequence

from torch import Tensor


def normalize_density(hist: Tensor, bin_edges: Sequence[Tensor]) -> Tensor:
    r"""Divide ``hist`` in place by its total and by the volume of each bin.

    .. math::
        h_{i_0 \ldots i_{N-1}} \leftarrow
        \frac{h_{i_0 \ldots i_{N-1}}}{W \prod_d (e_{d,i_d+1} - e_{d,i_d})}

    where :math:`W` is the sum of all cells. If :math:`W = 0` the histogram
    is returned unchanged instead of being filled with NaN.
    """
    total = hist.sum()

    if total.item() == 0:
        return hist

    hist.div_(total)

    n = len(bin_edges)

    for dim, edges in enumerate(bin_edges):
        shape = [1] * n
        shape[dim] = edges.numel() - 1
        hist.div_(edges.diff().reshape(shape))

    return hist
