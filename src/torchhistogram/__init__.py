"""torchhistogram: N-dimensional histograms of PyTorch tensors.

The entry points share a single pipeline: validate the arguments, select the
outer bin edges, materialize the edges of every dimension, resize the
outputs, accumulate the samples and, if requested, normalize into a density.
"""

from ._accumulate import (
    histogramdd_accumulate,
    histogramdd_linear_accumulate,
)
from ._exceptions import (
    DomainError,
    HistogramError,
    InvalidArgumentError,
    NotDifferentiableWarning,
    OutputResizeWarning,
)
from ._histc import histc
from ._histogram import histogram
from ._histogramdd import histogramdd, histogramdd_bin_edges
from ._outer_bin_edges import (
    OuterBinEdges,
    histc_select_outer_bin_edges,
    select_outer_bin_edges,
)
from ._result import HistogramDDResult, HistogramResult

__all__ = [
    "DomainError",
    "HistogramDDResult",
    "HistogramError",
    "HistogramResult",
    "InvalidArgumentError",
    "NotDifferentiableWarning",
    "OuterBinEdges",
    "OutputResizeWarning",
    "histc",
    "histc_select_outer_bin_edges",
    "histogram",
    "histogramdd",
    "histogramdd_accumulate",
    "histogramdd_bin_edges",
    "histogramdd_linear_accumulate",
    "select_outer_bin_edges",
]

__version__ = "0.1.0"
