"""Tests for torchhistogram.histogramdd."""

import math

import hypothesis
import hypothesis.strategies
import pytest
import torch

import torchhistogram
from torchhistogram.testing import (
    bin_counts,
    sample_sets,
    sample_shapes,
    tensors,
)


class TestHistogramDDBasic:
    """Basic functionality tests."""

    def test_shape(self):
        """Test histogram and edge shapes follow the bin counts."""
        x = torch.randn(1000, 3)
        hist, bin_edges = torchhistogram.histogramdd(x, bins=[2, 3, 4])
        assert hist.shape == (2, 3, 4)
        assert [edges.shape for edges in bin_edges] == [(3,), (4,), (5,)]

    def test_int_bins_apply_to_every_dimension(self):
        """Test a single bin count is used for every dimension."""
        x = torch.randn(100, 3)
        hist, bin_edges = torchhistogram.histogramdd(x, bins=4)
        assert hist.shape == (4, 4, 4)
        assert len(bin_edges) == 3

    def test_counts_sum(self):
        """Test every point is counted when edges come from the data."""
        x = torch.randn(1000, 2)
        hist, _ = torchhistogram.histogramdd(x, bins=[5, 7])
        assert hist.sum().item() == 1000

    def test_result_fields(self):
        """Test the result is a named tuple."""
        x = torch.randn(10, 2)
        result = torchhistogram.histogramdd(x, bins=[2, 2])
        assert isinstance(result, torchhistogram.HistogramDDResult)
        assert result.hist is result[0]
        assert isinstance(result.bin_edges, tuple)

    def test_known_counts(self):
        """Test counts on a small grid."""
        x = torch.tensor([[0.0, 0.0], [1.0, 1.0], [1.0, 0.0]])
        hist, bin_edges = torchhistogram.histogramdd(x, bins=[2, 2])
        torch.testing.assert_close(
            hist, torch.tensor([[1.0, 0.0], [1.0, 1.0]])
        )
        torch.testing.assert_close(
            bin_edges[0], torch.tensor([0.0, 0.5, 1.0])
        )

    def test_higher_rank_input_is_flattened(self):
        """Test all but the innermost dimension are flattened."""
        x = torch.randn(4, 5, 2)
        hist, _ = torchhistogram.histogramdd(x, bins=[3, 3])
        assert hist.shape == (3, 3)
        assert hist.sum().item() == 20


class TestHistogramDDEdges:
    """Tests for explicit bin edges."""

    def test_non_uniform_edges(self):
        """Test binning against non-uniform edges."""
        x = torch.tensor([[0.0, 0.0], [1.0, 1.0], [1.0, 0.0]])
        edges = [torch.tensor([0.0, 0.1, 1.0]), torch.tensor([0.0, 1.0])]
        hist, bin_edges = torchhistogram.histogramdd(x, bins=edges)
        torch.testing.assert_close(hist, torch.tensor([[1.0], [2.0]]))
        for returned, given in zip(bin_edges, edges):
            torch.testing.assert_close(returned, given)

    def test_returned_edges_are_copies(self):
        """Test caller edges are copied, not aliased."""
        x = torch.randn(10, 1)
        edges = torch.tensor([-10.0, 0.0, 10.0])
        _, bin_edges = torchhistogram.histogramdd(x, bins=[edges])
        assert bin_edges[0] is not edges
        assert bin_edges[0].data_ptr() != edges.data_ptr()

    def test_last_edge_is_inclusive(self):
        """Test a point on the last edge of every dimension is counted."""
        x = torch.tensor([[2.0, 3.0]])
        edges = [torch.tensor([0.0, 1.0, 2.0]), torch.tensor([0.0, 3.0])]
        hist, _ = torchhistogram.histogramdd(x, bins=edges)
        torch.testing.assert_close(hist, torch.tensor([[0.0], [1.0]]))

    def test_inner_edge_is_left_closed(self):
        """Test a point on an inner edge falls into the bin to its right."""
        x = torch.tensor([[1.0]])
        edges = [torch.tensor([0.0, 1.0, 2.0])]
        hist, _ = torchhistogram.histogramdd(x, bins=edges)
        torch.testing.assert_close(hist, torch.tensor([0.0, 1.0]))

    def test_point_outside_any_dimension_is_dropped(self):
        """Test a point is dropped if one coordinate is out of range."""
        x = torch.tensor([[0.5, 0.5], [0.5, 1.5], [-0.5, 0.5]])
        edges = [torch.tensor([0.0, 1.0]), torch.tensor([0.0, 1.0])]
        hist, _ = torchhistogram.histogramdd(x, bins=edges)
        torch.testing.assert_close(hist, torch.tensor([[1.0]]))

    def test_nan_point_is_dropped(self):
        """Test a point with a NaN coordinate is not counted."""
        x = torch.tensor([[0.5, float("nan")], [0.5, 0.5]])
        edges = [torch.tensor([0.0, 1.0]), torch.tensor([0.0, 1.0])]
        hist, _ = torchhistogram.histogramdd(x, bins=edges)
        torch.testing.assert_close(hist, torch.tensor([[1.0]]))

    def test_linear_algorithm_on_uniform_edges(self):
        """Test the linear algorithm matches search on uniform edges."""
        x = torch.rand(500, 2, dtype=torch.float64)
        edges = [
            torch.linspace(0.0, 1.0, 6, dtype=torch.float64),
            torch.linspace(0.0, 1.0, 4, dtype=torch.float64),
        ]
        searched, _ = torchhistogram.histogramdd(
            x, bins=edges, algorithm="search"
        )
        linear, _ = torchhistogram.histogramdd(
            x, bins=edges, algorithm="linear"
        )
        torch.testing.assert_close(searched, linear)

    def test_range_with_edges_raises(self):
        """Test range cannot be given with explicit edges."""
        x = torch.randn(10, 1)
        with pytest.raises(torchhistogram.InvalidArgumentError, match="range"):
            torchhistogram.histogramdd(
                x, bins=[torch.tensor([0.0, 1.0])], range=[0.0, 1.0]
            )


class TestHistogramDDRange:
    """Tests for the range parameter and inferred ranges."""

    def test_explicit_range(self):
        """Test the outer edges follow range."""
        x = torch.randn(100, 2)
        _, bin_edges = torchhistogram.histogramdd(
            x, bins=[4, 2], range=[-3.0, 3.0, 0.0, 1.0]
        )
        torch.testing.assert_close(
            bin_edges[0], torch.tensor([-3.0, -1.5, 0.0, 1.5, 3.0])
        )
        torch.testing.assert_close(bin_edges[1], torch.tensor([0.0, 0.5, 1.0]))

    def test_degenerate_range_is_widened(self):
        """Test a single point yields edges of width one around it."""
        x = torch.tensor([[5.0]])
        hist, bin_edges = torchhistogram.histogramdd(x, bins=[1])
        torch.testing.assert_close(bin_edges[0], torch.tensor([4.5, 5.5]))
        torch.testing.assert_close(hist, torch.tensor([1.0]))

    def test_empty_input_uses_unit_range(self):
        """Test an empty input defaults to (0, 1)."""
        x = torch.empty(0, 1)
        hist, bin_edges = torchhistogram.histogramdd(x, bins=[1])
        torch.testing.assert_close(bin_edges[0], torch.tensor([0.0, 1.0]))
        torch.testing.assert_close(hist, torch.tensor([0.0]))

    def test_wrong_range_length_raises(self):
        """Test range must have 2 * N elements."""
        x = torch.randn(10, 2)
        with pytest.raises(
            torchhistogram.InvalidArgumentError, match="4 elements"
        ):
            torchhistogram.histogramdd(x, bins=[2, 2], range=[0.0, 1.0])

    def test_inverted_range_raises(self):
        """Test min above max is a domain error."""
        x = torch.randn(10, 1)
        with pytest.raises(torchhistogram.DomainError, match="exceed"):
            torchhistogram.histogramdd(x, bins=[2], range=[1.0, 0.0])

    def test_nan_input_without_range_raises(self):
        """Test a NaN sample makes the inferred range non-finite."""
        x = torch.tensor([[0.0], [float("nan")]])
        with pytest.raises(torchhistogram.DomainError, match="not finite"):
            torchhistogram.histogramdd(x, bins=[2])


class TestHistogramDDWeights:
    """Tests for the weight parameter."""

    def test_weight_scaling(self):
        """Test each point contributes its weight."""
        x = torch.tensor([[0.0], [0.0], [1.0]])
        weight = torch.tensor([2.0, 3.0, 5.0])
        hist, _ = torchhistogram.histogramdd(
            x, bins=[2], range=[0.0, 1.0], weight=weight
        )
        torch.testing.assert_close(hist, torch.tensor([5.0, 5.0]))

    def test_weight_for_higher_rank_input(self):
        """Test weight shares the input shape without its last dimension."""
        x = torch.rand(3, 4, 2)
        weight = torch.full((3, 4), 0.5)
        hist, _ = torchhistogram.histogramdd(
            x, bins=[2, 2], range=[0.0, 1.0, 0.0, 1.0], weight=weight
        )
        assert hist.sum().item() == pytest.approx(6.0)

    def test_scalar_weight_for_single_point(self):
        """Test a 0-d weight is accepted for a single point."""
        x = torch.tensor([[0.25]])
        hist, _ = torchhistogram.histogramdd(
            x, bins=[2], range=[0.0, 1.0], weight=torch.tensor(4.0)
        )
        torch.testing.assert_close(hist, torch.tensor([4.0, 0.0]))

    def test_wrong_weight_shape_raises(self):
        """Test a weight of the wrong shape is rejected."""
        x = torch.randn(10, 2)
        with pytest.raises(torchhistogram.InvalidArgumentError, match="shape"):
            torchhistogram.histogramdd(
                x, bins=[2, 2], weight=torch.ones(10, 2)
            )


class TestHistogramDDDensity:
    """Tests for the density parameter."""

    def test_density_integrates_to_one(self):
        """Test the density times the bin volumes sums to one."""
        x = torch.randn(5000, 2, dtype=torch.float64)
        hist, bin_edges = torchhistogram.histogramdd(
            x, bins=[10, 20], density=True
        )
        volume = torch.outer(bin_edges[0].diff(), bin_edges[1].diff())
        assert (hist * volume).sum().item() == pytest.approx(1.0)

    def test_density_non_uniform_edges(self):
        """Test density divides by the width of each bin."""
        x = torch.tensor([[0.5], [1.5], [1.5], [2.5]])
        hist, _ = torchhistogram.histogramdd(
            x, bins=[torch.tensor([0.0, 1.0, 3.0])], density=True
        )
        torch.testing.assert_close(hist, torch.tensor([0.25, 0.375]))

    def test_density_without_accepted_points(self):
        """Test zero total weight leaves zeros instead of NaN."""
        x = torch.tensor([[5.0], [6.0]])
        hist, _ = torchhistogram.histogramdd(
            x, bins=[2], range=[0.0, 1.0], density=True
        )
        torch.testing.assert_close(hist, torch.zeros(2))


class TestHistogramDDOut:
    """Tests for the out parameter."""

    def test_out_is_written_in_place(self):
        """Test empty out tensors are resized and returned."""
        x = torch.rand(50, 2)
        hist = torch.empty(0)
        bin_edges = [torch.empty(0), torch.empty(0)]
        result = torchhistogram.histogramdd(
            x, bins=[3, 4], out=(hist, bin_edges)
        )
        assert result.hist is hist
        assert result.bin_edges[0] is bin_edges[0]
        assert hist.shape == (3, 4)
        assert bin_edges[1].shape == (5,)
        expected, _ = torchhistogram.histogramdd(x, bins=[3, 4])
        torch.testing.assert_close(hist, expected)

    def test_out_of_wrong_shape_warns(self):
        """Test resizing a non-empty out tensor warns."""
        x = torch.rand(50, 1)
        hist = torch.zeros(7)
        with pytest.warns(torchhistogram.OutputResizeWarning):
            torchhistogram.histogramdd(
                x, bins=[3], out=(hist, [torch.empty(0)])
            )
        assert hist.shape == (3,)

    def test_out_of_wrong_dtype_raises(self):
        """Test out tensors must share the input dtype."""
        x = torch.rand(50, 1)
        with pytest.raises(torchhistogram.InvalidArgumentError, match="dtype"):
            torchhistogram.histogramdd(
                x,
                bins=[3],
                out=(torch.empty(0, dtype=torch.float64), [torch.empty(0)]),
            )


class TestHistogramDDErrors:
    """Tests for invalid arguments."""

    def test_one_dimensional_input_raises(self):
        """Test input must have at least two dimensions."""
        with pytest.raises(
            torchhistogram.InvalidArgumentError, match="at least 2"
        ):
            torchhistogram.histogramdd(torch.randn(10), bins=[2])

    def test_wrong_number_of_bin_counts_raises(self):
        """Test one bin count per dimension is required."""
        with pytest.raises(torchhistogram.InvalidArgumentError):
            torchhistogram.histogramdd(torch.randn(10, 2), bins=[2])

    def test_non_positive_bin_count_raises(self):
        """Test bin counts must be positive."""
        with pytest.raises(torchhistogram.InvalidArgumentError, match="> 0"):
            torchhistogram.histogramdd(torch.randn(10, 2), bins=[2, 0])

    def test_integer_input_raises(self):
        """Test integer inputs are not supported."""
        with pytest.raises(torchhistogram.InvalidArgumentError, match="dtype"):
            torchhistogram.histogramdd(torch.ones(10, 2, dtype=torch.int64))

    def test_unknown_algorithm_raises(self):
        """Test algorithm must be a known name."""
        with pytest.raises(
            torchhistogram.InvalidArgumentError, match="algorithm"
        ):
            torchhistogram.histogramdd(
                torch.randn(10, 1), bins=[2], algorithm="fast"
            )

    def test_tensor_bins_raises(self):
        """Test a bare tensor is not a valid bins argument."""
        with pytest.raises(TypeError):
            torchhistogram.histogramdd(
                torch.randn(10, 1), bins=torch.tensor([0.0, 1.0])
            )

    def test_errors_are_value_errors(self):
        """Test histogram errors derive from ValueError."""
        with pytest.raises(ValueError):
            torchhistogram.histogramdd(torch.randn(10, 2), bins=[2])


class TestHistogramDDDtypes:
    """Tests for different dtypes."""

    @pytest.mark.parametrize("dtype", [torch.float32, torch.float64])
    def test_dtype_support(self, dtype):
        """Test float32 and float64 support."""
        x = torch.randn(100, 2, dtype=dtype)
        hist, bin_edges = torchhistogram.histogramdd(x, bins=[3, 3])
        assert hist.dtype == dtype
        assert all(edges.dtype == dtype for edges in bin_edges)


class TestHistogramDDDevice:
    """Tests for device placement."""

    def test_cpu_device(self):
        """Test CPU computation."""
        x = torch.randn(100, 2, device="cpu")
        hist, bin_edges = torchhistogram.histogramdd(x, bins=[3, 3])
        assert hist.device.type == "cpu"
        assert bin_edges[0].device.type == "cpu"

    @pytest.mark.skipif(
        not torch.cuda.is_available(), reason="CUDA not available"
    )
    def test_cuda_device(self):
        """Test CUDA computation matches CPU."""
        x = torch.randn(100, 2, dtype=torch.float64)
        hist, _ = torchhistogram.histogramdd(x.cuda(), bins=[3, 3])
        expected, _ = torchhistogram.histogramdd(x, bins=[3, 3])
        assert hist.device.type == "cuda"
        torch.testing.assert_close(hist.cpu(), expected)


class TestHistogramDDNotDifferentiable:
    """Tests confirming histogramdd is not differentiable."""

    def test_requires_grad_warns(self):
        """Test the result is detached and a warning is emitted."""
        x = torch.randn(100, 2, requires_grad=True)
        with pytest.warns(torchhistogram.NotDifferentiableWarning):
            hist, _ = torchhistogram.histogramdd(x, bins=[3, 3])
        assert not hist.requires_grad


class TestHistogramDDBinEdges:
    """Tests for torchhistogram.histogramdd_bin_edges."""

    def test_matches_histogramdd(self):
        """Test the edges equal those returned by histogramdd."""
        x = torch.randn(100, 2)
        bin_edges = torchhistogram.histogramdd_bin_edges(x, bins=[3, 5])
        _, expected = torchhistogram.histogramdd(x, bins=[3, 5])
        for edges, other in zip(bin_edges, expected):
            torch.testing.assert_close(edges, other)

    def test_known_edges(self):
        """Test edges span the per-dimension extrema."""
        x = torch.tensor([[0.0, 10.0], [4.0, 20.0]])
        bin_edges = torchhistogram.histogramdd_bin_edges(x, bins=[2, 1])
        torch.testing.assert_close(bin_edges[0], torch.tensor([0.0, 2.0, 4.0]))
        torch.testing.assert_close(bin_edges[1], torch.tensor([10.0, 20.0]))


class TestHistogramDDProperties:
    """Property-based tests."""

    # Integer coordinates keep the bin widths far from underflow
    coarse = hypothesis.strategies.integers(-10, 10).map(float)

    @hypothesis.given(
        samples=sample_sets(), data=hypothesis.strategies.data()
    )
    @hypothesis.settings(deadline=None, max_examples=50)
    def test_shape_and_conservation(self, samples, data):
        """Test shapes follow the bin counts and every point is counted."""
        counts = data.draw(bin_counts(samples.size(-1)))
        hist, bin_edges = torchhistogram.histogramdd(samples, bins=counts)
        assert tuple(hist.shape) == tuple(counts)
        assert [edges.numel() for edges in bin_edges] == [
            count + 1 for count in counts
        ]
        assert hist.sum().item() == samples.size(0)

    @hypothesis.given(
        shape=sample_shapes(max_batch_dims=3, max_side=5),
        data=hypothesis.strategies.data(),
    )
    @hypothesis.settings(deadline=None, max_examples=50)
    def test_batch_dimensions_are_flattened(self, shape, data):
        """Test every point of a batched input is counted once."""
        x = data.draw(tensors(shape=shape))
        hist, _ = torchhistogram.histogramdd(x, bins=3)
        assert tuple(hist.shape) == (3,) * shape[-1]
        assert hist.sum().item() == math.prod(shape[:-1])

    @hypothesis.given(
        samples=sample_sets(min_points=1, elements=coarse),
        data=hypothesis.strategies.data(),
    )
    @hypothesis.settings(deadline=None, max_examples=50)
    def test_search_and_linear_agree(self, samples, data):
        """Test both algorithms give identical results on uniform edges."""
        counts = data.draw(bin_counts(samples.size(-1)))
        searched, _ = torchhistogram.histogramdd(
            samples, bins=counts, algorithm="search"
        )
        linear, _ = torchhistogram.histogramdd(
            samples, bins=counts, algorithm="linear"
        )
        assert torch.equal(searched, linear)

    @hypothesis.given(
        samples=sample_sets(min_points=1, elements=coarse),
        data=hypothesis.strategies.data(),
    )
    @hypothesis.settings(deadline=None, max_examples=50)
    def test_density_integrates_to_one(self, samples, data):
        """Test densities integrate to one over the bins."""
        counts = data.draw(bin_counts(samples.size(-1)))
        hist, bin_edges = torchhistogram.histogramdd(
            samples, bins=counts, density=True
        )
        integral = hist
        for dim in reversed(range(len(bin_edges))):
            integral = (integral * bin_edges[dim].diff()).sum(-1)
        assert integral.item() == pytest.approx(1.0)


class TestHistogramDDNumPyCompatibility:
    """Tests for NumPy compatibility."""

    def test_matches_numpy_with_edges(self):
        """Test results match numpy.histogramdd for explicit edges."""
        numpy = pytest.importorskip("numpy")

        torch.manual_seed(42)
        x = torch.randn(1000, 3, dtype=torch.float64)
        edges = [
            torch.tensor([-3.0, -1.0, 0.0, 0.5, 3.0], dtype=torch.float64),
            torch.tensor([-2.0, 0.0, 2.0], dtype=torch.float64),
            torch.tensor([-1.0, 1.0], dtype=torch.float64),
        ]

        hist, _ = torchhistogram.histogramdd(x, bins=edges)
        expected, _ = numpy.histogramdd(
            x.numpy(), bins=[edges_d.numpy() for edges_d in edges]
        )

        torch.testing.assert_close(hist, torch.from_numpy(expected))

    def test_matches_numpy_with_counts(self):
        """Test results match numpy.histogramdd for bin counts."""
        numpy = pytest.importorskip("numpy")

        torch.manual_seed(42)
        x = torch.randn(1000, 2, dtype=torch.float64)
        weight = torch.rand(1000, dtype=torch.float64)

        hist, bin_edges = torchhistogram.histogramdd(
            x, bins=[6, 4], weight=weight, density=True
        )
        expected, expected_edges = numpy.histogramdd(
            x.numpy(), bins=[6, 4], weights=weight.numpy(), density=True
        )

        torch.testing.assert_close(hist, torch.from_numpy(expected))
        for edges, other in zip(bin_edges, expected_edges):
            torch.testing.assert_close(edges, torch.from_numpy(other))
