"""Tests for BatchedTrilinearInterpolator."""

import math
import unittest

import numpy as np
import torch

from trilattice.core.access import ConstantAccess, MirroredAccess, PeriodicAccess
from trilattice.core.interpolation import BatchedTrilinearInterpolator, TrilinearInterpolator
from trilattice.lattice import Lattice
from trilattice.region import BoundingRegion
from tests.test_utils import TestCaseWithFullStackTrace, composite_field, linear_field


class TestBatchedTrilinearInterpolator(TestCaseWithFullStackTrace):
    """Test cases for the vectorized interpolator."""

    def setUp(self):
        torch.manual_seed(42)
        self.region = BoundingRegion([-3.0, -4.0, -5.0], [4.0, 5.0, 9.0])
        self.lattice = Lattice.from_function(self.region, (5, 6, 7), composite_field)

    def assertMatchesScalar(self, access, points):
        scalar = TrilinearInterpolator(self.region, self.lattice, access)
        batched = BatchedTrilinearInterpolator(self.region, self.lattice, access)

        values = batched.evaluate(points)
        self.assertEqual(tuple(values.shape), tuple(points.shape[:-1]))

        expected = [scalar.compute(p) for p in points.reshape(-1, 3).tolist()]
        np.testing.assert_allclose(values.reshape(-1).numpy(), expected, rtol=1e-12, atol=1e-12)

    def test_initialization(self):
        batched = BatchedTrilinearInterpolator(self.region, self.lattice)
        self.assertEqual(batched.dtype, torch.float64)
        self.assertEqual(batched.device, torch.device("cpu"))
        self.assertEqual(tuple(batched.samples.shape), (5 * 6 * 7,))

        with self.assertRaises(ValueError):
            BatchedTrilinearInterpolator(self.region, Lattice(5, 1, 7))

    def test_invalid_point_shape(self):
        batched = BatchedTrilinearInterpolator(self.region, self.lattice)
        with self.assertRaises(ValueError):
            batched.evaluate(torch.zeros(4, 2, dtype=torch.float64))

    def test_matches_scalar_inside_region(self):
        low = torch.tensor(self.region.low.tolist(), dtype=torch.float64)
        size = torch.tensor(self.region.size.tolist(), dtype=torch.float64)
        points = low + torch.rand(4, 25, 3, dtype=torch.float64) * size
        self.assertMatchesScalar("clamped", points)

    def test_matches_scalar_at_nodes(self):
        scalar = TrilinearInterpolator(self.region, self.lattice)
        nodes = torch.tensor(
            [scalar.node_coordinate(i, j, k).tolist() for i in range(5) for j in range(6) for k in range(7)],
            dtype=torch.float64,
        )
        values = BatchedTrilinearInterpolator(self.region, self.lattice)(nodes)
        np.testing.assert_allclose(values.numpy(), self.lattice.data, atol=1e-8)

    def test_matches_scalar_outside_region(self):
        """Every strategy agrees with the scalar path beyond the region."""
        low = torch.tensor(self.region.low.tolist(), dtype=torch.float64)
        size = torch.tensor(self.region.size.tolist(), dtype=torch.float64)
        points = low - size + torch.rand(200, 3, dtype=torch.float64) * 3 * size
        for access in ("clamped", PeriodicAccess, MirroredAccess):
            self.assertMatchesScalar(access, points)

    def test_constant_access(self):
        batched = BatchedTrilinearInterpolator(self.region, self.lattice, ConstantAccess)
        points = torch.tensor([self.region.center.tolist(), (self.region.high + 0.1).tolist()], dtype=torch.float64)
        values = batched.evaluate(points)
        self.assertFalse(math.isnan(values[0].item()))
        self.assertTrue(math.isnan(values[1].item()))

        filled = BatchedTrilinearInterpolator(self.region, self.lattice, "constant", fill_value=3.0)
        scalar = TrilinearInterpolator(self.region, self.lattice, "constant", fill_value=3.0)
        self.assertAlmostEqual(filled(points)[1].item(), scalar.compute(points[1].tolist()))

    def test_periodic_nodes_exact(self):
        region = BoundingRegion([3.0, 4.0, 5.0])
        lattice = Lattice.from_function(region, (15, 16, 17), linear_field)
        scalar = TrilinearInterpolator(region, lattice, PeriodicAccess)
        batched = BatchedTrilinearInterpolator(region, lattice, PeriodicAccess)

        nodes = np.array([
            scalar.node_coordinate(i, j, k) for i in range(15) for j in range(16) for k in range(17)
        ])
        np.testing.assert_allclose(batched(nodes).numpy(), lattice.data, atol=1e-8)

    def test_nan_point_matches_scalar(self):
        scalar = TrilinearInterpolator(self.region, self.lattice)
        batched = BatchedTrilinearInterpolator(self.region, self.lattice)
        points = torch.tensor([[float("nan"), 0.0, 0.0], [0.0, 1.0, 2.0]], dtype=torch.float64)

        values = batched(points)
        self.assertTrue(math.isnan(values[0].item()))
        self.assertTrue(math.isnan(scalar.compute(points[0].tolist())))
        self.assertAlmostEqual(values[1].item(), scalar.compute(0.0, 1.0, 2.0), places=12)

    def test_numpy_points(self):
        batched = BatchedTrilinearInterpolator(self.region, self.lattice)
        points = np.array([[0.0, 0.0, 0.0], [1.0, 2.0, 3.0]])
        values = batched.evaluate(points)
        self.assertIsInstance(values, torch.Tensor)
        self.assertEqual(tuple(values.shape), (2,))

    def test_refresh_picks_up_writes(self):
        batched = BatchedTrilinearInterpolator(self.region, self.lattice)
        point = torch.tensor([[0.5, 0.5, 0.5]], dtype=torch.float64)
        before = batched(point).item()

        self.lattice.to_array()[:] += 1.0
        self.assertEqual(batched(point).item(), before)

        batched.refresh()
        self.assertAlmostEqual(batched(point).item(), before + 1.0, places=10)

    def test_gradient_flow(self):
        """Autograd reaches the query points through the interpolation weights."""
        region = BoundingRegion([-1.0, 0.0, 2.0], [1.0, 3.0, 4.0])
        lattice = Lattice.from_function(region, (4, 5, 6), lambda p: p[0] + 2 * p[1] + 3 * p[2])
        batched = BatchedTrilinearInterpolator(region, lattice)

        points = torch.tensor([[0.1, 1.3, 2.7], [-0.6, 2.2, 3.1]], dtype=torch.float64, requires_grad=True)
        batched(points).sum().backward()

        self.assertIsNotNone(points.grad)
        expected = torch.tensor([[1.0, 2.0, 3.0], [1.0, 2.0, 3.0]], dtype=torch.float64)
        self.assertTrue(torch.allclose(points.grad, expected, atol=1e-9))

    def test_float32_lattice(self):
        lattice = Lattice.from_function(self.region, (5, 6, 7), composite_field, dtype=np.float32)
        batched = BatchedTrilinearInterpolator(self.region, lattice)
        self.assertEqual(batched.dtype, torch.float32)

        values = batched(torch.tensor([[0.0, 0.0, 0.0]]))
        scalar = TrilinearInterpolator(self.region, lattice).compute(0.0, 0.0, 0.0)
        self.assertAlmostEqual(values.item(), scalar, places=4)


if __name__ == '__main__':
    unittest.main()
