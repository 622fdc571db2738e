"""Tests for the demo's measurement helpers."""

import sys
import os
import unittest

import numpy as np

_root = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, os.path.join(_root, "src"))
sys.path.insert(0, _root)

import demo
from avl_set import OrderedSet


class TestHeightBound(unittest.TestCase):

    def test_bound_covers_minimal_avl_trees(self):
        # Fewest nodes an AVL tree of height h can hold, h = 1..6.
        sizes = np.array([1, 2, 4, 7, 12, 20])
        heights = np.arange(1, 7)
        self.assertTrue(np.all(demo.avl_height_bound(sizes) >= heights))

    def test_bound_is_increasing(self):
        bound = demo.avl_height_bound(np.arange(1, 100))
        self.assertTrue(np.all(np.diff(bound) > 0))


class TestHeightProfile(unittest.TestCase):

    def test_profile_shape_and_start(self):
        heights = demo.height_profile("ascending", 100)
        self.assertEqual(heights.shape, (100,))
        self.assertEqual(heights[0], 1)

    def test_profile_never_decreases(self):
        for order in demo.ORDERS:
            heights = demo.height_profile(order, 300)
            self.assertTrue(np.all(np.diff(heights) >= 0), order)

    def test_profile_within_bound(self):
        ns = np.arange(1, 501)
        bound = demo.avl_height_bound(ns)
        for order in demo.ORDERS:
            self.assertTrue(np.all(demo.height_profile(order, 500) <= bound), order)

    def test_unknown_order_raises(self):
        with self.assertRaises(ValueError):
            demo.height_profile("sideways", 10)


class TestTiming(unittest.TestCase):

    def test_time_operations_shapes(self):
        timings = demo.time_operations([50, 100])
        self.assertEqual(list(timings["sizes"]), [50, 100])
        for name in ["insert", "find", "lower_bound", "erase"]:
            self.assertEqual(timings[name].shape, (2,))
            self.assertTrue(np.all(timings[name] >= 0))


class TestChurnAndLayout(unittest.TestCase):

    def test_positions_survive_churn(self):
        survival = demo.churn_survival(200, 5)
        self.assertEqual(survival.shape, (5,))
        np.testing.assert_array_equal(survival, np.ones(5))

    def test_tree_layout(self):
        layout = demo.tree_layout(OrderedSet([2, 1, 3]))
        self.assertEqual(layout, [(1, 0, 1, 2), (2, 1, 0, None), (3, 2, 1, 2)])

    def test_tree_layout_empty(self):
        self.assertEqual(demo.tree_layout(OrderedSet()), [])


if __name__ == "__main__":
    unittest.main()
