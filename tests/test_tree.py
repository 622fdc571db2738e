import sys
import os
import operator
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from avl_set import tree
from avl_set.node import Node, get_height, get_balance

less = operator.lt


def _build(keys):
    root = None
    for key in keys:
        root, _ = tree.insert(root, key, less)
        root.parent = None
    return root


def _chain(keys, side):
    # Hand-built unbalanced chain hanging off one side, heights filled in.
    nodes = [Node(key) for key in keys]
    for upper, lower in zip(nodes, nodes[1:]):
        if side == "left":
            upper.link_left(lower)
        else:
            upper.link_right(lower)
    for height, node in enumerate(reversed(nodes), start=1):
        node.height = height
    return nodes


class TestNode(unittest.TestCase):
    def test_new_node_is_leaf(self):
        node = Node(5)
        self.assertEqual(node.height, 1)
        self.assertIsNone(node.parent)
        self.assertEqual(get_height(None), 0)
        self.assertEqual(get_balance(node), 0)

    def test_link_sets_parent(self):
        parent, child = Node(5), Node(3)
        parent.link_left(child)
        self.assertIs(child.parent, parent)
        self.assertTrue(child.is_left_child())
        self.assertFalse(child.is_right_child())
        parent.link_right(None)
        self.assertIsNone(parent.right)


class TestRotations(unittest.TestCase):
    def test_rotate_right(self):
        n30, n20, n10 = _chain([30, 20, 10], "left")
        top = tree.rotate_right(n30)
        self.assertIs(top, n20)
        self.assertIsNone(top.parent)
        self.assertIs(top.left, n10)
        self.assertIs(top.right, n30)
        self.assertIs(n30.parent, n20)
        self.assertEqual((n10.height, n30.height, n20.height), (1, 1, 2))

    def test_rotate_left(self):
        n10, n20, n30 = _chain([10, 20, 30], "right")
        top = tree.rotate_left(n10)
        self.assertIs(top, n20)
        self.assertIs(top.left, n10)
        self.assertIs(top.right, n30)
        self.assertIs(n10.parent, n20)
        self.assertEqual(top.height, 2)

    def test_rotation_moves_inner_grandchild(self):
        root = _build([20, 10, 30, 5, 15])
        root.left.left.link_left(Node(1))
        root.left.left.height = 2
        root.left.height = 3
        root.height = 4
        top = tree.rotate_right(root)
        self.assertEqual(top.key, 10)
        self.assertEqual(top.right.left.key, 15)
        self.assertIs(top.right.left.parent, top.right)

    def test_rebalance_left_right_case(self):
        n30 = Node(30)
        n10 = Node(10)
        n20 = Node(20)
        n30.link_left(n10)
        n10.link_right(n20)
        n10.height = 2
        top = tree.rebalance(n30)
        self.assertIs(top, n20)
        self.assertEqual(tree.pre_order(top), [20, 10, 30])
        self.assertEqual(tree.check(top, less), 3)

    def test_rebalance_leaves_balanced_node(self):
        root = _build([2, 1, 3])
        self.assertIs(tree.rebalance(root), root)

    def test_is_balanced_detects_chain(self):
        n1, _, _ = _chain([1, 2, 3], "right")
        self.assertFalse(tree.is_balanced(n1))


class TestSearch(unittest.TestCase):
    def test_search_present_and_absent(self):
        root = _build([5, 3, 8])
        self.assertEqual(tree.search(root, 8, less).key, 8)
        self.assertIsNone(tree.search(root, 4, less))
        self.assertIsNone(tree.search(None, 4, less))

    def test_raw_lower_bound_can_stop_below_key(self):
        root = _build([10, 20, 30])
        self.assertEqual(tree.lower_bound(root, 15, less).key, 10)
        self.assertEqual(tree.lower_bound(root, 25, less).key, 30)
        self.assertEqual(tree.lower_bound(root, 20, less).key, 20)

    def test_first_greater_and_last_less(self):
        root = _build([10, 20, 30])
        self.assertEqual(tree.first_greater(root, 20, less).key, 30)
        self.assertEqual(tree.first_greater(root, 15, less).key, 20)
        self.assertEqual(tree.first_greater(root, 5, less).key, 10)
        self.assertIsNone(tree.first_greater(root, 30, less))
        self.assertEqual(tree.last_less(root, 20, less).key, 10)
        self.assertEqual(tree.last_less(root, 25, less).key, 20)
        self.assertEqual(tree.last_less(root, 35, less).key, 30)
        self.assertIsNone(tree.last_less(root, 10, less))
        self.assertIsNone(tree.first_greater(None, 1, less))
        self.assertIsNone(tree.last_less(None, 1, less))

    def test_min_max(self):
        root = _build([5, 3, 8, 1, 9])
        self.assertEqual(tree.find_min(root).key, 1)
        self.assertEqual(tree.find_max(root).key, 9)

    def test_successor_and_predecessor(self):
        root = _build([5, 3, 8, 1, 4, 7, 9])
        n4 = tree.search(root, 4, less)
        self.assertEqual(tree.successor(n4).key, 5)
        self.assertEqual(tree.predecessor(n4).key, 3)
        self.assertIsNone(tree.successor(tree.find_max(root)))
        self.assertIsNone(tree.predecessor(tree.find_min(root)))


class TestInsertErase(unittest.TestCase):
    def test_insert_reports_created_node(self):
        root, created = tree.insert(None, 1, less)
        self.assertIs(root, created)
        root, created = tree.insert(root, 2, less)
        self.assertEqual(created.key, 2)
        self.assertIs(created.parent, root)

    def test_insert_duplicate_returns_same_root(self):
        root = _build([2, 1, 3])
        new_root, created = tree.insert(root, 3, less)
        self.assertIs(new_root, root)
        self.assertIsNone(created)

    def test_erase_absent_returns_same_root(self):
        root = _build([2, 1, 3])
        new_root, removed = tree.erase(root, 4, less)
        self.assertIs(new_root, root)
        self.assertIsNone(removed)

    def test_erase_two_child_node_promotes_successor_node(self):
        root = _build([5, 3, 8, 1, 4, 7, 9])
        n7 = tree.search(root, 7, less)
        new_root, removed = tree.erase(root, 5, less)
        self.assertIs(new_root, n7)
        self.assertEqual(removed.key, 5)
        self.assertIsNone(removed.left)
        self.assertIsNone(removed.right)
        self.assertIsNone(removed.parent)
        self.assertEqual(tree.check(new_root, less), 6)

    def test_erase_last_node(self):
        root = _build([1])
        new_root, removed = tree.erase(root, 1, less)
        self.assertIsNone(new_root)
        self.assertEqual(removed.key, 1)

    def test_remove_min(self):
        root = _build([5, 3, 8, 1, 4])
        root = tree.remove_min(root)
        root.parent = None
        self.assertEqual(tree.check(root, less), 4)
        self.assertEqual(tree.find_min(root).key, 3)


class TestCopyRelease(unittest.TestCase):
    def test_copy_subtree_is_structural_and_independent(self):
        root = _build([5, 3, 8, 1, 4, 7, 9])
        clone = tree.copy_subtree(root)
        self.assertIsNot(clone, root)
        self.assertEqual(tree.pre_order(clone), tree.pre_order(root))
        self.assertEqual(tree.check(clone, less), 7)
        original_nodes = {id(node) for node in tree.iter_nodes(root)}
        self.assertFalse(any(id(node) in original_nodes for node in tree.iter_nodes(clone)))

    def test_copy_subtree_clones_keys(self):
        root = _build([2, 1])
        clone = tree.copy_subtree(root, lambda key: key * 10)
        self.assertEqual(tree.pre_order(clone), [20, 10])

    def test_copy_of_empty(self):
        self.assertIsNone(tree.copy_subtree(None))

    def test_release_cuts_links(self):
        root = _build([2, 1, 3])
        left = root.left
        tree.release(root)
        self.assertIsNone(root.left)
        self.assertIsNone(root.right)
        self.assertIsNone(left.parent)
        tree.release(None)


class TestCheck(unittest.TestCase):
    def test_check_counts_nodes(self):
        self.assertEqual(tree.check(None, less), 0)
        self.assertEqual(tree.check(_build(range(20)), less), 20)

    def test_check_detects_bad_height(self):
        root = _build([2, 1, 3])
        root.height = 5
        with self.assertRaises(AssertionError):
            tree.check(root, less)

    def test_check_detects_bad_order(self):
        root = _build([2, 1, 3])
        root.left.key = 5
        with self.assertRaises(AssertionError):
            tree.check(root, less)

    def test_check_detects_bad_parent(self):
        root = _build([2, 1, 3])
        root.right.parent = root.left
        with self.assertRaises(AssertionError):
            tree.check(root, less)

    def test_check_detects_imbalance(self):
        n1, _, _ = _chain([1, 2, 3], "right")
        with self.assertRaises(AssertionError):
            tree.check(n1, less)


class TestTraversals(unittest.TestCase):
    def test_orders(self):
        root = _build([20, 10, 30])
        self.assertEqual([node.key for node in tree.iter_nodes(root)], [10, 20, 30])
        self.assertEqual(tree.pre_order(root), [20, 10, 30])
        self.assertEqual(tree.post_order(root), [10, 30, 20])
        self.assertEqual(list(tree.iter_nodes(None)), [])
        self.assertEqual(tree.height(root), 2)


if __name__ == '__main__':
    unittest.main()
