"""
AVL tree engine.

Stateless functions over Node graphs. Every function that restructures
the tree takes a subtree root and returns the (possibly new) root of that
subtree; the caller links the result back into its parent, and the owner
of the whole tree clears the parent link of the top-level result.

Ordering is decided by a ``less(a, b)`` callable. Two keys are equal when
neither is less than the other.
"""

from typing import Callable, Iterator, List, Optional, Tuple, TypeVar

from .node import Node, get_height, update_height, get_balance

T = TypeVar('T')
Less = Callable[[T, T], bool]


def rotate_right(node: Node) -> Node:
    pivot = node.left
    assert pivot is not None
    pivot.parent = node.parent
    node.link_left(pivot.right)
    pivot.link_right(node)

    update_height(node)
    update_height(pivot)

    return pivot


def rotate_left(node: Node) -> Node:
    pivot = node.right
    assert pivot is not None
    pivot.parent = node.parent
    node.link_right(pivot.left)
    pivot.link_left(node)

    update_height(node)
    update_height(pivot)

    return pivot


def rebalance(node: Node) -> Node:
    """
    Refresh the height of ``node`` and restore the AVL balance there.

    A right-heavy node gets a single left rotation unless its right child
    leans left, in which case that child is rotated right first. The
    left-heavy case mirrors this.
    """
    update_height(node)
    balance = get_balance(node)

    if balance < -1:
        if get_balance(node.right) > 0:
            assert node.right is not None
            node.link_right(rotate_right(node.right))
        return rotate_left(node)

    if balance > 1:
        if get_balance(node.left) < 0:
            assert node.left is not None
            node.link_left(rotate_left(node.left))
        return rotate_right(node)

    return node


def find_min(node: Node) -> Node:
    while node.left is not None:
        node = node.left
    return node


def find_max(node: Node) -> Node:
    while node.right is not None:
        node = node.right
    return node


def successor(node: Node) -> Optional[Node]:
    """Next node in key order, or None when ``node`` holds the maximum."""
    if node.right is not None:
        return find_min(node.right)
    while node.is_right_child():
        node = node.parent
    return node.parent


def predecessor(node: Node) -> Optional[Node]:
    """Previous node in key order, or None when ``node`` holds the minimum."""
    if node.left is not None:
        return find_max(node.left)
    while node.is_left_child():
        node = node.parent
    return node.parent


def search(node: Optional[Node], key: T, less: Less) -> Optional[Node]:
    while node is not None:
        if less(key, node.key):
            node = node.left
        elif less(node.key, key):
            node = node.right
        else:
            return node
    return None


def lower_bound(node: Node, key: T, less: Less) -> Node:
    """
    Raw lower-bound descent over a non-empty subtree.

    Returns the exact match when there is one, otherwise the node where
    the descent could go no further. That node holds either the smallest
    key greater than ``key`` or the largest key less than it; in the
    latter case the caller steps once to its successor.
    """
    while True:
        if less(key, node.key):
            if node.left is None:
                return node
            node = node.left
        elif less(node.key, key):
            if node.right is None:
                return node
            node = node.right
        else:
            return node


def insert(node: Optional[Node], key: T, less: Less) -> Tuple[Node, Optional[Node]]:
    """
    Insert ``key`` below ``node``.

    Returns ``(new_root, created)`` where ``created`` is the new node, or
    None when an equal key was already present. Nothing above an equal
    key is touched.
    """
    if node is None:
        created = Node(key)
        return created, created

    if less(key, node.key):
        child, created = insert(node.left, key, less)
        if created is None:
            return node, None
        node.link_left(child)
    elif less(node.key, key):
        child, created = insert(node.right, key, less)
        if created is None:
            return node, None
        node.link_right(child)
    else:
        return node, None

    return rebalance(node), created


def remove_min(node: Node) -> Optional[Node]:
    """Unlink the leftmost node of the subtree, rebalancing the path to it."""
    if node.left is None:
        return node.right
    node.link_left(remove_min(node.left))
    return rebalance(node)


def _splice_out(node: Node) -> Optional[Node]:
    if node.right is None:
        replacement = node.left
        if replacement is not None:
            replacement.parent = node.parent
    else:
        # The right subtree's minimum takes the erased node's place, so no
        # surviving node changes its key.
        heir = find_min(node.right)
        heir.link_right(remove_min(node.right))
        heir.link_left(node.left)
        heir.parent = node.parent
        replacement = rebalance(heir)

    node.left = None
    node.right = None
    node.parent = None
    return replacement


def erase(node: Optional[Node], key: T, less: Less) -> Tuple[Optional[Node], Optional[Node]]:
    """
    Remove the node holding ``key`` from the subtree.

    Returns ``(new_root, removed)``; ``removed`` is the detached node, or
    None when no key compared equal.
    """
    if node is None:
        return None, None

    if less(key, node.key):
        child, removed = erase(node.left, key, less)
        if removed is None:
            return node, None
        node.link_left(child)
    elif less(node.key, key):
        child, removed = erase(node.right, key, less)
        if removed is None:
            return node, None
        node.link_right(child)
    else:
        return _splice_out(node), node

    return rebalance(node), removed


def copy_subtree(node: Optional[Node],
                 clone_key: Optional[Callable[[T], T]] = None) -> Optional[Node]:
    if node is None:
        return None
    key = node.key if clone_key is None else clone_key(node.key)
    clone: Node = Node(key)
    clone.height = node.height
    clone.link_left(copy_subtree(node.left, clone_key))
    clone.link_right(copy_subtree(node.right, clone_key))
    return clone


def release(node: Optional[Node]) -> None:
    """Cut every link inside the subtree so detached positions reach nothing."""
    stack: List[Node] = [node] if node is not None else []
    while stack:
        current = stack.pop()
        if current.left is not None:
            stack.append(current.left)
        if current.right is not None:
            stack.append(current.right)
        current.left = None
        current.right = None
        current.parent = None


def first_greater(node: Optional[Node], key: T, less: Less) -> Optional[Node]:
    """Node with the smallest key greater than ``key``, or None."""
    if node is None:
        return None
    found = lower_bound(node, key, less)
    if not less(key, found.key):
        return successor(found)
    return found


def last_less(node: Optional[Node], key: T, less: Less) -> Optional[Node]:
    """Node with the largest key less than ``key``, or None."""
    if node is None:
        return None
    found = lower_bound(node, key, less)
    if not less(found.key, key):
        return predecessor(found)
    return found


def iter_nodes(node: Optional[Node]) -> Iterator[Node]:
    """In-order walk. The tree must not change while this runs."""
    if node is None:
        return
    current: Optional[Node] = find_min(node)
    while current is not None:
        yield current
        current = successor(current)


def pre_order(node: Optional[Node]) -> List:
    result: List = []
    if node is None:
        return result
    stack: List[Node] = [node]
    while stack:
        current = stack.pop()
        result.append(current.key)
        if current.right is not None:
            stack.append(current.right)
        if current.left is not None:
            stack.append(current.left)
    return result


def post_order(node: Optional[Node]) -> List:
    result: List = []
    if node is None:
        return result
    stack: List[Node] = [node]
    while stack:
        current = stack.pop()
        result.append(current.key)
        if current.left is not None:
            stack.append(current.left)
        if current.right is not None:
            stack.append(current.right)
    result.reverse()
    return result


def is_balanced(node: Optional[Node]) -> bool:
    if node is None:
        return True
    if abs(get_balance(node)) > 1:
        return False
    return is_balanced(node.left) and is_balanced(node.right)


def check(root: Optional[Node], less: Less) -> int:
    """
    Validate ordering, balance, cached heights and parent links.

    Returns the number of nodes. Raises AssertionError naming the first
    violated property.
    """
    if root is not None and root.parent is not None:
        raise AssertionError(f"root {root.key!r} has a parent")
    count, _ = _check(root, less, None, None)
    return count


def _check(node: Optional[Node], less: Less,
           low: Optional[Node], high: Optional[Node]) -> Tuple[int, int]:
    if node is None:
        return 0, 0

    if low is not None and not less(low.key, node.key):
        raise AssertionError(f"key {node.key!r} is not greater than {low.key!r}")
    if high is not None and not less(node.key, high.key):
        raise AssertionError(f"key {node.key!r} is not less than {high.key!r}")

    for child in (node.left, node.right):
        if child is not None and child.parent is not node:
            raise AssertionError(f"parent link of {child.key!r} does not point at {node.key!r}")

    left_count, left_height = _check(node.left, less, low, node)
    right_count, right_height = _check(node.right, less, node, high)

    if abs(left_height - right_height) > 1:
        raise AssertionError(
            f"node {node.key!r} is unbalanced: {left_height} vs {right_height}"
        )
    if node.height != 1 + max(left_height, right_height):
        raise AssertionError(
            f"node {node.key!r} caches height {node.height}, "
            f"expected {1 + max(left_height, right_height)}"
        )

    return left_count + right_count + 1, node.height


def height(node: Optional[Node]) -> int:
    return get_height(node)
