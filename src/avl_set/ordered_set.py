import copy as _copy
import operator
from typing import TypeVar, Generic, Any, Callable, Dict, Iterable, Iterator, List, Optional

from . import tree
from .node import Node
from .position import Position

T = TypeVar('T')


class OrderedSet(Generic[T]):
    """
    Set of unique keys kept in sorted order by an AVL tree.

    Membership, insert, erase and lower_bound run in O(log n). Keys are
    ordered by ``less`` (default ``<``); two keys are duplicates when
    neither is less than the other. The tree owns its nodes, keeps the
    leftmost one cached for ``begin()``, and hands out ``Position``
    objects that walk parent links in either direction.
    """

    def __init__(self, items: Optional[Iterable[T]] = None,
                 less: Optional[Callable[[T, T], bool]] = None) -> None:
        if less is not None and not callable(less):
            raise TypeError("less must be callable")
        self._less: Callable[[T, T], bool] = operator.lt if less is None else less
        self._root: Optional[Node] = None
        self._size: int = 0
        self._first: Optional[Node] = None
        self._version: int = 0

        if isinstance(items, OrderedSet) and less is None:
            self._less = items._less
            self._copy_from(items)
        elif items is not None:
            for key in items:
                self.insert(key)

    def _anchor(self, root: Optional[Node]) -> None:
        self._root = root
        if root is not None:
            root.parent = None

    def _refresh_first(self) -> None:
        # Single fix-up point after any structural change: begin() cache and
        # the version that running iterators check.
        self._version += 1
        self._first = None if self._root is None else tree.find_min(self._root)

    def _copy_from(self, other: 'OrderedSet[T]',
                   clone_key: Optional[Callable[[T], T]] = None) -> None:
        self._anchor(tree.copy_subtree(other._root, clone_key))
        self._size = other._size
        self._refresh_first()

    def insert(self, key: T) -> None:
        root, created = tree.insert(self._root, key, self._less)
        if created is None:
            return
        self._size += 1
        self._anchor(root)
        self._refresh_first()

    def erase(self, key: T) -> None:
        root, removed = tree.erase(self._root, key, self._less)
        if removed is None:
            return
        self._size -= 1
        self._anchor(root)
        self._refresh_first()

    def find(self, key: T) -> Position[T]:
        return Position(self, tree.search(self._root, key, self._less))

    def lower_bound(self, key: T) -> Position[T]:
        if self._root is None:
            return self.end()
        node = tree.lower_bound(self._root, key, self._less)
        position = Position(self, node)
        if self._less(node.key, key):
            position.increment()
        return position

    def begin(self) -> Position[T]:
        return Position(self, self._first)

    def end(self) -> Position[T]:
        return Position(self)

    def contains(self, key: T) -> bool:
        return tree.search(self._root, key, self._less) is not None

    def min(self) -> T:
        if self._first is None:
            raise ValueError("min from empty set")
        return self._first.key

    def max(self) -> T:
        if self._root is None:
            raise ValueError("max from empty set")
        return tree.find_max(self._root).key

    def size(self) -> int:
        return self._size

    def empty(self) -> bool:
        return self._size == 0

    def clear(self) -> None:
        tree.release(self._root)
        self._root = None
        self._size = 0
        self._first = None
        self._version += 1

    def assign(self, other: 'OrderedSet[T]') -> 'OrderedSet[T]':
        """Replace this set's contents with a structural copy of ``other``."""
        if other is self:
            return self
        self.clear()
        self._less = other._less
        self._copy_from(other)
        return self

    def copy(self) -> 'OrderedSet[T]':
        clone: OrderedSet[T] = OrderedSet(less=self._less)
        clone._copy_from(self)
        return clone

    def height(self) -> int:
        return tree.height(self._root)

    def is_balanced(self) -> bool:
        return tree.is_balanced(self._root)

    def check_invariants(self) -> None:
        count = tree.check(self._root, self._less)
        if count != self._size:
            raise AssertionError(f"size is {self._size} but the tree holds {count} nodes")
        expected = None if self._root is None else tree.find_min(self._root)
        if self._first is not expected:
            raise AssertionError("cached first node is not the minimum")

    def in_order(self) -> List[T]:
        return [node.key for node in tree.iter_nodes(self._root)]

    def pre_order(self) -> List[T]:
        return tree.pre_order(self._root)

    def post_order(self) -> List[T]:
        return tree.post_order(self._root)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size != 0

    def __contains__(self, key: T) -> bool:
        return self.contains(key)

    def __iter__(self) -> Iterator[T]:
        # If the set changed while suspended, resume after the last key
        # yielded instead of trusting a node that may have been erased.
        node = None if self._root is None else tree.find_min(self._root)
        while node is not None:
            version = self._version
            key = node.key
            yield key
            if self._version == version:
                node = tree.successor(node)
            else:
                node = tree.first_greater(self._root, key, self._less)

    def __reversed__(self) -> Iterator[T]:
        node = None if self._root is None else tree.find_max(self._root)
        while node is not None:
            version = self._version
            key = node.key
            yield key
            if self._version == version:
                node = tree.predecessor(node)
            else:
                node = tree.last_less(self._root, key, self._less)

    def __eq__(self, other: object) -> bool:
        """Same size and pairwise equivalent keys under this set's ``less``."""
        if not isinstance(other, OrderedSet):
            return NotImplemented
        if self._size != other._size:
            return False
        less = self._less
        return all(not less(a, b) and not less(b, a) for a, b in zip(self, other))

    __hash__ = None

    def __copy__(self) -> 'OrderedSet[T]':
        return self.copy()

    def __deepcopy__(self, memo: Dict[int, Any]) -> 'OrderedSet[T]':
        clone: OrderedSet[T] = OrderedSet(less=self._less)
        memo[id(self)] = clone
        clone._copy_from(self, lambda key: _copy.deepcopy(key, memo))
        return clone

    def __repr__(self) -> str:
        return f"OrderedSet({self.in_order()})"

    def __str__(self) -> str:
        return f"OrderedSet(size={self._size}, height={self.height()})"
