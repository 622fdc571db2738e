from typing import TypeVar, Generic, Iterator, Optional, TYPE_CHECKING

from . import tree
from .node import Node

if TYPE_CHECKING:
    from .ordered_set import OrderedSet

T = TypeVar('T')


class Position(Generic[T]):
    """
    A place in an OrderedSet: either at a stored key or at the end.

    Positions walk the tree through parent links, so stepping costs
    O(log n) at worst and O(1) amortised over a full traversal. A
    position stays valid while its node is in the set; erasing other keys
    does not disturb it.
    """

    def __init__(self, owner: 'OrderedSet[T]', node: Optional[Node] = None) -> None:
        self._owner = owner
        self._node = node

    @property
    def key(self) -> T:
        if self._node is None:
            raise IndexError("dereference of end position")
        return self._node.key

    @property
    def is_end(self) -> bool:
        return self._node is None

    @property
    def owner(self) -> 'OrderedSet[T]':
        return self._owner

    def increment(self) -> 'Position[T]':
        if self._node is None:
            raise IndexError("increment past end position")
        self._node = tree.successor(self._node)
        return self

    def decrement(self) -> 'Position[T]':
        if self._node is None:
            root = self._owner._root
            if root is None:
                raise IndexError("decrement before begin position")
            self._node = tree.find_max(root)
            return self

        previous = tree.predecessor(self._node)
        if previous is None:
            raise IndexError("decrement before begin position")
        self._node = previous
        return self

    def post_increment(self) -> 'Position[T]':
        old = self.copy()
        self.increment()
        return old

    def post_decrement(self) -> 'Position[T]':
        old = self.copy()
        self.decrement()
        return old

    def next(self) -> 'Position[T]':
        return self.copy().increment()

    def prev(self) -> 'Position[T]':
        return self.copy().decrement()

    def copy(self) -> 'Position[T]':
        return Position(self._owner, self._node)

    def __iter__(self) -> Iterator[T]:
        node = self._node
        while node is not None:
            yield node.key
            node = tree.successor(node)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self._owner is other._owner and self._node is other._node

    def __hash__(self) -> int:
        return hash((id(self._owner), id(self._node)))

    def __repr__(self) -> str:
        if self._node is None:
            return "Position(end)"
        return f"Position(key={self._node.key!r})"
