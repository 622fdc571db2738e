from typing import TypeVar, Generic, Optional

T = TypeVar('T')


class Node(Generic[T]):
    def __init__(self, key: T) -> None:
        self.key: T = key
        self.left: Optional['Node[T]'] = None
        self.right: Optional['Node[T]'] = None
        self.parent: Optional['Node[T]'] = None
        self.height: int = 1

    def link_left(self, child: Optional['Node[T]']) -> None:
        self.left = child
        if child is not None:
            child.parent = self

    def link_right(self, child: Optional['Node[T]']) -> None:
        self.right = child
        if child is not None:
            child.parent = self

    def is_left_child(self) -> bool:
        return self.parent is not None and self.parent.left is self

    def is_right_child(self) -> bool:
        return self.parent is not None and self.parent.right is self

    def __repr__(self) -> str:
        return f"Node({self.key!r}, height={self.height})"


def get_height(node: Optional[Node]) -> int:
    if node is None:
        return 0
    return node.height


def update_height(node: Node) -> None:
    node.height = 1 + max(get_height(node.left), get_height(node.right))


def get_balance(node: Optional[Node]) -> int:
    if node is None:
        return 0
    return get_height(node.left) - get_height(node.right)
