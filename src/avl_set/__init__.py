from .ordered_set import OrderedSet
from .position import Position

__all__ = ["OrderedSet", "Position"]
