###############################################################################
# Copyright (C) 2024 Oliver Michael Kamperis
# Email: olliekampo@gmail.com
#
# This program is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or any later version.
#
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE. See the GNU General Public License for details.
#
# You should have received a copy of the GNU General Public License along with
# this program. If not, see <https://www.gnu.org/licenses/>.

"""Module containing the event tree of interval tree clocks."""

from typing import Any, Callable, Iterator, Optional, final

from itc.datastructures.trees import InternalNode, OwnedNode

__copyright__ = "Copyright (C) 2024 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "0.1.0"

__all__ = (
    "Event",
    "MAX_EVENT_VALUE"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


# Event counters are unsigned 64-bit integers.
MAX_EVENT_VALUE: int = 2 ** 64 - 1


@final
class Event(OwnedNode):
    """
    An event tree node of an interval tree clock.

    Every node holds an event counter, and may own up to two child event
    nodes. Only the structure is provided here; advancing, joining and
    comparing causal histories are not.
    """

    __slots__ = {
        "__value": "The event counter of the node.",
        "__children": "The internal node holding the children."
    }

    def __init__(self, value: int = 0) -> None:
        """
        Create a new event node with no children.

        Raises
        ------
        `TypeError` - If the value is not an integer.

        `ValueError` - If the value is not an unsigned 64-bit integer.
        """
        super().__init__()
        self.__value: int = self.__check_value(value)
        self.__children: InternalNode[Event] = InternalNode(self, Event)

    @staticmethod
    def __check_value(value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"Event values must be integers. Got; {value!r} of "
                f"{type(value)}."
            )
        if not 0 <= value <= MAX_EVENT_VALUE:
            raise ValueError(
                f"Event values must be in [0, {MAX_EVENT_VALUE}]. "
                f"Got; {value}."
            )
        return value

    @property
    def value(self) -> int:
        """The event counter of the node."""
        return self.__value

    @value.setter
    def value(self, value: int) -> None:
        """Set the event counter of the node."""
        self.__value = self.__check_value(value)

    @property
    def left(self) -> Optional["Event"]:
        """The left child, or None if the slot is empty."""
        return self.__children.left

    @property
    def right(self) -> Optional["Event"]:
        """The right child, or None if the slot is empty."""
        return self.__children.right

    def set_left(self, child: Optional["Event"]) -> None:
        """Take ownership of the child in the left slot, None clears it."""
        self.__children.set_left(child)

    def set_right(self, child: Optional["Event"]) -> None:
        """Take ownership of the child in the right slot, None clears it."""
        self.__children.set_right(child)

    def has_left(self) -> bool:
        """Whether the left slot is occupied."""
        return self.__children.has_left()

    def has_right(self) -> bool:
        """Whether the right slot is occupied."""
        return self.__children.has_right()

    def is_leaf(self) -> bool:
        """Whether the node has no children."""
        return self.__children.is_leaf()

    def get_left(self) -> "Event":
        """Get the left child, raising `EmptySlotError` if absent."""
        return self.__children.get_left()

    def get_right(self) -> "Event":
        """Get the right child, raising `EmptySlotError` if absent."""
        return self.__children.get_right()

    def detach_left(self) -> Optional["Event"]:
        """Remove the left child and return it unowned."""
        return self.__children.detach_left()

    def detach_right(self) -> Optional["Event"]:
        """Remove the right child and return it unowned."""
        return self.__children.detach_right()

    def children(self) -> Iterator["Event"]:
        """Iterate over the present children, left first."""
        return self.__children.children()

    def __eq__(self, other: object) -> bool:
        """Whether the other tree has the same structure and values."""
        if not isinstance(other, Event):
            return NotImplemented
        frontier: list[tuple[Event, Event]] = [(self, other)]
        while frontier:
            node_1, node_2 = frontier.pop()
            if node_1.value != node_2.value:
                return False
            for child_1, child_2 in ((node_1.left, node_2.left),
                                     (node_1.right, node_2.right)):
                if child_1 is None or child_2 is None:
                    if child_1 is not child_2:
                        return False
                else:
                    frontier.append((child_1, child_2))
        return True

    __hash__ = None  # type: ignore

    def copy(self) -> "Event":
        """Return an unowned deep copy of the tree rooted at this node."""
        root = Event(self.value)
        frontier: list[tuple[Event, Event]] = [(self, root)]
        while frontier:
            source, target = frontier.pop()
            if source.left is not None:
                left = Event(source.left.value)
                target.set_left(left)
                frontier.append((source.left, left))
            if source.right is not None:
                right = Event(source.right.value)
                target.set_right(right)
                frontier.append((source.right, right))
        return root

    def __copy__(self) -> "Event":
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> "Event":
        return self.copy()

    def __fold(
        self,
        leaf: Callable[[int], Any],
        internal: Callable[[int, Any, Any], Any],
        absent: Any
    ) -> Any:
        """Fold the tree bottom up with an explicit post-order stack."""
        results: dict[int, Any] = {}
        frontier: list[tuple[Event, bool]] = [(self, False)]
        while frontier:
            node, expanded = frontier.pop()
            if node.is_leaf():
                results[id(node)] = leaf(node.value)
            elif not expanded:
                frontier.append((node, True))
                frontier.extend((child, False) for child in node.children())
            else:
                results[id(node)] = internal(node.value, *(
                    absent if child is None else results.pop(id(child))
                    for child in (node.left, node.right)
                ))
        return results[id(self)]

    def to_nested(self) -> Any:
        """
        Return the tree in nested notation.

        A node without children is its value, and any other node is a triple
        `(value, left, right)`, where an absent child is None.
        """
        return self.__fold(
            lambda value: value,
            lambda value, left, right: (value, left, right),
            None
        )

    @classmethod
    def from_nested(cls, structure: Any) -> "Event":
        """
        Create an event tree from nested notation.

        Raises
        ------
        `ValueError` - If a sequence in the structure is not a triple.
        """
        root: Event | None = None
        frontier: list[tuple[Callable[[Event], None] | None, Any]] = [
            (None, structure)]
        while frontier:
            attach, item = frontier.pop()
            if not isinstance(item, (tuple, list)):
                node = cls(item)
            elif len(item) != 3:
                raise ValueError(
                    "Event nodes with children must be given as "
                    f"(value, left, right) triples. Got; {item!r}."
                )
            else:
                value, left, right = item
                node = cls(value)
                if right is not None:
                    frontier.append((node.set_right, right))
                if left is not None:
                    frontier.append((node.set_left, left))
            if attach is None:
                root = node
            else:
                attach(node)
        assert root is not None
        return root

    def __repr__(self) -> str:
        """Return an instantiable string representation of the tree."""
        nested = self.__fold(
            repr,
            lambda value, left, right: f"({value!r}, {left}, {right})",
            "None"
        )
        return f"{self.__class__.__name__}.from_nested({nested})"

    def __str__(self) -> str:
        """Return the tree in compact notation, with `_` for absent nodes."""
        return self.__fold(
            str,
            lambda value, left, right: f"({value}, {left}, {right})",
            "_"
        )
