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

"""
Module containing ownership trees whose nodes are either leaves holding a
value, or internal nodes holding up to two owned children.
"""

import logging
import weakref
from abc import ABCMeta, abstractmethod
from typing import (Any, Callable, Generic, Iterator, Optional, TypeVar,
                    final)

from itc.datastructures._tree_errors import (EmptySlotError, OwnershipError,
                                             TagError)

__copyright__ = "Copyright (C) 2024 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "0.2.0"

__all__ = (
    "OwnedNode",
    "InternalNode",
    "Leaf",
    "VariantNode"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


# Child node type of an internal node.
CT = TypeVar("CT", bound="OwnedNode")

# Leaf value type of a variant node.
LT = TypeVar("LT")

# Variant node type (for methods returning the same node type).
VT = TypeVar("VT", bound="VariantNode")


class OwnedNode:
    """
    Base class for tree nodes that have at most one owner.

    The owner of a node is the node whose child slot holds it. Owners are
    held by weak reference, the owner holds its children strongly, so
    dropping the last reference to a root drops the whole tree.
    """

    __slots__ = {
        "__weakref__": "Weak references to the node.",
        "__owner": "Weak reference to the owning node, or None."
    }

    def __init__(self) -> None:
        """Create a new unowned node."""
        self.__owner: Optional[weakref.ref["OwnedNode"]] = None

    @property
    def owner(self) -> Optional["OwnedNode"]:
        """The node that owns this node, None if this node is a root."""
        if self.__owner is None:
            return None
        return self.__owner()

    def is_root(self) -> bool:
        """Whether this node has no owner."""
        return self.owner is None

    def iter_ancestors(self) -> Iterator["OwnedNode"]:
        """Iterate over the owners of this node, from nearest to the root."""
        node = self.owner
        while node is not None:
            yield node
            node = node.owner

    def _claim(self, owner: "OwnedNode") -> None:
        """Transfer ownership of this node to the given owner."""
        self._check_claim(owner)
        self.__owner = weakref.ref(owner)

    def _check_claim(self, owner: "OwnedNode") -> None:
        """Raise `OwnershipError` if the owner cannot claim this node."""
        if self is owner or any(
            self is ancestor for ancestor in owner.iter_ancestors()
        ):
            raise OwnershipError(
                f"Cannot attach a {type(self).__name__} beneath itself, "
                "trees cannot contain cycles."
            )
        if self.owner is not None:
            raise OwnershipError(
                f"Cannot attach a {type(self).__name__}, it is already owned by "
                f"a {type(self.owner).__name__}. Detach it from its owner first."
            )

    def _release(self) -> None:
        """Release this node from its owner."""
        self.__owner = None


class InternalNode(Generic[CT]):
    """
    An internal tree node holding two independently optional child slots.

    Each occupied slot exclusively owns its child, so an internal node may
    have zero, one, or two children. Replacing the child in a slot releases
    the previous occupant.
    """

    __slots__ = {
        "__holder": "Weak reference to the node the children are owned by.",
        "__child_type": "The type that children must be instances of.",
        "__left": "The left child, or None.",
        "__right": "The right child, or None."
    }

    def __init__(
        self,
        holder: Optional[OwnedNode] = None,
        child_type: type | None = None
    ) -> None:
        """
        Create a new internal node with no children.

        Parameters
        ----------
        `holder: OwnedNode | None = None` - The node that owns the children
        attached to this internal node. If None, children are stored without
        ownership tracking.

        `child_type: type | None = None` - The type children must be instances
        of. If None, any node is accepted.
        """
        self.__holder: Optional[weakref.ref[OwnedNode]] = None
        if holder is not None:
            self.__holder = weakref.ref(holder)
        self.__child_type: type | None = child_type
        self.__left: Optional[CT] = None
        self.__right: Optional[CT] = None

    def __repr__(self) -> str:
        """Return a string representation of the internal node."""
        return (f"{self.__class__.__name__}(left={self.__left!r}, "
                f"right={self.__right!r})")

    @property
    def left(self) -> Optional[CT]:
        """The left child, or None if the slot is empty."""
        return self.__left

    @property
    def right(self) -> Optional[CT]:
        """The right child, or None if the slot is empty."""
        return self.__right

    def set_left(self, child: Optional[CT]) -> None:
        """Take ownership of the child in the left slot, None clears it."""
        self.__left = self.__replace(self.__left, child)

    def set_right(self, child: Optional[CT]) -> None:
        """Take ownership of the child in the right slot, None clears it."""
        self.__right = self.__replace(self.__right, child)

    def has_left(self) -> bool:
        """Whether the left slot is occupied."""
        return self.__left is not None

    def has_right(self) -> bool:
        """Whether the right slot is occupied."""
        return self.__right is not None

    def is_leaf(self) -> bool:
        """Whether neither slot is occupied."""
        return self.__left is None and self.__right is None

    def get_left(self) -> CT:
        """
        Get the left child.

        Raises
        ------
        `EmptySlotError` - If the left slot is not occupied.
        """
        if self.__left is None:
            raise EmptySlotError("The left slot of the node is empty.")
        return self.__left

    def get_right(self) -> CT:
        """
        Get the right child.

        Raises
        ------
        `EmptySlotError` - If the right slot is not occupied.
        """
        if self.__right is None:
            raise EmptySlotError("The right slot of the node is empty.")
        return self.__right

    def detach_left(self) -> Optional[CT]:
        """Remove the left child and return it unowned."""
        child, self.__left = self.__left, None
        if child is not None and self.__holder is not None:
            child._release()
        return child

    def detach_right(self) -> Optional[CT]:
        """Remove the right child and return it unowned."""
        child, self.__right = self.__right, None
        if child is not None and self.__holder is not None:
            child._release()
        return child

    def clear(self) -> None:
        """Release both children."""
        self.detach_left()
        self.detach_right()

    def children(self) -> Iterator[CT]:
        """Iterate over the present children, left first."""
        if self.__left is not None:
            yield self.__left
        if self.__right is not None:
            yield self.__right

    def __replace(self, old: Optional[CT], new: Optional[CT]) -> Optional[CT]:
        if new is old:
            return old
        if new is not None:
            if self.__child_type is not None:
                _check_child_type(new, self.__child_type)
            holder = None if self.__holder is None else self.__holder()
            if holder is not None:
                new._claim(holder)
        if old is not None and self.__holder is not None:
            old._release()
        return new


@final
class Leaf(Generic[LT]):
    """The leaf payload of a variant node, holding a single value."""

    __match_args__ = ("value",)

    __slots__ = {
        "value": "The value held by the leaf."
    }

    def __init__(self, value: LT) -> None:
        """Create a new leaf payload holding the given value."""
        self.value: LT = value

    def __repr__(self) -> str:
        """Return an instantiable string representation of the leaf."""
        return f"{self.__class__.__name__}({self.value!r})"

    def __eq__(self, other: object) -> bool:
        """Whether the other leaf holds an equal value."""
        if not isinstance(other, Leaf):
            return NotImplemented
        return self.value == other.value

    __hash__ = None  # type: ignore


class VariantNode(OwnedNode, Generic[LT], metaclass=ABCMeta):
    """
    A tree node which is, at any time, either a leaf holding a value or an
    internal node holding up to two children of the same node type.

    The active payload is either a `Leaf` or an `InternalNode`, and is
    exposed by the `payload` property, such that callers may dispatch over
    both shapes exhaustively:
    ```
    match node.payload:
        case Leaf(value):
            ...
        case InternalNode():
            ...
    ```
    Alternatively `leaf()` and `internal()` give typed access to the
    payload, and raise a `TagError` if the other shape is active.

    Setting a value with `set_value` makes the node a leaf, discarding any
    children. Setting a child with `set_left` or `set_right` makes the node
    internal, discarding any leaf value. These are the only transitions that
    replace the payload.

    Sub-classes must define the default leaf value, and may restrict the
    accepted leaf values by overriding `coerce_value`.
    """

    __TREE_LOGGER = logging.getLogger("ItcTree")

    __slots__ = {
        "__payload": "The active leaf or internal node payload."
    }

    def __init__(self, value: LT | None = None) -> None:
        """
        Create a new leaf node.

        If the value is not given or None, the node holds the default value
        of the node type.
        """
        super().__init__()
        if value is None:
            value = self.default_value()
        self.__payload: Leaf[LT] | InternalNode[Any] = Leaf(
            self.coerce_value(value))

    @classmethod
    @abstractmethod
    def default_value(cls) -> LT:
        """The value held by a default constructed leaf."""
        ...

    @classmethod
    def coerce_value(cls, value: Any) -> LT:
        """
        Convert the given value to a valid leaf value.

        Raises `TypeError` or `ValueError` if the value is not valid.
        """
        return value

    @classmethod
    def _child_type(cls) -> type:
        """The type that the children of nodes of this type must be."""
        return cls

    @property
    def payload(self) -> Leaf[LT] | InternalNode[Any]:
        """The active payload of the node."""
        return self.__payload

    def is_leaf(self) -> bool:
        """Whether the node is currently a leaf."""
        return isinstance(self.__payload, Leaf)

    def leaf(self) -> LT:
        """
        Get the value held by the node.

        Raises
        ------
        `TagError` - If the node is an internal node.
        """
        payload = self.__payload
        if not isinstance(payload, Leaf):
            raise TagError(
                "Cannot get the leaf value of an internal "
                f"{type(self).__name__}.")
        return payload.value

    def internal(self: VT) -> InternalNode[VT]:
        """
        Get the internal node payload holding the children of the node.

        Raises
        ------
        `TagError` - If the node is a leaf.
        """
        payload = self.__payload
        if not isinstance(payload, InternalNode):
            raise TagError(
                "Cannot get the internal node of a leaf "
                f"{type(self).__name__}.")
        return payload

    def set_value(self, value: LT, *, debug: bool = False) -> None:
        """
        Make the node a leaf holding the given value.

        If the node is internal, its children are released first.
        """
        value = self.coerce_value(value)
        payload = self.__payload
        if isinstance(payload, Leaf):
            payload.value = value
            return
        if debug:
            self.__TREE_LOGGER.debug(
                "%s@%#x: Switching from internal to leaf with value %r, "
                "releasing %s children.",
                type(self).__name__, id(self), value,
                sum(1 for _ in payload.children())
            )
        payload.clear()
        self.__payload = Leaf(value)

    def set_left(self: VT, child: Optional[VT], *, debug: bool = False) -> None:
        """
        Make the node internal and take ownership of the given left child.

        If the node is a leaf, its value is discarded first. The previous
        left child, if any, is released.
        """
        self.__check_attach(child)
        self.__ensure_internal(debug).set_left(child)

    def set_right(
        self: VT,
        child: Optional[VT],
        *,
        debug: bool = False
    ) -> None:
        """
        Make the node internal and take ownership of the given right child.

        If the node is a leaf, its value is discarded first. The previous
        right child, if any, is released.
        """
        self.__check_attach(child)
        self.__ensure_internal(debug).set_right(child)

    def __check_attach(self, child: Any) -> None:
        """Check a child can be attached before a leaf switches to internal."""
        if child is None or not self.is_leaf():
            return
        _check_child_type(child, self._child_type())
        child._check_claim(self)

    def __ensure_internal(self, debug: bool = False) -> InternalNode[Any]:
        payload = self.__payload
        if isinstance(payload, InternalNode):
            return payload
        if debug:
            self.__TREE_LOGGER.debug(
                "%s@%#x: Switching from leaf with value %r to internal.",
                type(self).__name__, id(self), payload.value
            )
        internal: InternalNode[Any] = InternalNode(self, self._child_type())
        self.__payload = internal
        return internal

    def iter_nodes(self: VT) -> Iterator[VT]:
        """Iterate over all nodes of the tree in pre-order."""
        frontier: list[VT] = [self]
        while frontier:
            node = frontier.pop()
            yield node
            payload = node.payload
            if isinstance(payload, InternalNode):
                if payload.right is not None:
                    frontier.append(payload.right)
                if payload.left is not None:
                    frontier.append(payload.left)

    def count_nodes(self) -> int:
        """Return the number of nodes in the tree."""
        return sum(1 for _ in self.iter_nodes())

    @property
    def height(self) -> int:
        """The number of edges on the longest path from this node to a leaf."""
        frontier: list[tuple[int, VariantNode[LT]]] = [(0, self)]
        height: int = 0
        while frontier:
            depth, node = frontier.pop()
            height = max(height, depth)
            payload = node.payload
            if isinstance(payload, InternalNode):
                frontier.extend(
                    (depth + 1, child) for child in payload.children())
        return height

    def __eq__(self, other: object) -> bool:
        """Whether the other tree has the same structure and leaf values."""
        if not isinstance(other, VariantNode):
            return NotImplemented
        frontier: list[tuple[VariantNode[Any], VariantNode[Any]]] = [
            (self, other)]
        while frontier:
            node_1, node_2 = frontier.pop()
            if type(node_1) is not type(node_2):
                return False
            match node_1.payload, node_2.payload:
                case Leaf(value_1), Leaf(value_2):
                    if value_1 != value_2:
                        return False
                case InternalNode() as internal_1, InternalNode() as internal_2:
                    for child_1, child_2 in (
                        (internal_1.left, internal_2.left),
                        (internal_1.right, internal_2.right)
                    ):
                        if child_1 is None or child_2 is None:
                            if child_1 is not child_2:
                                return False
                        else:
                            frontier.append((child_1, child_2))
                case _:
                    return False
        return True

    __hash__ = None  # type: ignore

    def copy(self: VT) -> VT:
        """Return an unowned deep copy of the tree rooted at this node."""
        root = type(self)()
        frontier: list[tuple[VariantNode[LT], VariantNode[LT]]] = [
            (self, root)]
        while frontier:
            source, target = frontier.pop()
            match source.payload:
                case Leaf(value):
                    target.set_value(value)
                case InternalNode() as internal:
                    target_internal = target.__ensure_internal()
                    if internal.left is not None:
                        left = type(internal.left)()
                        target_internal.set_left(left)
                        frontier.append((internal.left, left))
                    if internal.right is not None:
                        right = type(internal.right)()
                        target_internal.set_right(right)
                        frontier.append((internal.right, right))
        return root

    def __copy__(self: VT) -> VT:
        """Return an unowned deep copy, sharing is not permitted in trees."""
        return self.copy()

    def __deepcopy__(self: VT, memo: dict[int, Any]) -> VT:
        """Return an unowned deep copy of the tree."""
        return self.copy()

    @classmethod
    def export_value(cls, value: LT) -> Any:
        """Convert a leaf value to its nested notation form."""
        return value

    def __fold(
        self,
        leaf: Callable[[Any], Any],
        internal: Callable[[Any, Any], Any],
        absent: Any
    ) -> Any:
        """
        Fold the tree bottom up with an explicit post-order stack.

        Leaf values are mapped with `leaf`, and internal nodes combine the
        results of their children with `internal`, where an absent child is
        given as `absent`.
        """
        results: dict[int, Any] = {}
        frontier: list[tuple[VariantNode[LT], bool]] = [(self, False)]
        while frontier:
            node, expanded = frontier.pop()
            match node.payload:
                case Leaf(value):
                    results[id(node)] = leaf(self.export_value(value))
                case InternalNode() as node_internal:
                    if not expanded:
                        frontier.append((node, True))
                        frontier.extend(
                            (child, False)
                            for child in node_internal.children()
                        )
                    else:
                        results[id(node)] = internal(*(
                            absent if child is None
                            else results.pop(id(child))
                            for child in (node_internal.left,
                                          node_internal.right)
                        ))
        return results[id(self)]

    def to_nested(self) -> Any:
        """
        Return the tree in nested notation.

        A leaf is its exported value, and an internal node is a pair
        `(left, right)`, where an absent child is None.
        """
        return self.__fold(
            lambda value: value,
            lambda left, right: (left, right),
            None
        )

    @classmethod
    def from_nested(cls: type[VT], structure: Any) -> VT:
        """
        Create a tree from nested notation.

        Tuples and lists must be pairs and always denote internal nodes,
        None denotes an absent child, and anything else is a leaf value.

        Raises
        ------
        `ValueError` - If the structure is None, or contains a sequence that
        is not a pair.
        """
        if structure is None:
            raise ValueError("The root of a nested tree cannot be absent.")
        root = cls()
        frontier: list[tuple[VT, Any]] = [(root, structure)]
        while frontier:
            node, item = frontier.pop()
            if not isinstance(item, (tuple, list)):
                node.set_value(item)
                continue
            if len(item) != 2:
                raise ValueError(
                    "Internal nodes must be given as (left, right) pairs. "
                    f"Got; {item!r}."
                )
            node.__ensure_internal()
            for set_child, child_item in zip(
                (node.set_left, node.set_right), item
            ):
                if child_item is not None:
                    child = cls()
                    set_child(child)
                    frontier.append((child, child_item))
        return root

    def __repr__(self) -> str:
        """Return an instantiable string representation of the tree."""
        nested = self.__fold(
            repr,
            lambda left, right: f"({left}, {right})",
            "None"
        )
        return f"{self.__class__.__name__}.from_nested({nested})"

    def __str__(self) -> str:
        """Return the tree in compact notation, with `_` for absent nodes."""
        return self.__fold(
            str,
            lambda left, right: f"({left}, {right})",
            "_"
        )


def _check_child_type(child: Any, child_type: type) -> None:
    """Raise `TypeError` if the child is not of the given type."""
    if not isinstance(child, child_type):
        raise TypeError(
            f"Children must be of type {child_type.__name__}. "
            f"Got; {type(child)}."
        )
