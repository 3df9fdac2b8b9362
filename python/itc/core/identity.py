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
Module containing the identity tree of interval tree clocks.

An identity is a binary tree whose leaves are either zero or one, and which
represents the share of ownership of a participant. Identities are built top
down, by setting nodes to leaves or attaching children to them, and then
normalized to collapse redundant structure before they are used.
"""

import enum
import logging
from typing import Any, Literal, TypeAlias, final

from typing_extensions import override

from itc.datastructures.trees import InternalNode, Leaf, VariantNode

__copyright__ = "Copyright (C) 2024 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "0.2.0"

__all__ = (
    "LeafValue",
    "Id",
    "NormalizeMethod"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


@enum.unique
class LeafValue(enum.IntEnum):
    """The share of ownership held by a leaf of an identity tree."""

    ZERO = 0
    ONE = 1


NormalizeMethodNames: TypeAlias = Literal[
    "recurse",
    "loop"
]


@final
class Id(VariantNode[LeafValue]):
    """
    An identity tree of an interval tree clock.

    Each node is either a leaf holding a `LeafValue`, or an internal node
    with up to two identity children. A new identity is a leaf holding zero.

    The normal form of an identity contains no internal node whose children
    are both leaves holding the same value, since such a node owns exactly
    what a single leaf with that value owns;
        - norm((0, 0)) = 0,
        - norm((1, 1)) = 1,
        - norm(i) = i otherwise.

    Example Usage
    -------------
    ```
    >>> from itc.core.identity import Id
    >>> id_ = Id()
    >>> id_.set_left(Id.zero())
    >>> id_.set_right(Id.zero())
    >>> str(id_)
    '(0, 0)'
    >>> str(id_.normalize())
    '0'
    >>> id_.is_leaf()
    True
    ```
    """

    __ID_LOGGER = logging.getLogger("ItcId")

    __slots__ = ()

    def __init__(self, value: LeafValue | int | None = None) -> None:
        """
        Create a new identity leaf.

        If the value is not given or None, the leaf holds zero.
        """
        super().__init__(value)

    @classmethod
    @override
    def default_value(cls) -> LeafValue:
        """Identity leaves hold zero by default."""
        return LeafValue.ZERO

    @classmethod
    @override
    def coerce_value(cls, value: Any) -> LeafValue:
        """
        Convert the given value to a leaf value.

        Raises
        ------
        `TypeError` - If the value is not an integer.

        `ValueError` - If the value is not zero or one.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                "Identity leaf values must be LeafValue or integers. "
                f"Got; {value!r} of {type(value)}."
            )
        return LeafValue(value)

    @classmethod
    @override
    def _child_type(cls) -> type:
        return Id

    @classmethod
    @override
    def export_value(cls, value: LeafValue) -> int:
        return int(value)

    @classmethod
    def zero(cls) -> "Id":
        """Create an identity leaf holding zero."""
        return cls(LeafValue.ZERO)

    @classmethod
    def one(cls) -> "Id":
        """Create an identity leaf holding one."""
        return cls(LeafValue.ONE)

    def normalize(
        self,
        method: "NormalizeMethod" | NormalizeMethodNames = "recurse",
        *,
        debug: bool = False
    ) -> "Id":
        """
        Transform this identity in place into its normal form.

        Children are normalized before their parent (post-order), and an
        internal node collapses into a leaf only if both of its children are
        present, are leaves, and hold equal values. A node with a single
        child is never collapsed. Normalizing a normal identity does nothing.

        Parameters
        ----------
        `method: NormalizeMethod | "recurse" | "loop" = "recurse"` - The
        traversal used. Recursion is faster for shallow trees, the loop is
        not limited by python's recursion depth.

        `debug: bool = False` - Whether to log debug messages.

        Returns
        -------
        `Id` - This identity, to allow chaining.

        Raises
        ------
        `ValueError` - If the method name is not known.
        """
        if not isinstance(method, NormalizeMethod):
            try:
                method = NormalizeMethod[str(method).upper()]
            except KeyError as error:
                raise ValueError(
                    f"Unknown normalize method: {method!r}. Choose from; "
                    f"{[name.lower() for name in NormalizeMethod.__members__]}"
                ) from error
        collapsed: int = getattr(self, method.value)(debug=debug)
        if debug:
            self.__ID_LOGGER.debug(
                "Id@%#x: Normalized with method %s, collapsed %s nodes.",
                id(self), method.name, collapsed
            )
        return self

    def normalize_recurse(self, debug: bool = False) -> int:
        """
        Recursive variant of `normalize`.

        Python's recursion depth is quite shallow, so this method may fail
        for very deep identities.

        Returns
        -------
        `int` - The number of internal nodes collapsed into leaves.
        """
        payload = self.payload
        if isinstance(payload, Leaf):
            return 0
        collapsed: int = 0
        for child in payload.children():
            collapsed += child.normalize_recurse(debug)
        return collapsed + self.__collapse(debug)

    def normalize_loop(self, debug: bool = False) -> int:
        """
        Iterative variant of `normalize`, using an explicit post-order stack.

        Returns
        -------
        `int` - The number of internal nodes collapsed into leaves.
        """
        collapsed: int = 0
        frontier: list[tuple[Id, bool]] = [(self, False)]
        while frontier:
            node, expanded = frontier.pop()
            payload = node.payload
            if isinstance(payload, Leaf):
                continue
            if expanded:
                collapsed += node.__collapse(debug)
            else:
                frontier.append((node, True))
                frontier.extend(
                    (child, False) for child in payload.children())
        return collapsed

    def __collapse(self, debug: bool) -> int:
        """Collapse a node whose children are equal leaves, return 1 if so."""
        internal: InternalNode[Id] = self.internal()
        left, right = internal.left, internal.right
        if left is None or right is None:
            return 0
        if left.is_leaf() and right.is_leaf() and left.leaf() == right.leaf():
            if debug:
                self.__ID_LOGGER.debug(
                    "Id@%#x: Collapsing (%s, %s) into a leaf.",
                    id(self), left.leaf().value, right.leaf().value
                )
            self.set_value(left.leaf())
            return 1
        return 0

    def is_normal(self) -> bool:
        """Whether this identity is in normal form."""
        for node in self.iter_nodes():
            payload = node.payload
            if not isinstance(payload, InternalNode):
                continue
            left, right = payload.left, payload.right
            if (left is not None and right is not None
                    and left.is_leaf() and right.is_leaf()
                    and left.leaf() == right.leaf()):
                return False
        return True


class NormalizeMethod(enum.Enum):
    """
    The traversals that can be used to normalize an identity.

    Items
    -----
    `RECURSE` - Normalize children recursively.

    `LOOP` - Normalize children iteratively with an explicit stack.
    """

    RECURSE = Id.normalize_recurse.__name__
    LOOP = Id.normalize_loop.__name__
