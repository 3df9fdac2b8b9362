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

"""Module containing the stamp of interval tree clocks."""

from typing import Any, Optional, final

from itc.core.event import Event
from itc.core.identity import Id
from itc.datastructures._tree_errors import OwnershipError
from itc.datastructures.trees import OwnedNode

__copyright__ = "Copyright (C) 2024 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "0.1.0"

__all__ = (
    "Stamp",
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


def _check_root(node: OwnedNode, kind: str) -> None:
    if not node.is_root():
        raise OwnershipError(
            f"A stamp must own a root {kind} tree. Got; {node!r} which is "
            f"owned by {node.owner!r}."
        )


@final
class Stamp:
    """
    A stamp of an interval tree clock, pairing an identity with an event tree.

    The stamp exclusively owns both trees, so only root trees are accepted.
    Forking, joining and recording events on stamps are not provided.
    """

    __slots__ = {
        "__identity": "The identity tree of the stamp.",
        "__event": "The event tree of the stamp."
    }

    def __init__(
        self,
        identity: Optional[Id] = None,
        event: Optional[Event] = None
    ) -> None:
        """
        Create a new stamp.

        Parameters
        ----------
        `identity: Id | None = None` - The identity of the stamp. If not
        given or None, the stamp holds a new zero identity.

        `event: Event | None = None` - The event tree of the stamp. If not
        given or None, the stamp holds a new zero event node.

        Raises
        ------
        `TypeError` - If the trees are not of the correct types.

        `OwnershipError` - If either tree is owned by another node.
        """
        self.__identity: Id = Id()
        self.__event: Event = Event()
        if identity is not None:
            self.identity = identity
        if event is not None:
            self.event = event

    @property
    def identity(self) -> Id:
        """The identity tree of the stamp."""
        return self.__identity

    @identity.setter
    def identity(self, identity: Id) -> None:
        """Replace the identity tree of the stamp."""
        if not isinstance(identity, Id):
            raise TypeError(
                f"Stamp identities must be of type Id. Got; {identity!r} of "
                f"{type(identity)}."
            )
        _check_root(identity, "identity")
        self.__identity = identity

    @property
    def event(self) -> Event:
        """The event tree of the stamp."""
        return self.__event

    @event.setter
    def event(self, event: Event) -> None:
        """Replace the event tree of the stamp."""
        if not isinstance(event, Event):
            raise TypeError(
                f"Stamp events must be of type Event. Got; {event!r} of "
                f"{type(event)}."
            )
        _check_root(event, "event")
        self.__event = event

    def __eq__(self, other: object) -> bool:
        """Whether the other stamp holds equal trees."""
        if not isinstance(other, Stamp):
            return NotImplemented
        return (self.__identity == other.identity
                and self.__event == other.event)

    __hash__ = None  # type: ignore

    def copy(self) -> "Stamp":
        """Return a deep copy of the stamp."""
        return Stamp(self.__identity.copy(), self.__event.copy())

    def __copy__(self) -> "Stamp":
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> "Stamp":
        return self.copy()

    def __repr__(self) -> str:
        """Return an instantiable string representation of the stamp."""
        return (f"{self.__class__.__name__}({self.__identity!r}, "
                f"{self.__event!r})")

    def __str__(self) -> str:
        """Return the stamp in compact notation."""
        return f"({self.__identity}, {self.__event})"
