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

"""Module for all tree invariant violation errors."""

__copyright__ = "Copyright (C) 2024 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "ItcTreeInternalError",
    "TagError",
    "EmptySlotError",
    "OwnershipError"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


class ItcTreeInternalError(Exception):
    """Base class for all internal invariant violations of itc trees."""
    pass


class TagError(ItcTreeInternalError, TypeError):
    """Accessing the payload of a variant node that is not currently active."""
    pass


class EmptySlotError(ItcTreeInternalError, LookupError):
    """Accessing a child slot of an internal node that is not occupied."""
    pass


class OwnershipError(ItcTreeInternalError, ValueError):
    """Attaching a node that would be shared or would create a cycle."""
    pass
