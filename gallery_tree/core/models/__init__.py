from __future__ import annotations

"""Shared data structures used across the gallery tree core.

This package exposes the value objects consumed by the tree builder: the
container variant, scopes, subjects and their roles, security actions and
the result type returned by repository loads. It is intentionally free of
I/O so that the contained objects can be reused in any context (unit-tests,
request handlers, CLI, etc.).
"""

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import FrozenSet, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from gallery_tree.core.exceptions import StaleReferenceError

__all__ = [
    "SecurityAction",
    "ALL_SECURITY_ACTIONS",
    "MatchMode",
    "ContainerKind",
    "Container",
    "Scope",
    "Role",
    "Subject",
    "LoadResult",
]


class SecurityAction(IntFlag):
    """Permissions a subject may hold on a container. Values combine with ``|``."""

    VIEW_ALBUM_OR_MEDIA_OBJECT = 1
    ADD_CHILD_ALBUM = 2
    ADD_MEDIA_OBJECT = 4
    EDIT_ALBUM = 8
    EDIT_MEDIA_OBJECT = 16
    DELETE_ALBUM = 32
    DELETE_CHILD_ALBUM = 64
    DELETE_MEDIA_OBJECT = 128
    SYNCHRONIZE = 256
    ADMINISTER_GALLERY = 512
    ADMINISTER_SITE = 1024
    HIDE_WATERMARK = 2048
    VIEW_ORIGINAL_MEDIA_OBJECT = 4096

    def split(self) -> List["SecurityAction"]:
        """Return the single actions contained in this value, lowest bit first."""
        return [action for action in _SINGLE_ACTIONS if self & action]

    @classmethod
    def is_valid(cls, value: int) -> bool:
        """True for any non-empty combination of defined actions."""
        return value != 0 and (value & ~int(ALL_SECURITY_ACTIONS)) == 0

    @classmethod
    def from_names(cls, names) -> "SecurityAction":
        """Combine actions given by name, e.g. ``["EDIT_ALBUM", "ADD_CHILD_ALBUM"]``."""
        combined = cls(0)
        for name in names:
            combined |= cls[str(name).strip().upper()]
        return combined


_SINGLE_ACTIONS: Tuple[SecurityAction, ...] = tuple(
    SecurityAction(1 << bit) for bit in range(13)
)

ALL_SECURITY_ACTIONS = SecurityAction(0)
for _action in _SINGLE_ACTIONS:
    ALL_SECURITY_ACTIONS |= _action
del _action


class MatchMode(Enum):
    """How several requested actions are combined."""

    ANY_OF = "any_of"
    ALL_OF = "all_of"


class ContainerKind(Enum):
    ALBUM = "album"
    VIRTUAL = "virtual"


@dataclass(frozen=True)
class Container:
    """A node of the album hierarchy.

    Containers never reference each other directly: ``parent_id`` links
    upward and children are found by asking the repository. A container with
    ``parent_id=None`` is the top album of its scope.

    ``child_ids`` is only populated when the container was loaded with its
    children inflated.
    """

    id: int
    scope_id: int
    title: str
    parent_id: Optional[int] = None
    kind: ContainerKind = ContainerKind.ALBUM
    is_private: bool = False
    sort_order: int = 0
    child_ids: Optional[Tuple[int, ...]] = None

    @property
    def is_virtual(self) -> bool:
        return self.kind is ContainerKind.VIRTUAL

    @property
    def is_top(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True)
class Scope:
    """A gallery: a top-level partition with its own top album."""

    id: int
    description: str = ""
    allow_anonymous_browsing: bool = True
    top_container_id: Optional[int] = None


@dataclass(frozen=True)
class Role:
    """A named grant of actions over a set of albums (and their descendants).

    ``scope_ids`` restricts ``ADMINISTER_GALLERY`` to the listed galleries.
    """

    name: str
    actions: SecurityAction = SecurityAction(0)
    container_ids: FrozenSet[int] = frozenset()
    scope_ids: FrozenSet[int] = frozenset()

    def allows(self, action: SecurityAction) -> bool:
        return bool(self.actions & action)


@dataclass(frozen=True)
class Subject:
    """The viewer a tree is built for."""

    user_name: Optional[str] = None
    roles: Tuple[Role, ...] = field(default_factory=tuple)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_name)

    @classmethod
    def anonymous(cls) -> "Subject":
        return cls()


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a repository load: either a container or the reason it is missing."""

    container: Optional[Container] = None
    error: Optional["StaleReferenceError"] = None

    @property
    def ok(self) -> bool:
        return self.container is not None
