from __future__ import annotations

"""Collaborator interfaces consumed by the tree builder.

The builder never loads albums, evaluates roles or writes logs itself; it
talks to objects satisfying these protocols. Reference implementations live
in :mod:`gallery_tree.core.repository`, :mod:`gallery_tree.core.permissions`,
:mod:`gallery_tree.core.sanitizer` and :mod:`gallery_tree.core.event_log`.
"""

from typing import Optional, Protocol, Sequence, runtime_checkable

from gallery_tree.core.models import (
    Container,
    LoadResult,
    MatchMode,
    Scope,
    SecurityAction,
    Subject,
)

__all__ = [
    "ContainerRepository",
    "PermissionOracle",
    "Sanitizer",
    "ErrorRecorder",
]


@runtime_checkable
class ContainerRepository(Protocol):
    """Read-only access to the album hierarchy."""

    def load(self, container_id: int, inflate_children: bool = False) -> LoadResult:
        """Load one album.

        Returns a :class:`LoadResult` whose ``error`` is a
        :class:`~gallery_tree.core.exceptions.StaleReferenceError` when the
        album does not exist. Never raises for a missing album. With
        ``inflate_children`` the container's ``child_ids`` lists its direct
        children in display order.
        """
        ...

    def has_any_child_container(self, container_id: int, exclude_private: bool = False) -> bool:
        """Cheap existence probe: does the album have at least one child album?

        With ``exclude_private`` only non-private children count.
        """
        ...

    def child_containers(self, container_id: int, sort: bool = True,
                         exclude_private: bool = False) -> Sequence[Container]:
        """Direct child albums, in display order when ``sort`` is True.

        Private albums are left out when ``exclude_private`` is set.
        """
        ...

    def load_top_container(self, scope_id: int) -> Optional[Container]:
        """The designated top album of a gallery, or None if it has none."""
        ...

    def get_scope(self, scope_id: int) -> Optional[Scope]:
        ...


@runtime_checkable
class PermissionOracle(Protocol):
    """Yes/no answers about what a subject may do with an album."""

    def is_authorized(
        self,
        actions: SecurityAction,
        subject: Subject,
        container_id: int,
        scope_id: int,
        is_private: bool,
        is_virtual: bool,
        match_mode: MatchMode = MatchMode.ANY_OF,
    ) -> bool:
        ...


@runtime_checkable
class Sanitizer(Protocol):
    def strip_markup(self, text: str) -> str:
        ...


@runtime_checkable
class ErrorRecorder(Protocol):
    """Fire-and-forget diagnostic sink. Implementations must never raise."""

    def record_error(self, error: BaseException, scope_id: Optional[int] = None) -> None:
        ...
