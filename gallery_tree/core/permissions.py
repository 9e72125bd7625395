from __future__ import annotations

"""Role-based permission oracle.

Rules:

- Virtual albums are always viewable; only the administer actions are
  checked for them.
- Anonymous subjects may only view (or view originals of) non-private
  albums, and only in galleries that allow anonymous browsing.
- Authenticated subjects need at least one role granting the action on the
  album or one of its ancestors. ``ADMINISTER_SITE`` grants everything except
  ``HIDE_WATERMARK``; ``ADMINISTER_GALLERY`` grants everything in the
  role's galleries except ``HIDE_WATERMARK`` and ``ADMINISTER_SITE``.
- Several requested actions combine per :class:`MatchMode`.
"""

import logging
from typing import Callable, Iterable, Optional

from gallery_tree.core.models import MatchMode, Role, Scope, SecurityAction, Subject

__all__ = ["RoleBasedPermissionOracle"]

logger = logging.getLogger(__name__)

_ADMIN_ACTIONS = SecurityAction.ADMINISTER_SITE | SecurityAction.ADMINISTER_GALLERY
_ANONYMOUS_ACTIONS = (
    SecurityAction.VIEW_ALBUM_OR_MEDIA_OBJECT | SecurityAction.VIEW_ORIGINAL_MEDIA_OBJECT
)


class RoleBasedPermissionOracle:
    """:class:`~gallery_tree.core.interfaces.PermissionOracle` driven by :class:`Role` grants.

    Parameters
    ----------
    ancestors_of
        Returns the ancestor ids of an album, nearest first. Roles assigned to
        an ancestor apply to all its descendants.
    scope_lookup
        Returns the :class:`Scope` for a gallery id; consulted for the
        anonymous-browsing switch. Unknown galleries allow browsing.
    """

    def __init__(
        self,
        ancestors_of: Callable[[int], Iterable[int]],
        scope_lookup: Optional[Callable[[int], Optional[Scope]]] = None,
    ) -> None:
        self._ancestors_of = ancestors_of
        self._scope_lookup = scope_lookup

    @classmethod
    def for_repository(cls, repository) -> "RoleBasedPermissionOracle":
        """Wire the oracle to an :class:`InMemoryContainerRepository`."""
        return cls(repository.ancestor_ids, repository.get_scope)

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
        actions = SecurityAction(actions)
        requested = actions.split()
        if not requested:
            return False

        if is_virtual and not (actions & _ADMIN_ACTIONS):
            return True

        if subject.is_authenticated and not subject.roles and not is_virtual:
            return False

        def check(action: SecurityAction) -> bool:
            if subject.is_authenticated:
                return self._authenticated_allows(action, subject.roles, container_id, scope_id)
            return self._anonymous_allows(action, scope_id, is_private)

        if match_mode is MatchMode.ALL_OF:
            return all(check(action) for action in requested)
        return any(check(action) for action in requested)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _anonymous_allows(self, action: SecurityAction, scope_id: int, is_private: bool) -> bool:
        if not (action & _ANONYMOUS_ACTIONS) or is_private:
            return False
        scope = self._scope_lookup(scope_id) if self._scope_lookup else None
        return scope is None or scope.allow_anonymous_browsing

    def _authenticated_allows(self, action: SecurityAction, roles: Iterable[Role],
                              container_id: int, scope_id: int) -> bool:
        lineage = None
        for role in roles:
            if action != SecurityAction.HIDE_WATERMARK and role.allows(SecurityAction.ADMINISTER_SITE):
                return True
            if (action not in (SecurityAction.HIDE_WATERMARK, SecurityAction.ADMINISTER_SITE)
                    and role.allows(SecurityAction.ADMINISTER_GALLERY)
                    and scope_id in role.scope_ids):
                return True
            if not role.allows(action):
                continue
            if lineage is None:
                lineage = {container_id, *self._ancestors_of(container_id)}
            if role.container_ids & lineage:
                return True
        return False
