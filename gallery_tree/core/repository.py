from __future__ import annotations

"""In-memory album repository.

Albums live in an arena keyed by id. Each album stores its parent's id;
children are found by querying the arena, so no object references another
and the hierarchy can be edited (or albums deleted underneath a running
build) without dangling references.

Example
-------

    repo = InMemoryContainerRepository()
    repo.add_scope(Scope(1, "Main gallery"))
    repo.add_container(Container(1, scope_id=1, title="All albums"))
    repo.add_container(Container(2, scope_id=1, title="Vacation", parent_id=1))
    repo.child_containers(1)  # -> [Container(id=2, ...)]
"""

from dataclasses import replace
import logging
import threading
from typing import Dict, Iterable, List, Optional, Sequence

from gallery_tree.core.exceptions import StaleReferenceError
from gallery_tree.core.models import Container, LoadResult, Scope

__all__ = ["InMemoryContainerRepository"]

logger = logging.getLogger(__name__)


def _display_order(container: Container):
    return (container.sort_order, container.title.lower(), container.id)


class InMemoryContainerRepository:
    """:class:`~gallery_tree.core.interfaces.ContainerRepository` over dicts."""

    def __init__(self, containers: Iterable[Container] = (), scopes: Iterable[Scope] = ()) -> None:
        self._containers: Dict[int, Container] = {}
        self._children: Dict[int, List[int]] = {}
        self._scopes: Dict[int, Scope] = {}
        self._lock = threading.RLock()
        for scope in scopes:
            self.add_scope(scope)
        for container in containers:
            self.add_container(container)

    # ------------------------------------------------------------------
    # Arena maintenance
    # ------------------------------------------------------------------
    def add_scope(self, scope: Scope) -> None:
        with self._lock:
            self._scopes[scope.id] = scope

    def add_container(self, container: Container) -> Container:
        """Store an album. Its parent must already be present."""
        with self._lock:
            if container.id in self._containers:
                raise ValueError(f"Container {container.id} already exists.")
            if container.parent_id is not None and container.parent_id not in self._containers:
                raise ValueError(
                    f"Parent {container.parent_id} of container {container.id} does not exist."
                )
            stored = replace(container, child_ids=None)
            self._containers[stored.id] = stored
            self._children.setdefault(stored.id, [])
            if stored.parent_id is None:
                scope = self._scopes.get(stored.scope_id)
                if scope is None:
                    self._scopes[stored.scope_id] = Scope(stored.scope_id, top_container_id=stored.id)
                elif scope.top_container_id is None:
                    self._scopes[stored.scope_id] = replace(scope, top_container_id=stored.id)
            else:
                self._children[stored.parent_id].append(stored.id)
            return stored

    def remove_container(self, container_id: int) -> None:
        """Delete an album and everything below it. Unknown ids are ignored."""
        with self._lock:
            container = self._containers.get(container_id)
            if container is None:
                return
            for child_id in list(self._children.get(container_id, [])):
                self.remove_container(child_id)
            self._children.pop(container_id, None)
            del self._containers[container_id]
            if container.parent_id is not None and container.parent_id in self._children:
                self._children[container.parent_id].remove(container_id)
            scope = self._scopes.get(container.scope_id)
            if scope is not None and scope.top_container_id == container_id:
                self._scopes[container.scope_id] = replace(scope, top_container_id=None)
            logger.debug("Removed container %s", container_id)

    def __contains__(self, container_id: object) -> bool:
        return container_id in self._containers

    # ------------------------------------------------------------------
    # ContainerRepository
    # ------------------------------------------------------------------
    def load(self, container_id: int, inflate_children: bool = False) -> LoadResult:
        with self._lock:
            container = self._containers.get(container_id)
            if container is None:
                return LoadResult(error=StaleReferenceError(
                    f"Container {container_id} does not exist.", container_id=container_id
                ))
            if inflate_children:
                ordered = self._sorted_children(container_id)
                container = replace(container, child_ids=tuple(c.id for c in ordered))
            return LoadResult(container=container)

    def has_any_child_container(self, container_id: int, exclude_private: bool = False) -> bool:
        with self._lock:
            return any(
                not (exclude_private and self._containers[i].is_private)
                for i in self._children.get(container_id, [])
            )

    def child_containers(self, container_id: int, sort: bool = True,
                         exclude_private: bool = False) -> Sequence[Container]:
        with self._lock:
            children = [self._containers[i] for i in self._children.get(container_id, [])]
            if exclude_private:
                children = [c for c in children if not c.is_private]
            if sort:
                children.sort(key=_display_order)
            return children

    def load_top_container(self, scope_id: int) -> Optional[Container]:
        with self._lock:
            scope = self._scopes.get(scope_id)
            if scope is None or scope.top_container_id is None:
                return None
            return self._containers.get(scope.top_container_id)

    def get_scope(self, scope_id: int) -> Optional[Scope]:
        with self._lock:
            return self._scopes.get(scope_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def ancestor_ids(self, container_id: int) -> List[int]:
        """Ids from the album's parent up to its scope's top album."""
        result: List[int] = []
        with self._lock:
            current = self._containers.get(container_id)
            while current is not None and current.parent_id is not None:
                result.append(current.parent_id)
                current = self._containers.get(current.parent_id)
        return result

    def _sorted_children(self, container_id: int) -> List[Container]:
        children = [self._containers[i] for i in self._children.get(container_id, [])]
        return sorted(children, key=_display_order)
