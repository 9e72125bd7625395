from __future__ import annotations

"""Service that turns an album hierarchy into a permission-filtered tree.

A build runs in three phases:

1. Resolve the forest roots: one album (or its children) when a root album
   is requested, otherwise the top album of every requested gallery.
2. Materialize each viewable root and descend up to ``options.depth``
   levels. Albums the viewer may not see are left out at every level, with
   nothing hinting that they exist.
3. Reconcile pinned albums lying below the materialized depth: walk up from
   each one to the nearest ancestor already in the tree, then descend again
   adding every album on the path together with its siblings.

Only two errors escape a build: :class:`FatalConfigurationError` for a root
album that does not exist, and :class:`StructuralConsistencyError` when an
ancestor chain turns out to be broken. Albums that vanish while a build is
running are reported to the error recorder and skipped.

Examples
--------

    service = TreeBuilderService(repository, oracle)
    tree = service.build(BuildOptions(scopes=(gallery,), depth=2), subject)
"""

import logging
from typing import List, Optional, Sequence, Tuple

from gallery_tree.core.event_log import LoggingErrorRecorder
from gallery_tree.core.exceptions import (
    FatalConfigurationError,
    StaleReferenceError,
    StructuralConsistencyError,
)
from gallery_tree.core.interfaces import (
    ContainerRepository,
    ErrorRecorder,
    PermissionOracle,
    Sanitizer,
)
from gallery_tree.core.models import Container, MatchMode, SecurityAction, Subject
from gallery_tree.core.models.options import BuildOptions
from gallery_tree.core.models.tree import ROOT_NODE_CSS_CLASS, Tree, TreeNode, node_id_for
from gallery_tree.core.sanitizer import HtmlSanitizer
from gallery_tree.core.utils import expand_navigate_url, expand_root_label

__all__ = ["TreeBuilderService", "build_tree", "PINNED_INFO_KEY", "RECONCILIATION_STEP_KEY"]

logger = logging.getLogger(__name__)

PINNED_INFO_KEY = "tree_pinned_container_info"
RECONCILIATION_STEP_KEY = "reconciliation_step"


class TreeBuilderService:
    """Builds :class:`Tree` instances from a repository and a permission oracle.

    The service keeps no state between builds; every call to :meth:`build`
    works on its own :class:`_TreeBuild`.
    """

    def __init__(
        self,
        repository: ContainerRepository,
        oracle: PermissionOracle,
        sanitizer: Optional[Sanitizer] = None,
        error_recorder: Optional[ErrorRecorder] = None,
    ) -> None:
        self._repository = repository
        self._oracle = oracle
        self._sanitizer = sanitizer or HtmlSanitizer()
        self._error_recorder = error_recorder or LoggingErrorRecorder()

    def build(self, options: BuildOptions, subject: Subject) -> Tree:
        """Build the tree described by ``options`` as seen by ``subject``."""
        logger.info(
            "Tree build: root=%s include_root=%s scopes=%s depth=%s pinned=%s user=%s",
            options.root_container_id,
            options.include_root_container,
            [s.id for s in options.scopes],
            options.depth,
            sorted(options.pinned_ids),
            subject.user_name or "<anonymous>",
        )
        tree = _TreeBuild(self, options, subject).run()
        logger.info("Tree build OK: roots=%d nodes=%d", len(tree.roots), tree.node_count())
        return tree


def build_tree(
    options: BuildOptions,
    subject: Subject,
    repository: ContainerRepository,
    oracle: PermissionOracle,
    sanitizer: Optional[Sanitizer] = None,
    error_recorder: Optional[ErrorRecorder] = None,
) -> Tree:
    """Convenience wrapper around :meth:`TreeBuilderService.build`."""
    return TreeBuilderService(repository, oracle, sanitizer, error_recorder).build(options, subject)


class _TreeBuild:
    """State of a single build. Discarded once the tree is returned."""

    def __init__(self, service: TreeBuilderService, options: BuildOptions, subject: Subject) -> None:
        self._repository = service._repository
        self._oracle = service._oracle
        self._sanitizer = service._sanitizer
        self._error_recorder = service._error_recorder
        self._options = options
        self._subject = subject
        self._tree = Tree(checkbox_mode_enabled=options.checkbox_mode_enabled)

    def run(self) -> Tree:
        for container in self._resolve_forest_roots():
            self._add_root_node(container)
        self._reconcile_pinned()
        return self._tree

    # -------------------------------------------------------------------------
    # Root resolution
    # -------------------------------------------------------------------------

    def _resolve_forest_roots(self) -> List[Container]:
        options = self._options
        if options.single_root_mode:
            result = self._repository.load(options.root_container_id, inflate_children=True)
            if not result.ok:
                raise FatalConfigurationError(
                    f"Cannot build a tree rooted at container {options.root_container_id}: it does not exist.",
                    container_id=options.root_container_id,
                    cause=result.error,
                ) from result.error
            root = result.container
            if options.include_root_container:
                return [root]
            return self._load_children(root)

        roots: List[Container] = []
        for scope in options.scopes:
            top = self._repository.load_top_container(scope.id)
            if top is None:
                logger.debug("Scope %s has no top container; skipped", scope.id)
                continue
            roots.append(top)
        return roots

    # -------------------------------------------------------------------------
    # Node construction
    # -------------------------------------------------------------------------

    def _add_root_node(self, container: Container) -> None:
        if not self._can_view(container):
            return

        options = self._options
        label = self._root_label(container)
        node = self._new_node(container, label)
        node.expanded = options.depth > 1
        if container.is_top:
            node.add_css_class(ROOT_NODE_CSS_CLASS)
        self._apply_selectability(node, container, parent=None)
        node.selected = container.id in options.pinned_ids
        self._tree.add_root(node)

        if options.depth == 1:
            if container.is_top and not options.single_root_mode:
                # Listing galleries: probing each top album for children is
                # expensive and they are practically never empty.
                node.has_children = True
            else:
                node.has_children = self._has_viewable_child(container.id)
        else:
            self._attach_children(
                self._child_containers(container.id),
                node,
                expand=options.depth > 2,
                levels=options.depth - 1,
            )

    def _attach_children(self, containers: Sequence[Container], parent: TreeNode,
                         expand: bool, levels: int = 1) -> None:
        """Add a node for each viewable container below ``parent``.

        ``levels`` counts the levels to materialize including ``containers``
        themselves. A pinned container always gets its own children too.
        """
        for container in containers:
            if not self._can_view(container):
                continue

            node = self._new_node(container, self._sanitizer.strip_markup(container.title))
            node.expanded = expand
            self._apply_selectability(node, container, parent=parent)

            child_levels = levels - 1
            if container.id in self._options.pinned_ids:
                node.expanded = True
                node.selected = True
                child_levels = max(child_levels, 1)

            if child_levels > 0:
                self._attach_children(
                    self._child_containers(container.id),
                    node,
                    expand=child_levels > 1,
                    levels=child_levels,
                )
            else:
                node.has_children = self._has_viewable_child(container.id)

            parent.add_child(node)

    def _load_children(self, root: Container) -> List[Container]:
        """Children of the root album, in the order its inflated load lists them."""
        children: List[Container] = []
        for child_id in root.child_ids or ():
            result = self._repository.load(child_id)
            if result.ok:
                children.append(result.container)
            else:
                logger.debug("Child %s of root container %s vanished; skipped", child_id, root.id)
        return children

    def _child_containers(self, container_id: int) -> Sequence[Container]:
        return self._repository.child_containers(
            container_id, sort=True, exclude_private=not self._subject.is_authenticated
        )

    def _has_viewable_child(self, container_id: int) -> bool:
        """True when at least one child album would be rendered for the viewer."""
        exclude_private = not self._subject.is_authenticated
        if not self._repository.has_any_child_container(container_id, exclude_private=exclude_private):
            return False
        return any(self._can_view(c) for c in self._child_containers(container_id))

    def _new_node(self, container: Container, text: str) -> TreeNode:
        return TreeNode(
            id=node_id_for(container.id),
            data_id=str(container.id),
            text=text,
            tooltip=text,
        )

    def _root_label(self, container: Container) -> str:
        description = ""
        scope = next((s for s in self._options.scopes if s.id == container.scope_id), None)
        if scope is None:
            scope = self._repository.get_scope(container.scope_id)
        if scope is not None:
            description = scope.description
        prefix = expand_root_label(self._options.root_label_template, container.scope_id, description)
        return self._sanitizer.strip_markup(prefix + container.title)

    def _apply_selectability(self, node: TreeNode, container: Container,
                             parent: Optional[TreeNode]) -> None:
        """Links are always selectable and never show a checkbox; anything
        else is selectable when it is a real album the viewer holds the
        required capabilities for.

        A checkbox is only offered below a parent that does not show one.
        """
        url = None if container.is_virtual else expand_navigate_url(
            self._options.navigate_url_template, container.id
        )
        if url:
            node.navigate_url = url
            node.selectable = True
            node.show_checkbox = False
            return

        node.selectable = not container.is_virtual and self._has_required_capabilities(container)
        if self._options.checkbox_mode_enabled and (parent is None or not parent.show_checkbox):
            node.show_checkbox = node.selectable

    # -------------------------------------------------------------------------
    # Authorization
    # -------------------------------------------------------------------------

    def _can_view(self, container: Container) -> bool:
        return self._oracle.is_authorized(
            SecurityAction.VIEW_ALBUM_OR_MEDIA_OBJECT,
            self._subject,
            container.id,
            container.scope_id,
            container.is_private,
            container.is_virtual,
            MatchMode.ANY_OF,
        )

    def _has_required_capabilities(self, container: Container) -> bool:
        return self._oracle.is_authorized(
            self._options.required_capabilities,
            self._subject,
            container.id,
            container.scope_id,
            container.is_private,
            container.is_virtual,
            self._options.match_mode,
        )

    # -------------------------------------------------------------------------
    # Pinned-path reconciliation
    # -------------------------------------------------------------------------

    def _reconcile_pinned(self) -> None:
        if not self._options.pinned_ids:
            return
        if not self._tree.roots:
            logger.debug("No root nodes; pinned containers cannot be attached")
            return
        for pinned_id in sorted(self._options.pinned_ids):
            if self._tree.find_node_by_data_id(str(pinned_id)) is not None:
                continue
            self._splice_pinned(pinned_id)

    def _splice_pinned(self, pinned_id: int) -> None:
        result = self._repository.load(pinned_id)
        if not result.ok:
            self._record_stale(result.error, pinned_id, "load pinned container")
            return
        container = result.container

        if not (self._can_view(container) and self._has_required_capabilities(container)):
            logger.debug("Pinned container %s not authorized for viewer; skipped", pinned_id)
            return

        found = self._path_to_existing_node(container, pinned_id)
        if found is None:
            return
        existing, path = found

        if not all(self._can_view(c) for c in path):
            logger.debug("Path to pinned container %s crosses a hidden container; skipped", pinned_id)
            return

        self._splice_path(existing, path)

    def _path_to_existing_node(self, container: Container,
                               pinned_id: int) -> Optional[Tuple[TreeNode, List[Container]]]:
        """Walk up from ``container`` to the nearest ancestor already in the tree.

        Returns that ancestor's node and a stack of the containers below it,
        whose last item is the ancestor's child on the path and whose first
        item is ``container``. Returns None when no ancestor is in the tree.
        """
        stack: List[Container] = [container]
        current = container
        while current.parent_id is not None:
            result = self._repository.load(current.parent_id)
            if not result.ok:
                self._record_stale(result.error, pinned_id, "walk ancestors")
                return None
            parent = result.container
            stack.append(parent)
            existing = self._tree.find_node_by_data_id(str(parent.id))
            if existing is not None:
                stack.pop()
                return existing, stack
            current = parent

        logger.debug("No ancestor of pinned container %s is in the tree; skipped", pinned_id)
        return None

    def _splice_path(self, existing: TreeNode, stack: List[Container]) -> None:
        current = existing
        current.expanded = True

        while stack:
            container = stack.pop()
            if not current.children:
                # Show the whole sibling group, not just the path
                self._attach_children(
                    self._child_containers(int(current.data_id)),
                    current,
                    expand=False,
                )
            match = current.find_child_by_data_id(str(container.id))
            if match is None:
                raise StructuralConsistencyError(
                    f"Container {container.id} is not a child of the tree node for container {current.data_id}.",
                    container_id=container.id,
                    parent_id=int(current.data_id),
                )
            match.expanded = True
            current = match

    def _record_stale(self, error: Optional[StaleReferenceError], pinned_id: int, step: str) -> None:
        if error is None:
            error = StaleReferenceError(f"Container {pinned_id} could not be loaded.", container_id=pinned_id)
        error.add_data(
            PINNED_INFO_KEY,
            f"Album {pinned_id} was one of the pinned containers of the tree options. "
            "It may have been deleted by another user just before this code ran.",
        )
        error.add_data(RECONCILIATION_STEP_KEY, step)
        self._error_recorder.record_error(error)
