from __future__ import annotations

"""Output model of a tree build: nodes and the forest that owns them."""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

__all__ = ["TreeNode", "Tree", "ROOT_NODE_CSS_CLASS", "node_id_for"]

ROOT_NODE_CSS_CLASS = "jstree-root-node"
NODE_ID_PREFIX = "tv_"


def node_id_for(container_id: int) -> str:
    """Return the stable node id derived from a container id."""
    return f"{NODE_ID_PREFIX}{container_id}"


@dataclass
class TreeNode:
    """One visual node of an album tree.

    Attributes
    ----------
    id
        Node id, unique within the tree (``tv_<container id>``).
    data_id
        String form of the backing container id; used for lookups.
    text, tooltip
        Display strings with markup already stripped.
    navigate_url
        When set, the node is a plain link: always selectable, never a checkbox.
    has_children
        True when the container has at least one child album, whether or not
        those children have been materialized.
    """

    id: str
    data_id: str
    text: str = ""
    tooltip: str = ""
    navigate_url: Optional[str] = None
    selectable: bool = False
    show_checkbox: bool = False
    selected: bool = False
    expanded: bool = False
    has_children: bool = False
    css_classes: List[str] = field(default_factory=list)
    children: List["TreeNode"] = field(default_factory=list)

    def add_child(self, node: "TreeNode") -> None:
        """Append a child node; a node with attached children always reports them."""
        self.children.append(node)
        self.has_children = True

    def add_css_class(self, css_class: str) -> None:
        if css_class and css_class.strip() and css_class not in self.css_classes:
            self.css_classes.append(css_class)

    def find_child_by_data_id(self, data_id: str) -> Optional["TreeNode"]:
        for child in self.children:
            if child.data_id == data_id:
                return child
        return None

    def iter_nodes(self) -> Iterator["TreeNode"]:
        """Yield this node and all its descendants, depth-first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()


@dataclass
class Tree:
    """A forest of :class:`TreeNode` plus tree-wide settings."""

    roots: List[TreeNode] = field(default_factory=list)
    checkbox_mode_enabled: bool = False

    def add_root(self, node: TreeNode) -> None:
        self.roots.append(node)

    def iter_nodes(self) -> Iterator[TreeNode]:
        for root in self.roots:
            yield from root.iter_nodes()

    def find_node_by_data_id(self, data_id) -> Optional[TreeNode]:
        """Return the first node (depth-first) whose ``data_id`` matches, or None."""
        wanted = str(data_id)
        for node in self.iter_nodes():
            if node.data_id == wanted:
                return node
        return None

    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())
