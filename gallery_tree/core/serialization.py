from __future__ import annotations

"""jsTree representation of a :class:`Tree`.

Each node becomes::

    {"text": ..., "state": {"opened", "disabled", "selected"},
     "a_attr": {"href", "title"}, "li_attr": {"id", "data-id", "class"},
     "children": [...] | true}

Falsy values are left out. ``children`` is omitted for a node without
children, ``true`` for a node whose children exist but were not
materialized (jsTree then fetches them lazily), and a list otherwise.
"""

import json
from typing import Any, Dict, List

from gallery_tree.core.models.tree import Tree, TreeNode

__all__ = ["CHECKBOX_HIDDEN_CSS_CLASS", "node_to_jstree", "tree_to_jstree", "tree_to_json"]

CHECKBOX_HIDDEN_CSS_CLASS = "jstree-checkbox-hidden"


def _compact(mapping: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in mapping.items() if v}


def node_to_jstree(node: TreeNode, checkbox_mode_enabled: bool = False) -> Dict[str, Any]:
    css_classes = list(node.css_classes)
    if checkbox_mode_enabled and not node.show_checkbox and CHECKBOX_HIDDEN_CSS_CLASS not in css_classes:
        css_classes.append(CHECKBOX_HIDDEN_CSS_CLASS)

    result: Dict[str, Any] = {"text": node.text}
    state = _compact({
        "opened": node.expanded,
        "disabled": not node.selectable,
        "selected": node.selected,
    })
    if state:
        result["state"] = state
    a_attr = _compact({"href": node.navigate_url, "title": node.tooltip})
    if a_attr:
        result["a_attr"] = a_attr
    result["li_attr"] = _compact({
        "id": node.id,
        "data-id": node.data_id,
        "class": " ".join(css_classes),
    })

    if node.children:
        result["children"] = [node_to_jstree(c, checkbox_mode_enabled) for c in node.children]
    elif node.has_children:
        result["children"] = True
    return _compact(result)


def tree_to_jstree(tree: Tree) -> List[Dict[str, Any]]:
    return [node_to_jstree(root, tree.checkbox_mode_enabled) for root in tree.roots]


def tree_to_json(tree: Tree) -> str:
    return json.dumps(tree_to_jstree(tree), ensure_ascii=False)
