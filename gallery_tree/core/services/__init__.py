from __future__ import annotations

"""High-level orchestration services (tree building, request parsing)."""

from .tree_builder_service import TreeBuilderService, build_tree  # noqa: F401
from .request_options import parse_tree_request  # noqa: F401

__all__: list[str] = [
    "TreeBuilderService",
    "build_tree",
    "parse_tree_request",
]
