"""Top-level package for the gallery tree builder.

Front-ends (request handlers, CLI, tests) should only depend on the public
API exposed here rather than importing internal modules directly.
"""

from .core.models import Subject  # re-export for convenience
from .core.models.options import BuildOptions
from .core.models.tree import Tree, TreeNode
from .core.services import TreeBuilderService, build_tree

__all__: list[str] = [
    "BuildOptions",
    "Subject",
    "Tree",
    "TreeNode",
    "TreeBuilderService",
    "build_tree",
]
