from __future__ import annotations

"""Tree build exception classes.

Two of these abort a build (:class:`FatalConfigurationError` and
:class:`StructuralConsistencyError`). :class:`StaleReferenceError` is never
raised out of a build; it is handed to the error recorder so the build can
carry on without the vanished container.
"""

from typing import Any, Dict, Optional


class TreeBuildError(Exception):
    """Base exception for all tree build errors."""

    def __init__(self, message: str, container_id: Optional[int] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.container_id = container_id
        self.cause = cause

    def __str__(self) -> str:
        if self.container_id is not None:
            return f"[Container: {self.container_id}] {super().__str__()}"
        return super().__str__()


class FatalConfigurationError(TreeBuildError):
    """Raised when the requested options cannot produce a tree.

    This covers a ``root_container_id`` that does not exist and option sets
    that contradict themselves (depth out of range, no capabilities, ...).
    """
    pass


class StructuralConsistencyError(TreeBuildError):
    """Raised when an ancestor of a pinned container is missing from its
    parent's freshly materialized children.

    The containment hierarchy is assumed acyclic and consistent; reaching
    this error means that assumption was broken.
    """

    def __init__(self, message: str, container_id: Optional[int] = None,
                 parent_id: Optional[int] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, container_id, cause)
        self.parent_id = parent_id


class StaleReferenceError(TreeBuildError):
    """A referenced container could not be loaded (most likely deleted).

    ``data`` holds free-form diagnostic notes added by whoever observed the
    failure, e.g. which pinned id was being reconciled.
    """

    def __init__(self, message: str, container_id: Optional[int] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, container_id, cause)
        self.data: Dict[str, Any] = {}

    def add_data(self, key: str, value: Any) -> None:
        """Attach a diagnostic note unless one already exists under ``key``."""
        if key not in self.data:
            self.data[key] = value


__all__ = [
    "TreeBuildError",
    "FatalConfigurationError",
    "StructuralConsistencyError",
    "StaleReferenceError",
]
