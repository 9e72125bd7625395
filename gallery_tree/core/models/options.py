from __future__ import annotations

"""Immutable input of a tree build."""

from dataclasses import dataclass, fields
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from gallery_tree.core.exceptions import FatalConfigurationError
from gallery_tree.core.models import MatchMode, Scope, SecurityAction

__all__ = ["BuildOptions"]


@dataclass(frozen=True)
class BuildOptions:
    """Settings that decide what a tree build renders.

    Attributes
    ----------
    root_container_id
        Build from this single album instead of a forest of scopes. ``scopes``
        is ignored when set.
    include_root_container
        With ``root_container_id``: render the album itself (True) or only its
        children (False). Ignored otherwise.
    scopes
        Galleries whose top albums become forest roots.
    depth
        Levels to materialize, counting the forest roots as level one.
    pinned_ids
        Albums that must end up visible, expanded and selected.
    navigate_url_template
        When set, nodes become links. ``{ContainerId}`` is replaced by the
        album id; without that token ``aid=<id>`` is added to the query string.
    root_label_template
        Prefix of forest root labels. ``{ScopeId}`` and ``{ScopeDescription}``
        are substituted.
    required_capabilities
        Actions the viewer needs for a node to be selectable.
    """

    root_container_id: Optional[int] = None
    include_root_container: bool = False
    scopes: Tuple[Scope, ...] = ()
    depth: int = 1
    pinned_ids: FrozenSet[int] = frozenset()
    navigate_url_template: Optional[str] = None
    root_label_template: str = ""
    checkbox_mode_enabled: bool = False
    required_capabilities: SecurityAction = SecurityAction.VIEW_ALBUM_OR_MEDIA_OBJECT
    match_mode: MatchMode = MatchMode.ANY_OF

    def __post_init__(self) -> None:
        # Normalise caller-friendly iterables into hashable immutable ones
        object.__setattr__(self, "pinned_ids", frozenset(int(i) for i in self.pinned_ids))
        object.__setattr__(self, "scopes", tuple(self.scopes or ()))
        if not self.navigate_url_template:
            object.__setattr__(self, "navigate_url_template", None)

        if isinstance(self.depth, bool) or not isinstance(self.depth, int) or self.depth < 1:
            raise FatalConfigurationError(f"Tree depth must be an integer >= 1, got {self.depth!r}.")
        if not SecurityAction.is_valid(int(self.required_capabilities)):
            raise FatalConfigurationError(
                f"Invalid required capabilities: {int(self.required_capabilities)}."
            )
        if self.root_container_id is not None and self.root_container_id <= 0:
            raise FatalConfigurationError(
                f"Root container id must be positive, got {self.root_container_id}."
            )

    @property
    def single_root_mode(self) -> bool:
        return self.root_container_id is not None

    @classmethod
    def from_config(cls, defaults: Optional[Dict[str, Any]] = None, **overrides: Any) -> "BuildOptions":
        """Create options from the ``tree_defaults`` config section plus overrides.

        ``defaults`` replaces the section read through :class:`ConfigManager`;
        tests pass it explicitly to stay independent from user overrides.
        """
        if defaults is None:
            from gallery_tree.config import ConfigManager
            defaults = ConfigManager().get_tree_defaults()

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise FatalConfigurationError(f"Unknown tree options: {', '.join(sorted(unknown))}.")

        values: Dict[str, Any] = {}
        for name in ("depth", "include_root_container", "checkbox_mode_enabled",
                     "root_label_template", "navigate_url_template"):
            if defaults.get(name) is not None:
                values[name] = defaults[name]

        capabilities = defaults.get("required_capabilities")
        if capabilities:
            values["required_capabilities"] = _capabilities_from_config(capabilities)
        mode = defaults.get("match_mode")
        if mode:
            try:
                values["match_mode"] = MatchMode(str(mode).lower())
            except ValueError as exc:
                raise FatalConfigurationError(f"Unknown match mode {mode!r}.", cause=exc) from exc

        values.update(overrides)
        options = cls(**values)

        max_depth = defaults.get("max_depth")
        if max_depth is not None and options.depth > int(max_depth):
            raise FatalConfigurationError(
                f"Tree depth {options.depth} exceeds the configured maximum of {max_depth}."
            )
        return options


def _capabilities_from_config(value: Any) -> SecurityAction:
    if isinstance(value, int):
        return SecurityAction(value)
    names: Iterable[Any] = [value] if isinstance(value, str) else value
    try:
        return SecurityAction.from_names(names)
    except KeyError as exc:
        raise FatalConfigurationError(f"Unknown security action {exc.args[0]!r}.", cause=exc) from exc
