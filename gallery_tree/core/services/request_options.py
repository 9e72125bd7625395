from __future__ import annotations

"""Translate a tree request query string into :class:`BuildOptions`.

Accepted parameters (anything else rejects the request)::

    id=0&gid=all&secaction=6&sc=false&navurl=&levels=2&includealbum=true&idtoselect[]=220&idtoselect[]=99

``id``
    Root album id; 0 means "no root album, use galleries".
``gid``
    A gallery id, or ``all`` for every gallery the resolver offers.
``secaction``
    Required capabilities as the integer value of :class:`SecurityAction`.
``sc``
    Checkbox mode (``true``/``false``).
``navurl``
    Navigation URL template.
``levels``
    Depth.
``includealbum``
    Render the root album itself.
``idtoselect`` / ``idtoselect[]``
    Pinned album ids, repeatable.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl

from gallery_tree.core.exceptions import FatalConfigurationError
from gallery_tree.core.models import Scope, SecurityAction
from gallery_tree.core.models.options import BuildOptions

__all__ = ["parse_tree_request", "ScopeResolver"]

logger = logging.getLogger(__name__)

# Called with a gallery id, or None for "all galleries".
ScopeResolver = Callable[[Optional[int]], Sequence[Scope]]

_PINNED_KEYS = {"idtoselect", "idtoselect[]"}


def parse_tree_request(
    query: Union[str, Mapping[str, Any]],
    scope_resolver: ScopeResolver,
    defaults: Optional[Dict[str, Any]] = None,
) -> BuildOptions:
    """Parse ``query`` into options, raising :class:`FatalConfigurationError` on bad input.

    ``defaults`` is forwarded to :meth:`BuildOptions.from_config`.
    """
    pairs = _pairs(query)
    if not pairs:
        raise FatalConfigurationError("Tree request has no parameters.")

    values: Dict[str, Any] = {}
    pinned: List[int] = []
    root_id = 0
    gallery: Optional[Tuple[Optional[int]]] = None

    for name, raw in pairs:
        value = raw.strip()
        if name == "id":
            root_id = _parse_int(name, value)
        elif name == "gid":
            gallery = (None,) if value.lower() == "all" else (_parse_int(name, value),)
        elif name == "secaction":
            action = _parse_int(name, value)
            if not SecurityAction.is_valid(action):
                raise FatalConfigurationError(f"Invalid security action {action} in tree request.")
            values["required_capabilities"] = SecurityAction(action)
        elif name == "sc":
            values["checkbox_mode_enabled"] = _parse_bool(name, value)
        elif name == "navurl":
            values["navigate_url_template"] = value or None
        elif name == "levels":
            values["depth"] = _parse_int(name, value)
        elif name == "includealbum":
            values["include_root_container"] = _parse_bool(name, value)
        elif name in _PINNED_KEYS:
            pinned.append(_parse_int(name, value))
        else:
            raise FatalConfigurationError(f"Unexpected tree request parameter {name!r}.")

    if root_id > 0:
        values["root_container_id"] = root_id
    elif gallery is not None:
        values["scopes"] = tuple(scope_resolver(gallery[0]))
    values["pinned_ids"] = frozenset(pinned)

    options = BuildOptions.from_config(defaults, **values)
    logger.debug("Parsed tree request into %s", options)
    return options


def _pairs(query: Union[str, Mapping[str, Any]]) -> List[Tuple[str, str]]:
    if isinstance(query, Mapping):
        pairs: List[Tuple[str, str]] = []
        for key, value in query.items():
            if isinstance(value, (list, tuple)):
                pairs.extend((key, str(v)) for v in value)
            else:
                pairs.append((key, "" if value is None else str(value)))
        return pairs

    text = (query or "").lstrip("?")
    if not text:
        return []
    try:
        return parse_qsl(text, keep_blank_values=True, strict_parsing=True)
    except ValueError as exc:
        raise FatalConfigurationError(f"Malformed tree request {query!r}.", cause=exc) from exc


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise FatalConfigurationError(f"Parameter {name!r} must be an integer, got {value!r}.",
                                      cause=exc) from exc


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise FatalConfigurationError(f"Parameter {name!r} must be true or false, got {value!r}.")
