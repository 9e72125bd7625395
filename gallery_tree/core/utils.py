from __future__ import annotations

"""Small helpers shared by the builder, option parsing and serialization."""

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

__all__ = ["add_query_parameter", "expand_navigate_url", "expand_root_label"]

CONTAINER_ID_TOKEN = "{ContainerId}"
SCOPE_ID_TOKEN = "{ScopeId}"
SCOPE_DESCRIPTION_TOKEN = "{ScopeDescription}"


def add_query_parameter(url: str, name: str, value: str) -> str:
    """Return ``url`` with ``name=value`` set in its query string.

    An existing parameter of the same name is replaced; order of the other
    parameters and the fragment are preserved.
    """
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != name]
    query.append((name, value))
    return urlunsplit(parts._replace(query=urlencode(query)))


def expand_navigate_url(template: Optional[str], container_id: int) -> Optional[str]:
    """Build the link for an album from the configured template.

    ``{ContainerId}`` is substituted when present, otherwise ``aid=<id>`` is
    added to the query string. Returns None for an empty template.
    """
    if not template:
        return None
    if CONTAINER_ID_TOKEN in template:
        return template.replace(CONTAINER_ID_TOKEN, str(container_id))
    return add_query_parameter(template, "aid", str(container_id))


def expand_root_label(template: str, scope_id: int, scope_description: str) -> str:
    if not template:
        return ""
    return (template
            .replace(SCOPE_ID_TOKEN, str(scope_id))
            .replace(SCOPE_DESCRIPTION_TOKEN, scope_description or ""))
