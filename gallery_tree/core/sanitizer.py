from __future__ import annotations

"""Markup stripping for display strings (album titles, root labels)."""

import logging
import re

from lxml import etree as ET
from lxml import html as lxml_html

__all__ = ["HtmlSanitizer", "strip_markup"]

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")


def strip_markup(text: str) -> str:
    """Return the text content of an HTML fragment.

    Plain text (no ``<``) is returned unchanged. Fragments lxml refuses to
    parse lose their tags by pattern instead.
    """
    if not text:
        return ""
    if "<" not in text:
        return text
    try:
        fragment = lxml_html.fragment_fromstring(text, create_parent="div")
    except (ET.ParserError, ET.XMLSyntaxError) as exc:
        logger.debug("Falling back to tag pattern for unparsable markup: %s", exc)
        return _TAG_RE.sub("", text)
    return fragment.text_content()


class HtmlSanitizer:
    """:class:`~gallery_tree.core.interfaces.Sanitizer` backed by lxml.html."""

    def strip_markup(self, text: str) -> str:
        return strip_markup(text)
