"""Escaping for the two Telegram markup dialects.

``MarkdownV2`` treats a fixed punctuation set as markup and needs each occurrence
prefixed with a backslash. ``HTML`` only cares about ``<``, ``>`` and ``&``.
The two are not interchangeable: order notifications are assembled in MarkdownV2,
the webhook relay path in HTML. Escape user-controlled fragments exactly once,
right where the final text is assembled; neither function detects input that was
already escaped.
"""

import re
from enum import Enum


class MarkupDialect(str, Enum):
    MARKDOWN_V2 = "MarkdownV2"
    HTML = "HTML"


MARKDOWN_V2_RESERVED = "_*[]()~`>#+-=|{}.!"

_MARKDOWN_V2_RE = re.compile("([" + re.escape(MARKDOWN_V2_RESERVED) + "])")

_HTML_ENTITIES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
_HTML_RE = re.compile("[&<>]")


def escape_markdown_v2(text) -> str:
    return _MARKDOWN_V2_RE.sub(r"\\\1", str(text))


def escape_html(text) -> str:
    # Quotes are left alone: they are only significant inside attribute values.
    return _HTML_RE.sub(lambda match: _HTML_ENTITIES[match.group(0)], str(text))


def escape(text, dialect: MarkupDialect) -> str:
    if dialect is MarkupDialect.MARKDOWN_V2:
        return escape_markdown_v2(text)
    return escape_html(text)
