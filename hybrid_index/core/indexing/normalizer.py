"""
Text normalization for indexing.

Flattens editor state trees (root -> children nodes) or markup into
canonical plain text. Every function here is total: malformed input
degrades to tag stripping, never to an exception.

Dependencies: bs4, json (stdlib)
System role: First stage of the indexing pipeline
"""

import json
import re
from typing import Any

from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")

BLOCK_NODE_TYPES = frozenset({"paragraph", "heading"})

_BLOCK_END = object()


def strip_markup(markup: str | None) -> str:
    """
    Strip tags, decode entities and collapse whitespace.

    Args:
        markup: HTML fragment or plain text

    Returns:
        str: Single-line plain text
    """
    if not markup:
        return ""
    text = BeautifulSoup(markup, "html.parser").get_text(separator=" ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def _flatten_nodes(nodes: list[Any]) -> str:
    parts: list[str] = []
    # Explicit stack; _BLOCK_END closes a block after its children
    stack: list[Any] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        if node is _BLOCK_END:
            parts.append("\n\n")
            continue
        if not isinstance(node, dict):
            continue
        node_type = node.get("type")
        children = node.get("children")

        if node_type in BLOCK_NODE_TYPES:
            stack.append(_BLOCK_END)

        if node_type == "text" and node.get("text"):
            parts.append(str(node["text"]))
        elif node_type == "linebreak":
            parts.append("\n")
        elif isinstance(children, list):
            stack.extend(reversed(children))
    return "".join(parts)


def extract_text_content(content_state: str | dict | None) -> str:
    """
    Extract plain text from a serialized editor state tree.

    A tree has the shape ``{"root": {"children": [...]}}``. Inline text
    nodes are concatenated, ``linebreak`` nodes become newlines and
    paragraph/heading blocks are followed by a blank line.

    JSON of any other shape is returned unchanged; strings that are not
    JSON are treated as markup and stripped.

    Args:
        content_state: JSON string or already-decoded dict

    Returns:
        str: Plain text (trimmed)
    """
    if not content_state:
        return ""

    if isinstance(content_state, dict):
        parsed: Any = content_state
        raw = None
    else:
        raw = str(content_state)
        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError):
            return strip_markup(raw)

    root = parsed.get("root") if isinstance(parsed, dict) else None
    if isinstance(root, dict) and isinstance(root.get("children"), list):
        return _flatten_nodes(root["children"]).strip()

    if raw is None:
        return ""
    return raw


def normalize(raw_content: str | None, rich_state: str | dict | None = None) -> str:
    """
    Produce canonical text for a document body.

    The rich editor state wins when present; the raw content is used when
    there is no rich state or the state flattens to nothing.

    Args:
        raw_content: Plain text or markup body
        rich_state: Optional serialized editor state

    Returns:
        str: Canonical plain text
    """
    if rich_state:
        text = extract_text_content(rich_state)
        if text.strip():
            return text
    return strip_markup(raw_content)


def prepare_content(title: str | None, body: str | None) -> str:
    """
    Combine title and body into the text that gets chunked.

    Args:
        title: Document title (may be empty)
        body: Canonical body text (may be empty)

    Returns:
        str: ``title + blank line + body``, or whichever is non-empty
    """
    title_text = (title or "").strip()
    body_text = (body or "").strip()

    if not body_text:
        return title_text
    if not title_text:
        return body_text
    return f"{title_text}\n\n{body_text}"
