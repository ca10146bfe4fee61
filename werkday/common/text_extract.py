"""Plain text extraction from Jira rich-text (ADF) documents."""

from typing import Any

COMMENT_MAX_CHARS = 200


def _node_text(node: Any) -> str:
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return "".join(_node_text(item) for item in node)
    if not isinstance(node, dict):
        return ""
    if node.get("type") == "text":
        text = node.get("text")
        return text if isinstance(text, str) else ""
    return _node_text(node.get("content"))


def extract_adf_text(value: Any) -> str:
    """
    Flatten an Atlassian Document Format tree into plain text.

    Every `text` leaf is concatenated in document order; top-level blocks
    (paragraphs, lists, ...) are separated by newlines.

    Args:
        value: ADF document dict, a plain string, or None.
    Returns:
        Plain text, stripped. Empty string when nothing is extractable.
    """
    if isinstance(value, str):
        return value.strip()
    if not isinstance(value, dict):
        return ""
    blocks = value.get("content")
    if not isinstance(blocks, list):
        return _node_text(value).strip()
    return "\n".join(_node_text(block) for block in blocks).strip()


def truncate_text(text: str, max_chars: int = COMMENT_MAX_CHARS) -> str:
    """Cut text to `max_chars` and mark the cut with an ellipsis."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."
