"""
Cloze deletion parsing.

A card front may hide answer fragments in square brackets:

    The [mitochondria] is the [powerhouse] of the cell

Only top-level bracket groups are spans; nested brackets stay as literal
text inside their enclosing span. Fronts and backs may also contain the
two-character escape ``\\n`` for a line break.
"""

from __future__ import annotations

PLACEHOLDER = "_____"
DIVIDER = "---"


def extract_cloze_spans(text: str) -> list[str]:
    """
    Return the text of each top-level [bracket] group, in order.

    Empty groups and unterminated trailing groups produce nothing.
    Total over all input strings.
    """
    spans: list[str] = []
    depth = 0
    current: list[str] = []

    for ch in text:
        if ch == "[":
            if depth == 0:
                current = []
            else:
                current.append(ch)
            depth += 1
        elif ch == "]":
            depth = max(depth - 1, 0)
            if depth == 0 and current:
                spans.append("".join(current))
                current = []
            elif depth > 0:
                current.append(ch)
        elif depth > 0:
            current.append(ch)

    return spans


def expand_newlines(text: str) -> str:
    """Turn the literal two-character sequence backslash-n into a line break."""
    return text.replace("\\n", "\n")


def render_front(text: str) -> str:
    """Replace each top-level bracket group with the placeholder."""
    if not extract_cloze_spans(text):
        return expand_newlines(text)

    out: list[str] = []
    depth = 0
    for ch in text:
        if ch == "[":
            if depth == 0:
                out.append(PLACEHOLDER)
            depth += 1
        elif ch == "]":
            depth = max(depth - 1, 0)
        elif depth == 0:
            out.append(ch)

    return expand_newlines("".join(out))


def render_reveal(front: str, back: str) -> str:
    """Front with brackets removed (contents kept), then the back below a divider."""
    full_front = expand_newlines(front.replace("[", "").replace("]", ""))
    back = expand_newlines(back)

    if not back.strip():
        return full_front
    return f"{full_front}\n{DIVIDER}\n{back}"
