"""Stack navigation block rendering and in-place replacement.

Every pull request in a stack carries a machine-generated block listing the
whole stack. The block is wrapped in HTML comment markers so it renders
invisibly on the platform and can be located reliably on the next run:

    <!-- STACK NAVIGATION -->
    Stack of changes:
    1. PR #11 (branch: feature-a)
    2. PR #12 (branch: feature-b) ◁
    <!-- END STACK NAVIGATION -->

Everything outside the markers belongs to the author and is preserved.
"""

from __future__ import annotations

from typing import Sequence

from jjstack.core.models import PullRequest

STACK_HEADER = "<!-- STACK NAVIGATION -->"
STACK_FOOTER = "<!-- END STACK NAVIGATION -->"
STACK_LABEL = "Stack of changes:"
CURRENT_MARKER = " ◁"


def render_nav_block(stack: Sequence[PullRequest], current_head: str) -> str:
    """Render the navigation block for one member of a stack.

    Args:
        stack: Pull requests ordered root to tip
        current_head: Head branch of the request the block is written into

    Returns:
        Block text, newline-terminated
    """
    lines = [STACK_HEADER, STACK_LABEL]
    for index, pr in enumerate(stack, start=1):
        suffix = CURRENT_MARKER if pr.head == current_head else ""
        lines.append(f"{index}. PR #{pr.number} (branch: {pr.head}){suffix}")
    lines.append(STACK_FOOTER)
    return "\n".join(lines) + "\n"


def has_nav_block(body: str) -> bool:
    """True when either marker survives in the body (complete or stale block)."""
    return STACK_HEADER in body or STACK_FOOTER in body


def remove_nav_block(body: str) -> str:
    """Strip the navigation block and join the surrounding text.

    The header and footer are located independently. A footer that precedes
    the header (left over from a half-deleted block) is ignored in favour of
    the first footer after the header. When either marker is missing the body
    is returned untouched.
    """
    start = body.find(STACK_HEADER)
    if start == -1:
        return body

    footer = body.find(STACK_FOOTER)
    if footer == -1:
        return body
    if footer < start:
        footer = body.find(STACK_FOOTER, start + len(STACK_HEADER))
        if footer == -1:
            return body
    end = footer + len(STACK_FOOTER)

    before = body[:start].strip()
    after = body[end:].strip()

    # Block at the very start or end: no separator line
    if not before or not after:
        return before + after

    return f"{before}\n{after}"


def insert_nav_block(body: str, nav_block: str) -> str:
    """Replace (or drop, when ``nav_block`` is empty) the navigation block.

    The block is always appended at the end of the description, separated
    from the author's text by one blank line.
    """
    cleaned = remove_nav_block(body)
    if not nav_block:
        return cleaned

    if cleaned:
        cleaned = cleaned.rstrip("\n") + "\n"
    return f"{cleaned}\n{nav_block}\n"


__all__ = [
    "CURRENT_MARKER",
    "STACK_FOOTER",
    "STACK_HEADER",
    "STACK_LABEL",
    "has_nav_block",
    "insert_nav_block",
    "remove_nav_block",
    "render_nav_block",
]
