"""Stack reconstruction from an unordered set of pull requests.

A pull request is stacked on another when its base branch is the other
request's head branch. Given every open request for the tracked bookmarks,
this module links them into root-to-tip chains.

Key rules:
- Heads must be unique. A repeated head keeps the later record; the earlier
  one is reported and dropped.
- Only linear stacks are supported. When several requests target the same
  branch, the lowest-numbered one continues the stack and the others start
  stacks of their own.
- Base/head cycles never loop: their members are reported and left out.

The parent and child indexes are built once, so the whole pass is linear in
the number of requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from jjstack.core.models import PullRequest, Stack


class IssueKind(str, Enum):
    """Malformed-topology categories reported by the builder."""

    DUPLICATE_HEAD = "duplicate_head"
    AMBIGUOUS_CHILD = "ambiguous_child"
    CYCLE = "cycle"


@dataclass(frozen=True)
class TopologyIssue:
    """A topology problem found while linking stacks.

    Attributes:
        kind: Issue category
        message: Human-readable description
        numbers: Pull request numbers involved
    """

    kind: IssueKind
    message: str
    numbers: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "numbers": list(self.numbers),
        }


@dataclass
class StackTopology:
    """Builder result: stacks in discovery order plus any reported issues."""

    stacks: list[Stack] = field(default_factory=list)
    issues: list[TopologyIssue] = field(default_factory=list)

    @property
    def has_stacking(self) -> bool:
        """True if any stack has more than one member."""
        return any(len(stack) > 1 for stack in self.stacks)

    def stack_for(self, head: str) -> Optional[Stack]:
        """Get the stack containing the request with this head branch."""
        for stack in self.stacks:
            if any(pr.head == head for pr in stack):
                return stack
        return None


def _index_heads(
    pull_requests: Iterable[PullRequest],
    issues: list[TopologyIssue],
) -> dict[str, PullRequest]:
    by_head: dict[str, PullRequest] = {}
    for pr in pull_requests:
        shadowed = by_head.get(pr.head)
        if shadowed is not None:
            issues.append(
                TopologyIssue(
                    kind=IssueKind.DUPLICATE_HEAD,
                    message=(
                        f"PR #{shadowed.number} and PR #{pr.number} share head branch "
                        f"'{pr.head}'; ignoring PR #{shadowed.number}"
                    ),
                    numbers=(shadowed.number, pr.number),
                )
            )
            # Re-insert so iteration order follows the surviving record
            del by_head[pr.head]
        by_head[pr.head] = pr
    return by_head


def _link_children(
    by_head: dict[str, PullRequest],
    issues: list[TopologyIssue],
) -> tuple[dict[str, PullRequest], dict[str, PullRequest]]:
    """Build the child and parent indexes, both keyed by head branch."""
    candidates: dict[str, list[PullRequest]] = {}
    for pr in by_head.values():
        if pr.base in by_head:
            candidates.setdefault(pr.base, []).append(pr)

    child_of: dict[str, PullRequest] = {}
    parent_of: dict[str, PullRequest] = {}
    for parent_head, children in candidates.items():
        children.sort(key=lambda pr: pr.number)
        chosen = children[0]
        if len(children) > 1:
            losers = ", ".join(f"#{pr.number}" for pr in children[1:])
            issues.append(
                TopologyIssue(
                    kind=IssueKind.AMBIGUOUS_CHILD,
                    message=(
                        f"branch '{parent_head}' is the base of {len(children)} PRs; "
                        f"stacking PR #{chosen.number}, starting new stacks for {losers}"
                    ),
                    numbers=tuple(pr.number for pr in children),
                )
            )
        child_of[parent_head] = chosen
        parent_of[chosen.head] = by_head[parent_head]
    return child_of, parent_of


def _find_root(
    pr: PullRequest,
    parent_of: dict[str, PullRequest],
) -> Optional[PullRequest]:
    """Walk to the bottom of the stack; None when the walk closes a cycle."""
    seen = {pr.head}
    current = pr
    while current.head in parent_of:
        current = parent_of[current.head]
        if current.head in seen:
            return None
        seen.add(current.head)
    return current


def _collect_cycle(
    pr: PullRequest,
    parent_of: dict[str, PullRequest],
) -> list[PullRequest]:
    members = [pr]
    current = parent_of[pr.head]
    while current.head != pr.head:
        members.append(current)
        current = parent_of[current.head]
    members.reverse()
    return members


def build_stacks(pull_requests: Iterable[PullRequest]) -> StackTopology:
    """Partition pull requests into root-to-tip stacks.

    Args:
        pull_requests: Open requests for the tracked bookmarks, any order

    Returns:
        StackTopology whose stacks cover every accepted, acyclic request
        exactly once. Single-request stacks are included.
    """
    topology = StackTopology()
    by_head = _index_heads(pull_requests, topology.issues)
    child_of, parent_of = _link_children(by_head, topology.issues)

    visited: set[str] = set()
    for pr in by_head.values():
        if pr.head in visited:
            continue

        root = _find_root(pr, parent_of)
        if root is None:
            # Every node has at most one parent and one child, so a cycle
            # reached from here is the whole component.
            members = _collect_cycle(pr, parent_of)
            visited.update(member.head for member in members)
            path = " -> ".join(f"#{member.number} ({member.head})" for member in members)
            topology.issues.append(
                TopologyIssue(
                    kind=IssueKind.CYCLE,
                    message=f"base/head cycle, skipping: {path}",
                    numbers=tuple(member.number for member in members),
                )
            )
            continue

        stack: Stack = []
        current: Optional[PullRequest] = root
        while current is not None and current.head not in visited:
            visited.add(current.head)
            stack.append(current)
            current = child_of.get(current.head)
        topology.stacks.append(stack)

    return topology


def build_chains(pull_requests: Iterable[PullRequest]) -> list[Stack]:
    """Stacks only, for callers that do not report topology issues."""
    return build_stacks(pull_requests).stacks


__all__ = [
    "IssueKind",
    "StackTopology",
    "TopologyIssue",
    "build_chains",
    "build_stacks",
]
