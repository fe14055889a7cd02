"""Sync orchestration - plan and apply navigation block updates for stacks.

Planning is pure: it turns stacks into (pull request, block) pairs.
Applying re-fetches each description right before writing so a stale
listing never overwrites newer edits, and only writes when the text changed.
A failure on one pull request is recorded and the rest still run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence

from jjstack.core.models import PullRequest
from jjstack.core.nav_block import has_nav_block, insert_nav_block, render_nav_block
from jjstack.core.stack_builder import StackTopology, build_stacks
from jjstack.errors import JJStackError
from jjstack.hosting.protocol import HostingBackend


class UpdateStatus(str, Enum):
    """Result of applying one update."""

    UPDATED = "updated"
    REMOVED = "removed"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(frozen=True)
class StackUpdate:
    """Planned navigation block for one pull request.

    Attributes:
        pull_request: Request whose description is rewritten
        nav_block: Rendered block; empty string means remove the block
    """

    pull_request: PullRequest
    nav_block: str

    @property
    def is_removal(self) -> bool:
        return not self.nav_block


@dataclass(frozen=True)
class UpdateOutcome:
    """What happened when an update was applied."""

    update: StackUpdate
    status: UpdateStatus
    error: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        pr = self.update.pull_request
        return {
            "number": pr.number,
            "title": pr.title,
            "status": self.status.value,
            "error": self.error,
        }


@dataclass
class SyncReport:
    """Everything one sync pass produced, for console and JSON rendering."""

    repo: str
    bookmarks: list[str] = field(default_factory=list)
    pull_requests: list[PullRequest] = field(default_factory=list)
    topology: StackTopology = field(default_factory=StackTopology)
    updates: list[StackUpdate] = field(default_factory=list)
    outcomes: list[UpdateOutcome] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    applied: bool = False

    @property
    def failures(self) -> list[UpdateOutcome]:
        return [o for o in self.outcomes if o.status == UpdateStatus.FAILED]

    def to_dict(self) -> dict[str, object]:
        return {
            "repo": self.repo,
            "mode": "apply" if self.applied else "preview",
            "bookmarks": self.bookmarks,
            "stacks": [[pr.to_dict() for pr in stack] for stack in self.topology.stacks],
            "issues": [issue.to_dict() for issue in self.topology.issues],
            "updates": [
                {
                    "number": u.pull_request.number,
                    "title": u.pull_request.title,
                    "action": "remove" if u.is_removal else "update",
                    "navBlock": u.nav_block,
                }
                for u in self.updates
            ],
            "outcomes": [o.to_dict() for o in self.outcomes],
            "warnings": self.warnings,
        }


def plan_updates(stacks: Iterable[Sequence[PullRequest]]) -> list[StackUpdate]:
    """Compute the block every stack member should carry.

    Members of multi-request stacks always get an update (even if the text
    would not change; apply_update skips no-op writes). A lone request is
    only touched when a block, or half of one, is still in its body.
    """
    updates: list[StackUpdate] = []
    for stack in stacks:
        if len(stack) > 1:
            for pr in stack:
                updates.append(StackUpdate(pr, render_nav_block(stack, pr.head)))
        elif stack:
            pr = stack[0]
            if has_nav_block(pr.body):
                updates.append(StackUpdate(pr, ""))
    return updates


def apply_update(backend: HostingBackend, repo: str, update: StackUpdate) -> UpdateOutcome:
    """Read-modify-write one description; never raises for backend failures."""
    number = update.pull_request.number
    try:
        current = backend.fetch_body(repo, number)
        new_body = insert_nav_block(current, update.nav_block)
        if new_body == current:
            return UpdateOutcome(update, UpdateStatus.UNCHANGED)
        backend.write_body(repo, number, new_body)
    except JJStackError as exc:
        return UpdateOutcome(update, UpdateStatus.FAILED, str(exc))

    status = UpdateStatus.REMOVED if update.is_removal else UpdateStatus.UPDATED
    return UpdateOutcome(update, status)


def apply_updates(
    backend: HostingBackend,
    repo: str,
    updates: Iterable[StackUpdate],
) -> list[UpdateOutcome]:
    """Apply updates in order, continuing past individual failures."""
    return [apply_update(backend, repo, update) for update in updates]


def select_tracked(pull_requests: Iterable[PullRequest], bookmarks: Iterable[str]) -> list[PullRequest]:
    """Keep the requests whose head branch is a local bookmark."""
    tracked = set(bookmarks)
    return [pr for pr in pull_requests if pr.head in tracked]


def sync_stacks(
    backend: HostingBackend,
    repo: str,
    bookmarks: Sequence[str],
    *,
    apply: bool = False,
) -> SyncReport:
    """Run one sync pass for ``repo``.

    Raises:
        HostingError: If the open pull requests cannot be listed
    """
    report = SyncReport(repo=repo, bookmarks=list(bookmarks), applied=apply)
    report.pull_requests = select_tracked(backend.list_open_pull_requests(repo), bookmarks)
    report.warnings.extend(backend.warnings)
    report.topology = build_stacks(report.pull_requests)
    report.updates = plan_updates(report.topology.stacks)
    if apply:
        report.outcomes = apply_updates(backend, repo, report.updates)
    return report


__all__ = [
    "StackUpdate",
    "SyncReport",
    "UpdateOutcome",
    "UpdateStatus",
    "apply_update",
    "apply_updates",
    "plan_updates",
    "select_tracked",
    "sync_stacks",
]
