"""Value types for pull requests and stacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class PullRequest:
    """An open pull request as seen by one sync run.

    Attributes:
        number: Platform-assigned identifier (unique per repository)
        title: Display title
        head: Source branch; unique across the set handed to the stack builder
        base: Branch this request targets
        body: Description text, empty when the platform returns null
    """

    number: int
    title: str
    head: str
    base: str
    body: str = ""

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PullRequest":
        """Build from a GitHub ``pulls`` API record.

        Raises:
            ValueError: If ``number``, ``head.ref`` or ``base.ref`` is missing
        """
        try:
            number = int(data["number"])
            head = str(data["head"]["ref"])
            base = str(data["base"]["ref"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"malformed pull request record: {exc!r}") from exc
        return cls(
            number=number,
            title=str(data.get("title") or ""),
            head=head,
            base=base,
            body=data.get("body") or "",
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize to JSON-compatible dict (body omitted)."""
        return {
            "number": self.number,
            "title": self.title,
            "head": self.head,
            "base": self.base,
        }


# Ordered root-to-tip; stack[i + 1].base == stack[i].head.
Stack = list[PullRequest]


__all__ = ["PullRequest", "Stack"]
