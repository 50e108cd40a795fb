"""
Validation accumulator.

Collects structured, non-fatal issues in the order they are found and
escalates them on request.  Mapping never fails fast: every field is
attempted and every failure lands here, so a single pass surfaces all
terminology gaps in a resource.

Rendered issue format::

    ERROR NOV_CONMAP_LOOKUP: Tenant source value '54321' has no target ... @ CarePlan.category
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable


class ValidationIssueSeverity(enum.Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation finding.

    Attributes:
        severity: How serious the finding is.
        code: Fixed machine-readable issue code (``NOV_CONMAP_LOOKUP``).
        description: Human-readable message.
        location: Field path with list indexes (``Observation.component[0].code``).
        metadata: Registry metadata relevant to the finding, if any.
    """

    severity: ValidationIssueSeverity
    code: str
    description: str
    location: str | None = None
    metadata: tuple[Any, ...] = ()

    def __str__(self) -> str:
        rendered = f"{self.severity.name} {self.code}: {self.description}"
        if self.location:
            rendered += f" @ {self.location}"
        return rendered


class ValidationFailedError(Exception):
    """Raised by :meth:`Validation.alert_if_errors`.

    The message enumerates every collected issue, one per line;
    :attr:`issues` holds them as objects.
    """

    def __init__(self, issues: Iterable[ValidationIssue]) -> None:
        self.issues: tuple[ValidationIssue, ...] = tuple(issues)
        lines = "\n".join(str(issue) for issue in self.issues)
        super().__init__(f"Encountered validation error(s):\n{lines}")


@dataclass
class Validation:
    """An ordered list of :class:`ValidationIssue` objects."""

    _issues: list[ValidationIssue] = field(default_factory=list)

    def issues(self) -> list[ValidationIssue]:
        return list(self._issues)

    def has_issues(self) -> bool:
        return bool(self._issues)

    def has_errors(self) -> bool:
        return any(
            issue.severity is ValidationIssueSeverity.ERROR
            for issue in self._issues
        )

    def add_issue(self, issue: ValidationIssue) -> None:
        self._issues.append(issue)

    def check_not_none(self, value: Any, issue: ValidationIssue) -> bool:
        """Record *issue* when *value* is ``None``.

        Returns:
            ``True`` if *value* was present.
        """
        if value is None:
            self._issues.append(issue)
            return False
        return True

    def merge(self, other: Validation) -> Validation:
        """Append every issue of *other* after this one's; returns ``self``."""
        self._issues.extend(other._issues)
        return self

    def alert_if_errors(self) -> None:
        """Raise :class:`ValidationFailedError` if any issue was collected."""
        if self._issues:
            raise ValidationFailedError(self._issues)
