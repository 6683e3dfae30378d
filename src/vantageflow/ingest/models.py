"""
Data records produced by the project text ingestion engine.

Every field of a PartialProject is independently optional: the caller treats
anything missing as "needs user confirmation". Records serialize with
to_dict() using the camelCase keys the project form expects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class TaskStatus(str, Enum):
    """Progress buckets used by the dashboard.

    Enrichment only ever assigns ZERO, TWENTY_FIVE or HUNDRED; the rest are
    reserved for manual edits.
    """

    ZERO = "0%"
    TWENTY_FIVE = "25%"
    FIFTY = "50%"
    SEVENTY_FIVE = "75%"
    HUNDRED = "100%"
    AT_RISK = "At Risk"


class TaskPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DurationUnit(str, Enum):
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"


class Currency(str, Enum):
    NGN = "NGN"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


class LeadRole(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class SourceType(str, Enum):
    MEETING_NOTES = "meeting_notes"
    TEXT = "text"
    UNKNOWN = "unknown"


class MarkerType(str, Enum):
    """Lexical form that introduced a list item."""

    BULLET = "bullet"
    NUMBER = "number"
    LETTER = "letter"
    NONE = "none"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass
class Task:
    """A task or subtask recovered from a list line.

    Attributes:
        id: Synthetic ID, unique within one parse
        name: Display name with metadata tokens stripped
        status: Derived from checkbox glyphs or progress keywords
        start_date: Parse time
        end_date: Explicit due date, else start plus a fixed offset
        assignee: Name captured from "assigned to X", "@X" or "(Owner: X)"
        priority: Captured from a bracketed priority tag
        sub_tasks: Children; always empty on a subtask
    """

    id: str
    name: str
    status: TaskStatus
    start_date: datetime
    end_date: datetime
    assignee: str | None = None
    priority: TaskPriority | None = None
    sub_tasks: list[Task] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "startDate": _iso(self.start_date),
            "endDate": _iso(self.end_date),
            "subTasks": [sub.to_dict() for sub in self.sub_tasks],
        }
        if self.assignee is not None:
            data["assignee"] = self.assignee
        if self.priority is not None:
            data["priority"] = self.priority.value
        return data


@dataclass
class Phase:
    """Top-level grouping of tasks, in document order."""

    id: str
    name: str
    week_range: str = "TBD"
    tasks: list[Task] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "weekRange": self.week_range,
            "tasks": [task.to_dict() for task in self.tasks],
        }


@dataclass
class TeamMember:
    """A person found in the text (or the importing user).

    uid is a placeholder until the member is matched to a real account;
    email is synthesized from the name when the text had none.
    """

    uid: str
    email: str
    display_name: str
    lead_role: LeadRole | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "uid": self.uid,
            "email": self.email,
            "displayName": self.display_name,
        }
        if self.lead_role is not None:
            data["leadRole"] = self.lead_role.value
        return data


@dataclass(frozen=True)
class Duration:
    value: int
    unit: DurationUnit = DurationUnit.WEEKS

    def to_dict(self) -> dict[str, Any]:
        return {"duration": self.value, "durationUnit": self.unit.value}


@dataclass
class PartialProject:
    """Project fields recovered from free text.

    None means the engine found nothing for that field.
    """

    name: str | None = None
    description: str | None = None
    core_system: str | None = None
    start_date: datetime | None = None
    duration: Duration | None = None
    team: list[TeamMember] | None = None
    cost: float | None = None
    currency: Currency | None = None
    phases: list[Phase] | None = None

    @property
    def task_count(self) -> int:
        """Tasks plus subtasks across all phases."""
        return sum(
            len(task.sub_tasks) + 1 for phase in self.phases or [] for task in phase.tasks
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.name is not None:
            data["name"] = self.name
        if self.description is not None:
            data["description"] = self.description
        if self.core_system is not None:
            data["coreSystem"] = self.core_system
        if self.start_date is not None:
            data["startDate"] = _iso(self.start_date)
        if self.duration is not None:
            data.update(self.duration.to_dict())
        if self.team is not None:
            data["team"] = {"members": [member.to_dict() for member in self.team]}
        if self.cost is not None:
            data["cost"] = self.cost
        if self.currency is not None:
            data["currency"] = self.currency.value
        if self.phases is not None:
            data["phases"] = [phase.to_dict() for phase in self.phases]
        return data


@dataclass(frozen=True)
class ParseReport:
    """How far the caller should trust a ParseResult."""

    source_type: SourceType
    parse_date: datetime
    confidence: float
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceType": self.source_type.value,
            "parseDate": _iso(self.parse_date),
            "confidence": self.confidence,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ParseResult:
    project: PartialProject
    metadata: ParseReport

    def to_dict(self) -> dict[str, Any]:
        return {"project": self.project.to_dict(), "metadata": self.metadata.to_dict()}
