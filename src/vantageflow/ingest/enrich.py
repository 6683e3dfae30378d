"""
Task Enrichment Module.

Extracts metadata tokens embedded in a task line (completion checkbox,
priority tag, assignee mention, due date) and strips them from the display
name. Single pass, best effort: nothing is rolled back if a later extraction
disturbs an earlier one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from vantageflow.ingest.classifier import MONTHS
from vantageflow.ingest.models import TaskPriority, TaskStatus


@dataclass
class TaskEnrichment:
    """Fields recovered from one task line.

    Attributes:
        name: Display name with recognised tokens removed
        status: 100% for checked/done, 25% for in-progress, else 0%
        priority: Priority tag if one was present
        assignee: Assignee name if one was present
        due_date: Explicit due date if one parsed to a valid date
    """

    name: str
    status: TaskStatus = TaskStatus.ZERO
    priority: TaskPriority | None = None
    assignee: str | None = None
    due_date: datetime | None = None


# =============================================================================
# Patterns
# =============================================================================

CHECKED_PATTERN = re.compile(r"\[[xX]\]|[☑✓✔]")
UNCHECKED_PATTERN = re.compile(r"\[ \]|[☐□]")
DONE_WORDS_PATTERN = re.compile(r"\b(?:done|completed)\b", re.IGNORECASE)
IN_PROGRESS_PATTERN = re.compile(r"\b(?:in[ -]progress|wip|ongoing)\b", re.IGNORECASE)

PRIORITY_PATTERN = re.compile(
    r"[\[(]\s*(?:priority\s*:\s*)?(critical|high|medium|low|p[0-3])\s*[\])]"
    r"|\bpriority\s*:\s*(critical|high|medium|low|p[0-3])\b",
    re.IGNORECASE,
)
PRIORITY_TOKENS: dict[str, TaskPriority] = {
    "critical": TaskPriority.CRITICAL,
    "p0": TaskPriority.CRITICAL,
    "high": TaskPriority.HIGH,
    "p1": TaskPriority.HIGH,
    "medium": TaskPriority.MEDIUM,
    "p2": TaskPriority.MEDIUM,
    "low": TaskPriority.LOW,
    "p3": TaskPriority.LOW,
}

NAME = r"[A-Z][\w.'-]*(?:\s+[A-Z][\w.'-]*){0,2}"
OWNER_TAG_PATTERN = re.compile(
    r"\(\s*(?:owner|lead|assignee)\s*:\s*([^)]+?)\s*\)", re.IGNORECASE
)
ASSIGNED_TO_PATTERN = re.compile(rf"[-–—,]?\s*\b(?i:assigned\s+to)\s*:?\s+({NAME})")
MENTION_PATTERN = re.compile(r"(?<![\w.])@([A-Za-z][\w-]*)")

MONTH_DAY_DATE = rf"{MONTHS}\s+\d{{1,2}}(?:st|nd|rd|th)?(?:,?\s+\d{{4}})?"
ISO_DATE = r"\d{4}-\d{2}-\d{2}"
SLASH_DATE = r"\d{1,2}/\d{1,2}/(?:\d{4}|\d{2})(?!\d)"
DUE_PREFIX = r"[-–—,(]?\s*\b(?:by|due(?:\s+(?:on|by))?|deadline)\s*:?\s*"

# Tried in order; the first that yields a valid date wins
DUE_DATE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(rf"{DUE_PREFIX}({MONTH_DAY_DATE})\)?", re.IGNORECASE),
    re.compile(rf"{DUE_PREFIX}({ISO_DATE})\)?", re.IGNORECASE),
    re.compile(rf"{DUE_PREFIX}({SLASH_DATE})\)?", re.IGNORECASE),
]

LEADING_PUNCTUATION = "-–—:, "
TRAILING_PUNCTUATION = "-–—:, "


# =============================================================================
# Date parsing
# =============================================================================


def parse_date_token(token: str, now: datetime) -> datetime | None:
    """
    Parse one of the three supported date shapes.

    Year-less "Month Day" dates take the year of `now`. Returns None for
    anything that does not form a real calendar date.

    Examples:
        "Mar 5, 2026" -> 2026-03-05
        "2026-03-05" -> 2026-03-05
        "03/05/2026" -> 2026-03-05 (month first)
        "Feb 30" -> None
    """
    token = token.strip()

    if re.fullmatch(ISO_DATE, token):
        try:
            return datetime.strptime(token, "%Y-%m-%d")
        except ValueError:
            return None

    if re.fullmatch(SLASH_DATE, token):
        month, day, year = token.split("/")
        if len(year) == 2:
            year = f"20{year}"
        try:
            return datetime(int(year), int(month), int(day))
        except ValueError:
            return None

    match = re.fullmatch(
        rf"({MONTHS})\s+(\d{{1,2}})(?:st|nd|rd|th)?(?:,?\s+(\d{{4}}))?",
        token,
        re.IGNORECASE,
    )
    if match:
        month_name, day, year = match.groups()
        try:
            month = datetime.strptime(month_name[:3].title(), "%b").month
            return datetime(int(year) if year else now.year, month, int(day))
        except ValueError:
            return None

    return None


# =============================================================================
# Extraction
# =============================================================================


def _remove_span(text: str, match: re.Match[str]) -> str:
    return f"{text[: match.start()]} {text[match.end() :]}"


def detect_status(text: str) -> tuple[TaskStatus, str]:
    """Return the status implied by checkbox glyphs or keywords, and the text
    with checkbox glyphs removed."""
    if CHECKED_PATTERN.search(text):
        return TaskStatus.HUNDRED, CHECKED_PATTERN.sub(" ", text)
    if UNCHECKED_PATTERN.search(text):
        return TaskStatus.ZERO, UNCHECKED_PATTERN.sub(" ", text)
    if DONE_WORDS_PATTERN.search(text):
        return TaskStatus.HUNDRED, text
    if IN_PROGRESS_PATTERN.search(text):
        return TaskStatus.TWENTY_FIVE, text
    return TaskStatus.ZERO, text


def extract_priority(text: str) -> tuple[TaskPriority | None, str]:
    match = PRIORITY_PATTERN.search(text)
    if not match:
        return None, text
    token = (match.group(1) or match.group(2)).lower()
    return PRIORITY_TOKENS[token], _remove_span(text, match)


def extract_assignee(text: str) -> tuple[str | None, str]:
    """Capture "(Owner: X)", "assigned to X" or "@X", in that order."""
    for pattern in (OWNER_TAG_PATTERN, ASSIGNED_TO_PATTERN, MENTION_PATTERN):
        match = pattern.search(text)
        if match:
            return match.group(1).strip(), _remove_span(text, match)
    return None, text


def extract_due_date(text: str, now: datetime) -> tuple[datetime | None, str]:
    """Capture "by/due/deadline <date>"; unparseable dates stay in the text."""
    for pattern in DUE_DATE_PATTERNS:
        for match in pattern.finditer(text):
            due = parse_date_token(match.group(1), now)
            if due is not None:
                return due, _remove_span(text, match)
    return None, text


def clean_task_name(text: str) -> str:
    """Collapse whitespace and trim dangling separators."""
    name = re.sub(r"\s+", " ", text).strip()
    name = re.sub(r"\(\s*\)|\[\s*\]", "", name)
    name = name.lstrip(LEADING_PUNCTUATION).rstrip(TRAILING_PUNCTUATION)
    return re.sub(r"\s+", " ", name).strip()


def enrich_task(raw_text: str, now: datetime | None = None) -> TaskEnrichment:
    """
    Extract status, priority, assignee and due date from a task line.

    Args:
        raw_text: Item text with the list marker already removed
        now: Reference time for year-less dates (defaults to now)

    Returns:
        TaskEnrichment with the cleaned display name
    """
    if now is None:
        now = datetime.now()

    status, text = detect_status(raw_text)
    priority, text = extract_priority(text)
    assignee, text = extract_assignee(text)
    due_date, text = extract_due_date(text, now)

    name = clean_task_name(text) or raw_text.strip()

    return TaskEnrichment(
        name=name,
        status=status,
        priority=priority,
        assignee=assignee,
        due_date=due_date,
    )
