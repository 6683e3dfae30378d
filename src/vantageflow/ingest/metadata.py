"""
Metadata extraction over the whole input text.

Runs independently of the line-by-line structural walk and infers the
project title, cost and currency, category, team members, source type and
(after structural parsing) the duration estimate.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import replace

from vantageflow.ingest.classifier import DATE_HEADER_PATTERN, MONTHS
from vantageflow.ingest.ids import IdGenerator
from vantageflow.ingest.models import (
    Currency,
    Duration,
    DurationUnit,
    LeadRole,
    SourceType,
    TeamMember,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Title and description
# =============================================================================

TITLE_LABEL_PATTERN = re.compile(r"^title\s*:\s*(.*)$", re.IGNORECASE)
DESCRIPTION_LABEL_PATTERN = re.compile(
    r"^[ \t]*(?:description|summary|overview)[ \t]*:[ \t]*(\S.*)$",
    re.IGNORECASE | re.MULTILINE,
)
MARKDOWN_PREFIX_PATTERN = re.compile(r"^#+\s+")
TITLE_MAX_LENGTH = 100


def extract_title(lines: list[str], scan_lines: int = 5) -> str | None:
    """
    Find the project title within the first few lines.

    An explicit "Title:" line wins. Otherwise the first short line that is
    not a date header is used, with any markdown "#" prefix stripped.
    """
    candidate: str | None = None
    for line in lines[:scan_lines]:
        stripped = line.strip()
        if not stripped:
            continue

        label = TITLE_LABEL_PATTERN.match(stripped)
        if label:
            if label.group(1).strip():
                return label.group(1).strip()
            continue

        if (
            candidate is None
            and len(stripped) < TITLE_MAX_LENGTH
            and not DATE_HEADER_PATTERN.match(stripped)
        ):
            candidate = MARKDOWN_PREFIX_PATTERN.sub("", stripped).strip() or None

    return candidate


def extract_description(text: str) -> str | None:
    """Return the value of a "Description:/Summary:/Overview:" line, if any."""
    match = DESCRIPTION_LABEL_PATTERN.search(text)
    return match.group(1).strip() if match else None


# =============================================================================
# Cost and currency
# =============================================================================

CURRENCY_CODE = r"(?:NGN|USD|EUR|GBP)"
CURRENCY_TOKEN = rf"(?:₦|\$|€|£|{CURRENCY_CODE})"
# A trailing ISO code may touch the number: "500USD", "2k EUR"
AMOUNT = (
    r"(\d[\d,]*(?:\.\d+)?)(?:[ \t]?([KMB])(?![A-Za-z]))?"
    rf"(?=[ \t]?{CURRENCY_CODE}\b|\W|$)"
)

LABELLED_COST_PATTERN = re.compile(
    r"\b(?:cost|budget|price|total|amount|fee|charge)s?\b[ \t:=\-]*"
    rf"(?:{CURRENCY_TOKEN}[ \t]?)?{AMOUNT}",
    re.IGNORECASE,
)
BARE_CURRENCY_PATTERN = re.compile(rf"{CURRENCY_TOKEN}[ \t]?{AMOUNT}", re.IGNORECASE)

SUFFIX_MULTIPLIERS = {"k": 1e3, "m": 1e6, "b": 1e9}

CURRENCY_SYMBOLS: dict[str, Currency] = {
    "₦": Currency.NGN,
    "$": Currency.USD,
    "€": Currency.EUR,
    "£": Currency.GBP,
}
CURRENCY_TOKEN_PATTERN = re.compile(rf"[₦$€£]|(?<![A-Za-z]){CURRENCY_CODE}\b")


def _amount(number: str, suffix: str | None) -> float | None:
    try:
        value = float(number.replace(",", ""))
    except ValueError:
        return None
    if suffix:
        value *= SUFFIX_MULTIPLIERS[suffix.lower()]
    return value


def extract_cost(text: str) -> float:
    """
    Sum every cost mention in the text.

    First pass needs a label keyword (cost, budget, price, total, amount,
    fee, charge). Only if that finds nothing does a second pass accept any
    currency-prefixed number. K/M/B suffixes multiply by 1e3/1e6/1e9.
    Multiple mentions are treated as line items and added together.
    """
    total = 0.0
    for pattern in (LABELLED_COST_PATTERN, BARE_CURRENCY_PATTERN):
        for match in pattern.finditer(text):
            value = _amount(match.group(1), match.group(2))
            if value is not None:
                total += value
        if total:
            break
    return total


def infer_currency(text: str, primary: Currency = Currency.NGN) -> Currency:
    """First currency symbol or ISO code in document order, else primary."""
    match = CURRENCY_TOKEN_PATTERN.search(text)
    if not match:
        return primary
    token = match.group(0)
    return CURRENCY_SYMBOLS.get(token) or Currency(token)


# =============================================================================
# Category
# =============================================================================

# Declaration order is the tie-break order
CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Technical": [
        "software",
        "system",
        "platform",
        "api",
        "database",
        "infrastructure",
        "deploy",
        "server",
        "cloud",
        "integration",
        "app",
        "code",
        "erp",
        "network",
        "migration",
    ],
    "Business": [
        "revenue",
        "sales",
        "marketing",
        "customer",
        "market",
        "strategy",
        "profit",
        "growth",
        "stakeholder",
        "partnership",
        "procurement",
        "finance",
    ],
    "Creative": [
        "design",
        "brand",
        "content",
        "video",
        "campaign",
        "logo",
        "creative",
        "visual",
        "artwork",
        "photography",
    ],
    "Research": [
        "research",
        "study",
        "survey",
        "analysis",
        "experiment",
        "hypothesis",
        "data collection",
        "literature",
        "findings",
        "pilot",
    ],
    "Compliance": [
        "compliance",
        "regulation",
        "regulatory",
        "audit",
        "policy",
        "legal",
        "governance",
        "gdpr",
        "certification",
        "risk",
    ],
}

DEFAULT_CATEGORY = next(iter(CATEGORY_KEYWORDS))


def score_categories(text: str) -> dict[str, int]:
    """Count whole-word keyword hits per category in the lowercased text."""
    lowered = text.lower()
    return {
        category: sum(
            len(re.findall(rf"\b{re.escape(keyword)}s?\b", lowered)) for keyword in keywords
        )
        for category, keywords in CATEGORY_KEYWORDS.items()
    }


def infer_category(text: str) -> str:
    """Category with the most keyword hits; ties go to the first declared."""
    scores = score_categories(text)
    best = DEFAULT_CATEGORY
    for category, score in scores.items():
        if score > scores[best]:
            best = category
    return best


# =============================================================================
# Team
# =============================================================================

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
TEAM_LABEL_PATTERN = re.compile(
    r"^[ \t]*(?:team|attendees|members|responsible|retreat)[ \t]*:[ \t]*(\S.*)$",
    re.IGNORECASE | re.MULTILINE,
)
TEAM_MENTION_PATTERN = re.compile(r"(?<![\w.])@([A-Z][a-zA-Z]+)")
ROLE_TAG_PATTERN = re.compile(
    r"\(\s*(?:owner|lead|manager)\s*:\s*([A-Za-z][A-Za-z.' -]*?)\s*\)", re.IGNORECASE
)

HONORIFICS = (
    "dr",
    "prof",
    "professor",
    "ceo",
    "cto",
    "cfo",
    "coo",
    "director",
    "chairman",
    "president",
    "engr",
    "vc",
    "dean",
)
HONORIFIC_PATTERN = re.compile(rf"^(?:{'|'.join(HONORIFICS)})\.?\s+", re.IGNORECASE)
PLACEHOLDER_EMAIL_DOMAIN = "placeholder.com"
MIN_NAME_LENGTH = 2


def normalize_name(name: str) -> str:
    """Dedup key: honorific dropped, whitespace collapsed, casefolded."""
    collapsed = re.sub(r"\s+", " ", name).strip()
    return HONORIFIC_PATTERN.sub("", collapsed).casefold()


def has_honorific(name: str) -> bool:
    return HONORIFIC_PATTERN.match(name.strip()) is not None


def name_from_email(email: str) -> str:
    """Turn an address local part into a display name (jane.doe -> Jane Doe)."""
    local = email.split("@", 1)[0]
    parts = [part for part in re.split(r"[._\-+]+", local) if part]
    return " ".join(part.capitalize() for part in parts) or local


def placeholder_email(name: str) -> str:
    bare = HONORIFIC_PATTERN.sub("", name.strip())
    slug = ".".join(re.findall(r"[a-z0-9]+", bare.lower()))
    return f"{slug or 'member'}@{PLACEHOLDER_EMAIL_DOMAIN}"


class TeamRoster:
    """
    Ordered, name-deduplicated collection of extracted team members.

    Names are the dedup anchor (not emails) because free text mentions the
    same person by name far more consistently than by address.
    """

    def __init__(self, ids: IdGenerator) -> None:
        self.ids = ids
        self.members: list[TeamMember] = []
        self._by_name: dict[str, TeamMember] = {}

    def add(
        self,
        name: str,
        email: str | None = None,
        lead_role: LeadRole | None = None,
    ) -> TeamMember | None:
        clean = re.sub(r"\s+", " ", re.sub(r"\([^)]*\)", "", name)).strip(" ,;.-")
        if len(clean) < MIN_NAME_LENGTH:
            return None

        if lead_role is None and has_honorific(clean):
            lead_role = LeadRole.PRIMARY

        key = normalize_name(clean)
        existing = self._by_name.get(key)
        if existing is not None:
            if lead_role is LeadRole.PRIMARY:
                existing.lead_role = LeadRole.PRIMARY
            return existing

        member = TeamMember(
            uid=self.ids.next("temp"),
            email=email or placeholder_email(clean),
            display_name=clean,
            lead_role=lead_role,
        )
        self.members.append(member)
        self._by_name[key] = member
        return member

    def seed(self, member: TeamMember) -> None:
        """Insert the importing user first, as primary lead.

        The caller's record is copied, not modified.
        """
        display_name = member.display_name or name_from_email(member.email)
        key = normalize_name(display_name)
        if key in self._by_name:
            return
        seeded = replace(member, display_name=display_name, lead_role=LeadRole.PRIMARY)
        self.members.append(seeded)
        self._by_name[key] = seeded

    def has_email(self, email: str) -> bool:
        lowered = email.lower()
        return any(member.email.lower() == lowered for member in self.members)


def extract_team(text: str, roster: TeamRoster) -> list[TeamMember]:
    """
    Run the four team passes over the text, merging into roster.

    a. Email addresses (local part becomes the name)
    b. "Team:/Attendees:/Members:/Responsible:" lines, split on , and ;
    c. @Mention tokens
    d. "(Owner: X)" / "(Lead: X)" tags, which mark a primary lead
    """
    for match in EMAIL_PATTERN.finditer(text):
        email = match.group(0)
        if roster.has_email(email):
            continue
        roster.add(name_from_email(email), email=email)

    for match in TEAM_LABEL_PATTERN.finditer(text):
        for entry in re.split(r"[,;]", match.group(1)):
            entry = entry.strip()
            if not entry or EMAIL_PATTERN.search(entry):
                continue
            roster.add(entry)

    for match in TEAM_MENTION_PATTERN.finditer(text):
        roster.add(match.group(1))

    for match in ROLE_TAG_PATTERN.finditer(text):
        roster.add(match.group(1), lead_role=LeadRole.PRIMARY)

    logger.debug(f"Extracted {len(roster.members)} team members")
    return roster.members


# =============================================================================
# Source type, dates and duration
# =============================================================================

MEETING_PATTERN = re.compile(
    r"\bmeeting\b|^[ \t]*attendees[ \t]*:", re.IGNORECASE | re.MULTILINE
)

ANY_DATE_PATTERN = re.compile(
    rf"\b\d{{1,2}}[-/.]\d{{1,2}}[-/.](?:\d{{4}}|\d{{2}})\b"
    rf"|\b\d{{4}}-\d{{2}}-\d{{2}}\b"
    rf"|\b{MONTHS}\s\d{{1,2}}(?:,\s\d{{4}})?"
    rf"|\b\d{{1,2}}[\s-]{MONTHS}[\s-]\d{{4}}",
    re.IGNORECASE,
)


def detect_source_type(text: str) -> SourceType:
    if not text.strip():
        return SourceType.UNKNOWN
    if MEETING_PATTERN.search(text):
        return SourceType.MEETING_NOTES
    return SourceType.TEXT


def has_explicit_dates(text: str) -> bool:
    return ANY_DATE_PATTERN.search(text) is not None


def estimate_duration(task_count: int, min_weeks: int = 4, weeks_per_task: float = 0.5) -> Duration:
    """max(min_weeks, ceil(task_count * weeks_per_task)) weeks."""
    weeks = max(min_weeks, math.ceil(task_count * weeks_per_task))
    return Duration(value=weeks, unit=DurationUnit.WEEKS)
