"""
Line classifier for pasted project text.

Assigns each physical line one of five kinds (phase header, list item,
indented continuation, section break, plain text). Rules are checked in a
fixed priority order; the first match wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from vantageflow.ingest.models import MarkerType

logger = logging.getLogger(__name__)


class LineKind(str, Enum):
    PHASE_HEADER = "phase_header"
    LIST_ITEM = "list_item"
    INDENTED_CONTINUATION = "indented_continuation"
    SECTION_BREAK = "section_break"
    PLAIN_TEXT = "plain_text"


@dataclass(frozen=True)
class LineContext:
    """What the classifier may know about a line beyond its text.

    Attributes:
        is_first: True for the first non-blank line of the document
        phase_open: A phase header has already been seen
        phase_from_number: The open phase was promoted from a root-level numbered item
    """

    is_first: bool = False
    phase_open: bool = False
    phase_from_number: bool = False


@dataclass(frozen=True)
class ClassifiedLine:
    """A line with its kind and the fields relevant to that kind.

    text is the phase name for headers, the item text (marker removed) for
    list items and continuations, and the stripped line otherwise.
    """

    kind: LineKind
    text: str
    indent: int = 0
    marker: MarkerType = MarkerType.NONE
    line_number: int = 0
    promoted: bool = False


# =============================================================================
# Patterns
# =============================================================================

MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
    r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)\b\.?"
)

SECTION_BREAK_PATTERN = re.compile(r"^(?:-{3,}|_{3,}|\*{3,})$")

# "Phase 2: Build", "Sprint 3 - QA", "Week 1"
PHASE_KEYWORD_PATTERN = re.compile(
    r"^(?:phase|stage|milestone|sprint|quarter|week)\b", re.IGNORECASE
)
EXPLICIT_PHASE_PATTERN = re.compile(
    r"^(?:phase|stage|milestone|sprint|quarter|week)\s+"
    r"(?:\d+[a-z]?|[ivx]+|one|two|three|four|five|six|seven|eight|nine|ten|[a-z])"
    r"\s*[:.\-–—]?\s+(.+)$",
    re.IGNORECASE,
)
MARKDOWN_HEADING_PATTERN = re.compile(r"^#\s+(.+)$")
DATE_HEADER_PATTERN = re.compile(rf"^\d{{1,2}}[\s-]{MONTHS}[\s-]\d{{4}}", re.IGNORECASE)
ALL_CAPS_PATTERN = re.compile(r"^[A-Z ]+$")

BULLET_CHARS = "-*•⁃○◦▪▫"
BULLET_PATTERN = re.compile(rf"^(\s*)([{re.escape(BULLET_CHARS)}])\s+(.*)$")
# Checkbox with no other marker: "[ ] Item", "☐ Item"
CHECKBOX_ITEM_PATTERN = re.compile(r"^(\s*)(\[[ xX]\]|[☐☑□✓✔])\s+(.*)$")
# "1." "2)" "1.2." "1.2.3" (dotted numbers may omit the trailing punctuation)
NUMBER_PATTERN = re.compile(r"^(\s*)(\d+(?:\.\d+)+[.)]?|\d+[.)])\s+(.*)$")
LETTER_PATTERN = re.compile(r"^(\s*)([a-zA-Z])[.)]\s+(.*)$")

LEADING_MARKER_PATTERN = re.compile(
    rf"^(?:[{re.escape(BULLET_CHARS)}]|\d+(?:\.\d+)+[.)]?|\d+[.)]|[a-zA-Z][.)])\s+"
)

CONTINUATION_MIN_INDENT = 2
COLON_HEADER_MAX_LENGTH = 60
QUESTION_HEADER_MAX_LENGTH = 100
ALL_CAPS_MIN_LENGTH = 10
ALL_CAPS_MAX_LENGTH = 50
TAB_WIDTH = 4


def measure_indent(line: str) -> int:
    """Count leading whitespace, expanding tabs to four columns."""
    expanded = line.expandtabs(TAB_WIDTH)
    return len(expanded) - len(expanded.lstrip())


def match_list_marker(line: str) -> tuple[MarkerType, int, str] | None:
    """Match a bullet, number, letter or bare checkbox marker.

    Returns:
        (marker type, indent, remaining text) or None
    """
    expanded = line.expandtabs(TAB_WIDTH)

    match = BULLET_PATTERN.match(expanded)
    if match:
        return MarkerType.BULLET, len(match.group(1)), match.group(3).strip()

    match = CHECKBOX_ITEM_PATTERN.match(expanded)
    if match:
        # Keep the checkbox in the text so enrichment can read it
        return MarkerType.BULLET, len(match.group(1)), f"{match.group(2)} {match.group(3).strip()}"

    match = NUMBER_PATTERN.match(expanded)
    if match:
        return MarkerType.NUMBER, len(match.group(1)), match.group(3).strip()

    match = LETTER_PATTERN.match(expanded)
    if match:
        return MarkerType.LETTER, len(match.group(1)), match.group(3).strip()

    return None


def is_all_caps_header(text: str) -> bool:
    """Whole-line ALL-CAPS phrase of 10-50 letters and spaces."""
    return (
        ALL_CAPS_MIN_LENGTH <= len(text) <= ALL_CAPS_MAX_LENGTH
        and ALL_CAPS_PATTERN.match(text) is not None
    )


def is_phase_cue(text: str, is_first: bool = False) -> bool:
    """Check the explicit phase-header cues against a stripped line."""
    if PHASE_KEYWORD_PATTERN.match(text):
        return True
    if MARKDOWN_HEADING_PATTERN.match(text):
        return True
    if text.endswith(":") and len(text) < COLON_HEADER_MAX_LENGTH:
        return True
    if text.endswith("?") and len(text) < QUESTION_HEADER_MAX_LENGTH:
        return True
    if DATE_HEADER_PATTERN.match(text):
        return True
    # The first line in capitals is the document title, not a phase
    if not is_first and is_all_caps_header(text):
        return True
    return False


def clean_phase_name(text: str) -> str:
    """Reduce a header line to the phase name.

    Examples:
        "# Discovery" -> "Discovery"
        "Phase 2: Build" -> "Build"
        "- Backend:" -> "Backend"
        "What is missing?" -> "What is missing"
    """
    name = text.strip()

    heading = MARKDOWN_HEADING_PATTERN.match(name)
    if heading:
        name = heading.group(1).strip()

    explicit = EXPLICIT_PHASE_PATTERN.match(name)
    if explicit and explicit.group(1).strip():
        name = explicit.group(1).strip()

    name = LEADING_MARKER_PATTERN.sub("", name)
    name = re.sub(r"[:?]+$", "", name).strip()
    return name or text.strip()


def classify_line(line: str, context: LineContext, line_number: int = 0) -> ClassifiedLine:
    """
    Classify one physical line.

    Priority order:
    1. Horizontal rule -> SECTION_BREAK
    2. Root-level numbered item with no phase open (or only a promoted
       numbered phase open) -> PHASE_HEADER ("1. Planning / 2. Execution")
    3. Phase cues (keyword, "# heading", short "label:", short question,
       date header, ALL-CAPS phrase) -> PHASE_HEADER
    4. Bullet / number / letter / checkbox marker -> LIST_ITEM
    5. Indented (2+ spaces) text while a phase is open -> INDENTED_CONTINUATION
    6. Anything else -> PLAIN_TEXT

    Args:
        line: The raw line (without newline)
        context: Document position and open-phase information
        line_number: 0-indexed line number, carried through for reporting

    Returns:
        ClassifiedLine
    """
    stripped = line.strip()
    indent = measure_indent(line)

    if SECTION_BREAK_PATTERN.match(stripped):
        return ClassifiedLine(LineKind.SECTION_BREAK, stripped, indent, line_number=line_number)

    marker = match_list_marker(line)

    if (
        marker is not None
        and marker[0] is MarkerType.NUMBER
        and marker[1] == 0
        and "." not in marker_token(stripped)
        and (not context.phase_open or context.phase_from_number)
        and marker[2]
    ):
        return ClassifiedLine(
            LineKind.PHASE_HEADER,
            clean_phase_name(marker[2]),
            indent,
            MarkerType.NUMBER,
            line_number,
            promoted=True,
        )

    if is_phase_cue(stripped, context.is_first):
        return ClassifiedLine(
            LineKind.PHASE_HEADER, clean_phase_name(stripped), indent, line_number=line_number
        )

    if marker is not None and marker[2]:
        marker_type, item_indent, text = marker
        return ClassifiedLine(LineKind.LIST_ITEM, text, item_indent, marker_type, line_number)

    if indent >= CONTINUATION_MIN_INDENT and stripped and context.phase_open:
        return ClassifiedLine(
            LineKind.INDENTED_CONTINUATION, stripped, indent, line_number=line_number
        )

    return ClassifiedLine(LineKind.PLAIN_TEXT, stripped, indent, line_number=line_number)


def marker_token(stripped: str) -> str:
    """Return the leading numbering token of a stripped numbered line.

    "1.2 Foo" -> "1.2", "3. Bar" -> "3", "4) Baz" -> "4"
    """
    token = stripped.split(maxsplit=1)[0] if stripped else ""
    return token.rstrip(".)")
