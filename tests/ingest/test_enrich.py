"""Tests for task line enrichment."""

from datetime import datetime

import pytest

from vantageflow.ingest.enrich import (
    clean_task_name,
    detect_status,
    enrich_task,
    extract_assignee,
    extract_due_date,
    extract_priority,
    parse_date_token,
)
from vantageflow.ingest.models import TaskPriority, TaskStatus

pytestmark = pytest.mark.unit

NOW = datetime(2026, 1, 12)


class TestParseDateToken:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("2026-03-05", datetime(2026, 3, 5)),
            ("03/05/2026", datetime(2026, 3, 5)),
            ("12/31/26", datetime(2026, 12, 31)),
            ("Mar 5, 2026", datetime(2026, 3, 5)),
            ("March 5 2026", datetime(2026, 3, 5)),
            ("Jan 15th", datetime(2026, 1, 15)),
            ("Sept 9, 2027", datetime(2027, 9, 9)),
        ],
    )
    def test_valid_dates(self, token, expected):
        assert parse_date_token(token, NOW) == expected

    @pytest.mark.parametrize(
        "token", ["2026-13-01", "Feb 30", "13/01/2026", "soon", "1/2/202", "Marketing 5"]
    )
    def test_invalid_dates(self, token):
        assert parse_date_token(token, NOW) is None


class TestDetectStatus:
    @pytest.mark.parametrize("text", ["[x] Ship", "[X] Ship", "✓ Ship", "✔ Ship", "☑ Ship"])
    def test_checked_is_complete(self, text):
        status, remaining = detect_status(text)
        assert status is TaskStatus.HUNDRED
        assert remaining.strip() == "Ship"

    @pytest.mark.parametrize("text", ["[ ] Ship", "☐ Ship", "□ Ship"])
    def test_unchecked_is_zero(self, text):
        status, remaining = detect_status(text)
        assert status is TaskStatus.ZERO
        assert remaining.strip() == "Ship"

    def test_done_keyword(self):
        assert detect_status("Deploy to staging - done")[0] is TaskStatus.HUNDRED
        assert detect_status("Vendor onboarding completed")[0] is TaskStatus.HUNDRED

    @pytest.mark.parametrize(
        "text", ["Migrate database (in progress)", "WIP landing page", "Hiring ongoing"]
    )
    def test_in_progress_keywords(self, text):
        assert detect_status(text)[0] is TaskStatus.TWENTY_FIVE

    def test_checkbox_beats_keywords(self):
        assert detect_status("[ ] Review completed drafts")[0] is TaskStatus.ZERO

    def test_no_signal_is_zero(self):
        assert detect_status("Write the report") == (TaskStatus.ZERO, "Write the report")


class TestExtractPriority:
    @pytest.mark.parametrize(
        ("text", "priority"),
        [
            ("Fix login bug [High]", TaskPriority.HIGH),
            ("Fix login bug (critical)", TaskPriority.CRITICAL),
            ("Fix login bug [P0]", TaskPriority.CRITICAL),
            ("Fix login bug (p2)", TaskPriority.MEDIUM),
            ("Fix login bug [priority: low]", TaskPriority.LOW),
            ("Fix login bug priority: medium", TaskPriority.MEDIUM),
        ],
    )
    def test_priority_tags(self, text, priority):
        found, remaining = extract_priority(text)
        assert found is priority
        assert clean_task_name(remaining) == "Fix login bug"

    def test_bare_word_is_not_priority(self):
        assert extract_priority("Ship the high street campaign") == (
            None,
            "Ship the high street campaign",
        )


class TestExtractAssignee:
    def test_owner_tag(self):
        assignee, remaining = extract_assignee("Draft contract (Owner: Ada Obi)")
        assert assignee == "Ada Obi"
        assert clean_task_name(remaining) == "Draft contract"

    def test_assigned_to(self):
        assignee, remaining = extract_assignee("Review budget assigned to John Smith")
        assert assignee == "John Smith"
        assert clean_task_name(remaining) == "Review budget"

    def test_mention(self):
        assignee, remaining = extract_assignee("Call supplier @tunde")
        assert assignee == "tunde"
        assert clean_task_name(remaining) == "Call supplier"

    def test_email_is_not_mention(self):
        assert extract_assignee("Mail jane@corp.com the deck")[0] is None

    def test_owner_tag_takes_precedence(self):
        assignee, _ = extract_assignee("Plan @kemi (Lead: Ada)")
        assert assignee == "Ada"


class TestExtractDueDate:
    def test_month_day(self):
        due, remaining = extract_due_date("Submit report by Mar 5, 2026", NOW)
        assert due == datetime(2026, 3, 5)
        assert clean_task_name(remaining) == "Submit report"

    def test_iso(self):
        due, remaining = extract_due_date("Launch due 2026-04-01", NOW)
        assert due == datetime(2026, 4, 1)
        assert clean_task_name(remaining) == "Launch"

    def test_slash_with_deadline(self):
        due, remaining = extract_due_date("Pay vendor deadline: 04/15/2026", NOW)
        assert due == datetime(2026, 4, 15)
        assert clean_task_name(remaining) == "Pay vendor"

    def test_year_defaults_to_now(self):
        due, _ = extract_due_date("Demo by Apr 2", NOW)
        assert due == datetime(2026, 4, 2)

    def test_invalid_date_stays_in_text(self):
        due, remaining = extract_due_date("Ship by Feb 30", NOW)
        assert due is None
        assert remaining == "Ship by Feb 30"

    def test_three_digit_year_is_ignored(self):
        due, remaining = extract_due_date("Pay rent by 1/2/202", NOW)
        assert due is None
        assert remaining == "Pay rent by 1/2/202"

    @pytest.mark.parametrize(
        "text", ["Meet by marketing 5 people", "Decide by junior 3 hires", "Due decade 2 review"]
    )
    def test_month_prefix_words_are_not_dates(self, text):
        assert extract_due_date(text, NOW) == (None, text)


class TestCleanTaskName:
    def test_collapses_and_trims(self):
        assert clean_task_name("  Write   docs () - ") == "Write docs"

    def test_strips_leading_separators(self):
        assert clean_task_name(": - tidy up []") == "tidy up"


class TestEnrichTask:
    """Combined extraction over a single line."""

    def test_all_tokens(self):
        result = enrich_task("[x] Finalize API contract (Owner: Ada) [P1] due 2026-02-01", NOW)

        assert result.name == "Finalize API contract"
        assert result.status is TaskStatus.HUNDRED
        assert result.priority is TaskPriority.HIGH
        assert result.assignee == "Ada"
        assert result.due_date == datetime(2026, 2, 1)

    def test_plain_task(self):
        result = enrich_task("Book the venue", NOW)

        assert result.name == "Book the venue"
        assert result.status is TaskStatus.ZERO
        assert result.priority is None
        assert result.assignee is None
        assert result.due_date is None

    def test_empty_name_falls_back_to_raw_text(self):
        result = enrich_task("@bob", NOW)
        assert result.assignee == "bob"
        assert result.name == "@bob"

    def test_word_starting_with_month_keeps_name(self):
        result = enrich_task("Meet by marketing 5 people", NOW)
        assert result.due_date is None
        assert result.name == "Meet by marketing 5 people"
