"""
Structure assembler and parse report.

Combines the hierarchy resolver's phases with the whole-text metadata,
fills gaps (default phase, synthesized description, duration estimate) and
scores how much of the expected signal was actually found.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta

from vantageflow.config.app import IngestionConfig
from vantageflow.ingest.enrich import enrich_task
from vantageflow.ingest.hierarchy import HierarchyResolver, StructuralResult, TaskFactory
from vantageflow.ingest.ids import IdGenerator
from vantageflow.ingest.metadata import (
    TeamRoster,
    detect_source_type,
    estimate_duration,
    extract_cost,
    extract_description,
    extract_team,
    extract_title,
    has_explicit_dates,
    infer_category,
    infer_currency,
)
from vantageflow.ingest.models import (
    Currency,
    ParseReport,
    ParseResult,
    PartialProject,
    Phase,
    SourceType,
    Task,
    TeamMember,
)

logger = logging.getLogger(__name__)

WARNING_EMPTY_INPUT = "Empty input"
WARNING_NO_BUDGET = "No explicit budget found - estimated cost is 0"
WARNING_NO_TEAM = "No team members detected"
WARNING_NO_PHASES = "No phases detected, check document structure"
WARNING_NO_DATES = "No specific dates found, using default timeline"

COST_LINE_PATTERN = re.compile(r"^(?:cost|budget|title)\b", re.IGNORECASE)


class ProjectTextParser:
    """
    Turns pasted free text into a PartialProject plus a ParseReport.

    Deterministic and rule-based; all state lives in the call, so one
    instance can be shared freely. parse() never raises.

    Example:
        parser = ProjectTextParser()
        result = parser.parse(notes)
        if result.metadata.confidence < 0.8:
            ...  # ask the user to review
    """

    def __init__(self, config: IngestionConfig | None = None) -> None:
        self.config = config or IngestionConfig()

    def parse(
        self,
        text: str,
        *,
        current_user: TeamMember | None = None,
        now: datetime | None = None,
    ) -> ParseResult:
        """
        Parse free text into a structured project.

        Args:
            text: Arbitrary pasted text, possibly empty
            current_user: Importing user, seeded as the primary lead
            now: Reference time for start/end dates (defaults to now)

        Returns:
            ParseResult; on empty input an empty project with confidence 0
        """
        if now is None:
            now = datetime.now()

        if not text or not text.strip():
            return ParseResult(
                project=PartialProject(phases=[]),
                metadata=ParseReport(
                    source_type=SourceType.UNKNOWN,
                    parse_date=now,
                    confidence=0.0,
                    warnings=(WARNING_EMPTY_INPUT,),
                ),
            )

        try:
            return self._parse(text, current_user, now)
        except Exception as e:
            logger.exception(f"Unexpected error while parsing project text: {e}")
            return ParseResult(
                project=PartialProject(phases=[]),
                metadata=ParseReport(
                    source_type=SourceType.UNKNOWN,
                    parse_date=now,
                    confidence=0.0,
                    warnings=(f"Parser error: {e}",),
                ),
            )

    def _parse(self, text: str, current_user: TeamMember | None, now: datetime) -> ParseResult:
        cfg = self.config
        lines = text.splitlines()
        ids = IdGenerator()
        warnings: list[str] = []
        confidence = 1.0

        name = extract_title(lines, cfg.title_scan_lines) or cfg.default_project_name

        cost = extract_cost(text)
        currency = infer_currency(text, Currency(cfg.primary_currency))
        if cost == 0 and len(text) > cfg.budget_warning_min_length:
            warnings.append(WARNING_NO_BUDGET)
            confidence -= cfg.missing_budget_penalty

        roster = TeamRoster(ids)
        if current_user is not None:
            roster.seed(current_user)
        seeded = len(roster.members)
        team = extract_team(text, roster)
        if len(team) == seeded:
            warnings.append(WARNING_NO_TEAM)

        structure = HierarchyResolver(ids, self._task_factory(ids, now)).resolve(lines)
        phases = self._fold_orphans(structure, ids)
        if not phases:
            warnings.append(WARNING_NO_PHASES)
            confidence -= cfg.missing_phases_penalty

        project = PartialProject(
            name=name,
            description=self._describe(text, lines, name, phases, structure),
            core_system=infer_category(text),
            start_date=now,
            team=team,
            cost=cost,
            currency=currency,
            phases=phases,
        )
        project.duration = estimate_duration(
            project.task_count, cfg.min_duration_weeks, cfg.weeks_per_task
        )

        if not has_explicit_dates(text):
            warnings.append(WARNING_NO_DATES)

        report = ParseReport(
            source_type=detect_source_type(text),
            parse_date=now,
            confidence=max(0.0, round(confidence, 2)),
            warnings=tuple(warnings),
        )
        logger.info(
            f"Parsed '{name}': {len(phases)} phases, {project.task_count} tasks, "
            f"{len(team)} members, confidence {report.confidence}"
        )
        return ParseResult(project=project, metadata=report)

    def _task_factory(self, ids: IdGenerator, now: datetime) -> TaskFactory:
        cfg = self.config

        def make_task(text: str, subtask: bool) -> Task:
            enrichment = enrich_task(text, now)
            offset = cfg.subtask_offset_days if subtask else cfg.task_offset_days
            return Task(
                id=ids.next("subtask" if subtask else "task"),
                name=enrichment.name,
                status=enrichment.status,
                start_date=now,
                end_date=enrichment.due_date or now + timedelta(days=offset),
                assignee=enrichment.assignee,
                priority=enrichment.priority,
            )

        return make_task

    def _fold_orphans(self, structure: StructuralResult, ids: IdGenerator) -> list[Phase]:
        """Attach tasks seen before any header to a default or the first phase."""
        phases = list(structure.phases)
        if not structure.orphaned_tasks:
            return phases

        if not phases:
            phases.append(
                Phase(
                    id=ids.next("phase"),
                    name=self.config.default_phase_name,
                    tasks=list(structure.orphaned_tasks),
                )
            )
        else:
            phases[0].tasks.extend(structure.orphaned_tasks)
        return phases

    def _describe(
        self,
        text: str,
        lines: list[str],
        name: str,
        phases: list[Phase],
        structure: StructuralResult,
    ) -> str:
        """
        First non-empty of: labelled description line, phase summary,
        leading plain-text lines, generic sentence.
        """
        cfg = self.config

        explicit = extract_description(text)
        if explicit:
            return explicit

        if phases:
            names = [phase.name for phase in phases[: cfg.description_phase_count]]
            return f"Project covering: {', '.join(names)}."

        end = structure.first_structure_line if structure.first_structure_line >= 0 else len(lines)
        leading = [
            line.strip()
            for line in lines[:end]
            if line.strip() and line.strip() != name and not COST_LINE_PATTERN.match(line.strip())
        ]
        if leading:
            return "\n".join(leading)[: cfg.max_description_length]

        return f"{name} imported from pasted text."


def parse(
    text: str,
    *,
    current_user: TeamMember | None = None,
    config: IngestionConfig | None = None,
    now: datetime | None = None,
) -> ParseResult:
    """Parse free text with a one-off ProjectTextParser."""
    return ProjectTextParser(config).parse(text, current_user=current_user, now=now)
