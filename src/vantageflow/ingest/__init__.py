"""
Free-text project ingestion.

Turns a block of pasted notes into a structured project:
- classifier: per-line kind (phase header, list item, continuation, break, text)
- hierarchy: phases -> tasks -> subtasks from classified lines
- enrich: status/priority/assignee/due date tokens inside task lines
- metadata: title, cost, currency, category, team over the whole text
- assembler: merges everything and scores confidence
"""

from vantageflow.ingest.assembler import ProjectTextParser, parse
from vantageflow.ingest.models import (
    Currency,
    Duration,
    DurationUnit,
    LeadRole,
    ParseReport,
    ParseResult,
    PartialProject,
    Phase,
    SourceType,
    Task,
    TaskPriority,
    TaskStatus,
    TeamMember,
)

__all__ = [
    "Currency",
    "Duration",
    "DurationUnit",
    "LeadRole",
    "ParseReport",
    "ParseResult",
    "PartialProject",
    "Phase",
    "ProjectTextParser",
    "SourceType",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TeamMember",
    "parse",
]
