"""
Hierarchy resolver: turns classified lines into phases with nested tasks.

State is held in an explicit HierarchyState record and threaded through the
line loop. Nesting is capped at two levels (task -> subtask); an item that
would be a subtask of a subtask is attached to the same parent instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from vantageflow.ingest.classifier import ClassifiedLine, LineContext, LineKind, classify_line
from vantageflow.ingest.ids import IdGenerator
from vantageflow.ingest.models import MarkerType, Phase, Task

logger = logging.getLogger(__name__)

# (item text, is_subtask) -> Task
TaskFactory = Callable[[str, bool], Task]


class ResolverMode(str, Enum):
    NO_PHASE = "no_phase"
    IN_PHASE_NO_PARENT = "in_phase_no_parent"
    IN_PHASE_HAS_PARENT = "in_phase_has_parent"


@dataclass
class HierarchyState:
    """Mutable cursor carried across lines.

    Attributes:
        current_phase: Phase receiving new sibling tasks (None before any header)
        phase_from_number: current_phase was promoted from a root numbered item
        current_parent: Task that receives subtasks
        parent_indent: Indentation of current_parent's line (-1 when none)
        parent_marker: Marker type of current_parent's line
    """

    current_phase: Phase | None = None
    phase_from_number: bool = False
    current_parent: Task | None = None
    parent_indent: int = -1
    parent_marker: MarkerType = MarkerType.NONE

    @property
    def mode(self) -> ResolverMode:
        if self.current_phase is None:
            return ResolverMode.NO_PHASE
        if self.current_parent is None:
            return ResolverMode.IN_PHASE_NO_PARENT
        return ResolverMode.IN_PHASE_HAS_PARENT

    def clear_parent(self) -> None:
        self.current_parent = None
        self.parent_indent = -1
        self.parent_marker = MarkerType.NONE

    def set_parent(self, task: Task, indent: int, marker: MarkerType) -> None:
        self.current_parent = task
        self.parent_indent = indent
        self.parent_marker = marker

    def open_phase(self, phase: Phase, from_number: bool = False) -> None:
        self.current_phase = phase
        self.phase_from_number = from_number
        self.clear_parent()


@dataclass
class StructuralResult:
    """Output of one walk over the document lines.

    Attributes:
        phases: Phases in document order
        orphaned_tasks: Tasks seen before any phase header
        first_structure_line: Index of the first header/list line, -1 if none
    """

    phases: list[Phase] = field(default_factory=list)
    orphaned_tasks: list[Task] = field(default_factory=list)
    first_structure_line: int = -1


def is_subtask(state: HierarchyState, indent: int, marker: MarkerType) -> bool:
    """
    Decide whether a list item nests under the current parent task.

    - No parent: never a subtask
    - Clearly deeper (indent > parent + 1): subtask
    - Roughly level (within 1 column): subtask only on a
      number -> letter/bullet marker transition
    - Shallower: sibling
    """
    if state.current_parent is None:
        return False
    if indent > state.parent_indent + 1:
        return True
    if abs(indent - state.parent_indent) <= 1:
        return state.parent_marker is MarkerType.NUMBER and marker in (
            MarkerType.LETTER,
            MarkerType.BULLET,
        )
    return False


class HierarchyResolver:
    """
    Walks document lines once, building phases, tasks and subtasks.

    Example:
        resolver = HierarchyResolver(ids, make_task)
        result = resolver.resolve(text.split("\\n"))
    """

    def __init__(self, ids: IdGenerator, make_task: TaskFactory) -> None:
        self.ids = ids
        self.make_task = make_task

    def resolve(self, lines: list[str]) -> StructuralResult:
        result = StructuralResult()
        state = HierarchyState()
        seen_first = False

        for index, line in enumerate(lines):
            if not line.strip():
                continue

            context = LineContext(
                is_first=not seen_first,
                phase_open=state.mode is not ResolverMode.NO_PHASE,
                phase_from_number=state.phase_from_number,
            )
            seen_first = True

            classified = classify_line(line, context, index)
            self.apply(state, classified, result)

        logger.debug(
            f"Resolved {len(result.phases)} phases, {len(result.orphaned_tasks)} orphaned tasks"
        )
        return result

    def apply(
        self, state: HierarchyState, line: ClassifiedLine, result: StructuralResult
    ) -> None:
        """Apply one classified line to the state and the result."""
        if line.kind is LineKind.SECTION_BREAK:
            state.clear_parent()
            return

        if line.kind is LineKind.PLAIN_TEXT:
            return

        if result.first_structure_line == -1:
            result.first_structure_line = line.line_number

        if line.kind is LineKind.PHASE_HEADER:
            phase = Phase(id=self.ids.next("phase"), name=line.text)
            result.phases.append(phase)
            state.open_phase(phase, from_number=line.promoted)
            logger.debug(f"Line {line.line_number}: phase '{phase.name}'")
            return

        # LIST_ITEM or INDENTED_CONTINUATION
        if is_subtask(state, line.indent, line.marker):
            assert state.current_parent is not None
            task = self.make_task(line.text, True)
            state.current_parent.sub_tasks.append(task)
            logger.debug(f"Line {line.line_number}: subtask '{task.name}'")
            return

        task = self.make_task(line.text, False)
        if state.mode is ResolverMode.NO_PHASE:
            result.orphaned_tasks.append(task)
        else:
            assert state.current_phase is not None
            state.current_phase.tasks.append(task)
        state.set_parent(task, line.indent, line.marker)
        logger.debug(f"Line {line.line_number}: task '{task.name}'")
