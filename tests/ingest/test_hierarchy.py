"""Tests for the hierarchy resolver."""

from datetime import datetime

import pytest

from vantageflow.ingest.hierarchy import (
    HierarchyResolver,
    HierarchyState,
    ResolverMode,
    StructuralResult,
    is_subtask,
)
from vantageflow.ingest.classifier import ClassifiedLine, LineKind
from vantageflow.ingest.ids import IdGenerator
from vantageflow.ingest.models import MarkerType, Phase, Task, TaskStatus

pytestmark = pytest.mark.unit

NOW = datetime(2026, 1, 12)


def _resolver() -> HierarchyResolver:
    ids = IdGenerator(token="abc123")

    def make_task(item: str, subtask: bool) -> Task:
        return Task(
            id=ids.next("subtask" if subtask else "task"),
            name=item,
            status=TaskStatus.ZERO,
            start_date=NOW,
            end_date=NOW,
        )

    return HierarchyResolver(ids, make_task)


def _resolve(text: str) -> StructuralResult:
    return _resolver().resolve(text.split("\n"))


def _task(name: str = "t") -> Task:
    return Task(id="task-x-1", name=name, status=TaskStatus.ZERO, start_date=NOW, end_date=NOW)


class TestIsSubtask:
    """Nesting decisions relative to the current parent."""

    def test_no_parent_is_never_subtask(self):
        state = HierarchyState()
        assert is_subtask(state, 8, MarkerType.BULLET) is False

    def test_clearly_deeper_is_subtask(self):
        state = HierarchyState()
        state.set_parent(_task(), 0, MarkerType.BULLET)
        assert is_subtask(state, 2, MarkerType.BULLET) is True

    def test_one_column_deeper_same_marker_is_sibling(self):
        state = HierarchyState()
        state.set_parent(_task(), 0, MarkerType.BULLET)
        assert is_subtask(state, 1, MarkerType.BULLET) is False

    @pytest.mark.parametrize("marker", [MarkerType.LETTER, MarkerType.BULLET])
    def test_number_to_letter_or_bullet_at_same_level_is_subtask(self, marker):
        state = HierarchyState()
        state.set_parent(_task(), 0, MarkerType.NUMBER)
        assert is_subtask(state, 0, marker) is True

    def test_number_to_number_at_same_level_is_sibling(self):
        state = HierarchyState()
        state.set_parent(_task(), 0, MarkerType.NUMBER)
        assert is_subtask(state, 0, MarkerType.NUMBER) is False

    def test_shallower_is_sibling(self):
        state = HierarchyState()
        state.set_parent(_task(), 4, MarkerType.NUMBER)
        assert is_subtask(state, 0, MarkerType.LETTER) is False


class TestHierarchyState:
    def test_mode_transitions(self):
        state = HierarchyState()
        assert state.mode is ResolverMode.NO_PHASE

        state.open_phase(Phase(id="phase-x-1", name="Build"))
        assert state.mode is ResolverMode.IN_PHASE_NO_PARENT

        state.set_parent(_task(), 0, MarkerType.BULLET)
        assert state.mode is ResolverMode.IN_PHASE_HAS_PARENT

        state.clear_parent()
        assert state.mode is ResolverMode.IN_PHASE_NO_PARENT
        assert state.parent_indent == -1
        assert state.parent_marker is MarkerType.NONE

    def test_opening_phase_clears_parent(self):
        state = HierarchyState()
        state.set_parent(_task(), 2, MarkerType.NUMBER)
        state.open_phase(Phase(id="phase-x-1", name="Next"), from_number=True)
        assert state.current_parent is None
        assert state.phase_from_number is True


class TestApply:
    """Placement follows the resolver mode line by line."""

    def test_placement_tracks_mode(self):
        resolver = _resolver()
        state = HierarchyState()
        result = StructuralResult()

        early = ClassifiedLine(LineKind.LIST_ITEM, "Early", marker=MarkerType.BULLET)
        resolver.apply(state, early, result)
        assert state.mode is ResolverMode.NO_PHASE
        assert [t.name for t in result.orphaned_tasks] == ["Early"]

        resolver.apply(state, ClassifiedLine(LineKind.PHASE_HEADER, "Build", line_number=1), result)
        assert state.mode is ResolverMode.IN_PHASE_NO_PARENT

        resolver.apply(
            state,
            ClassifiedLine(LineKind.LIST_ITEM, "Scaffold", marker=MarkerType.BULLET, line_number=2),
            result,
        )
        assert state.mode is ResolverMode.IN_PHASE_HAS_PARENT

        resolver.apply(state, ClassifiedLine(LineKind.SECTION_BREAK, "---", line_number=3), result)
        assert state.mode is ResolverMode.IN_PHASE_NO_PARENT

        resolver.apply(
            state,
            ClassifiedLine(
                LineKind.LIST_ITEM, "Deploy", indent=4, marker=MarkerType.BULLET, line_number=4
            ),
            result,
        )
        assert [t.name for t in result.phases[0].tasks] == ["Scaffold", "Deploy"]
        assert result.phases[0].tasks[0].sub_tasks == []
        assert [t.name for t in result.orphaned_tasks] == ["Early"]
        assert result.first_structure_line == 0


class TestResolve:
    """End-to-end structure recovery from text."""

    def test_marker_transition_creates_subtasks(self):
        result = _resolve("Planning:\n1. Draft budget\na. Collect quotes\n- Review figures")

        assert len(result.phases) == 1
        phase = result.phases[0]
        assert phase.name == "Planning"
        assert [t.name for t in phase.tasks] == ["Draft budget"]
        assert [s.name for s in phase.tasks[0].sub_tasks] == ["Collect quotes", "Review figures"]

    def test_root_numbered_items_become_phases(self):
        result = _resolve("1. Alpha\n   - first\n2. Beta\n   - second")

        assert [p.name for p in result.phases] == ["Alpha", "Beta"]
        assert [t.name for t in result.phases[0].tasks] == ["first"]
        assert [t.name for t in result.phases[1].tasks] == ["second"]

    def test_numbered_items_without_children(self):
        result = _resolve("1. Alpha\n2. Beta")
        assert [p.name for p in result.phases] == ["Alpha", "Beta"]
        assert all(not p.tasks for p in result.phases)

    def test_section_break_prevents_nesting(self):
        result = _resolve("Phase 1: Build\n1. Setup\n---\na. Configure")

        tasks = result.phases[0].tasks
        assert [t.name for t in tasks] == ["Setup", "Configure"]
        assert all(not t.sub_tasks for t in tasks)

    def test_depth_is_capped_at_two_levels(self):
        result = _resolve("Tasks:\n- A\n  - B\n    - C")

        tasks = result.phases[0].tasks
        assert [t.name for t in tasks] == ["A"]
        assert [s.name for s in tasks[0].sub_tasks] == ["B", "C"]
        assert all(not s.sub_tasks for s in tasks[0].sub_tasks)

    def test_tasks_before_first_header_are_orphaned(self):
        result = _resolve("- A\n- B\nPhase 1: Main\n- C")

        assert [t.name for t in result.orphaned_tasks] == ["A", "B"]
        assert [t.name for t in result.phases[0].tasks] == ["C"]

    def test_indented_continuation_nests_under_parent(self):
        result = _resolve("Phase 1: Build\n- Setup\n    configure the CI runner")

        task = result.phases[0].tasks[0]
        assert [s.name for s in task.sub_tasks] == ["configure the CI runner"]

    def test_indented_continuation_without_parent_is_task(self):
        result = _resolve("Phase 1: Build\n  follow up with vendor")
        assert [t.name for t in result.phases[0].tasks] == ["follow up with vendor"]

    def test_plain_text_is_ignored(self):
        result = _resolve("Some notes\n\nPhase 1: Build\nWe talked for a while.\n- Setup")

        assert result.first_structure_line == 2
        assert [t.name for t in result.phases[0].tasks] == ["Setup"]

    def test_first_structure_line_is_minus_one_without_structure(self):
        result = _resolve("Just prose.\nMore prose.")
        assert result.first_structure_line == -1
        assert result.phases == []
        assert result.orphaned_tasks == []

    def test_ids_are_unique(self):
        result = _resolve("Phase 1: A\n1. x\n   a. y\n2. z\nPhase 2: B\n- w")

        ids = [p.id for p in result.phases]
        for phase in result.phases:
            for task in phase.tasks:
                ids.append(task.id)
                ids.extend(s.id for s in task.sub_tasks)
        assert len(ids) == len(set(ids))
        assert all(i.startswith(("phase-", "task-", "subtask-")) for i in ids)
