"""Tests for the Orchestrator - loading inputs, running the core and persisting results."""

import pytest

from careplan.domain.models import ActivityTemplate, Child, Staff, StaffAllocation, TimetableEntry
from careplan.domain.repositories import StaffAllocationRepository, TimetableRepository
from careplan.domain.values import TimeWindow
from careplan.engine.orchestrator import Orchestrator, allocate_day, plan_child_day, summarize_allocations

DAY = "2025-03-03"


@pytest.fixture
def sample_children(db_session):
    children = [Child(id=1, name="Ava"), Child(id=2, name="Leo")]
    db_session.add_all(children)
    db_session.commit()
    return children


@pytest.fixture
def sample_templates(db_session):
    templates = [
        ActivityTemplate(id=1, title="Circle Time", duration_mins=30),
        ActivityTemplate(id=2, title="Sensory Play", duration_mins=45),
    ]
    db_session.add_all(templates)
    db_session.commit()
    return templates


@pytest.fixture
def sample_staff(db_session):
    staff = [Staff(id=1, name="Maya", role="Therapist"), Staff(id=2, name="Omar", role="Aide")]
    db_session.add_all(staff)
    db_session.commit()
    return staff


def test_plan_child_day_persists_entries(db_session, sample_children, sample_templates):
    blocks = plan_child_day(db_session, 1, DAY, TimeWindow("09:00", "11:00"))

    assert [(b.start, b.end, b.activity) for b in blocks] == [
        ("09:00", "09:30", "Circle Time"),
        ("09:30", "10:15", "Sensory Play"),
        ("10:15", "10:45", "Circle Time"),
    ]
    stored = TimetableRepository.get_for_child(db_session, 1, DAY)
    assert [(e.start, e.end, e.activity) for e in stored] == [(b.start, b.end, b.activity) for b in blocks]


def test_plan_child_day_replaces_previous_plan(db_session, sample_children, sample_templates):
    plan_child_day(db_session, 1, DAY, TimeWindow("09:00", "11:00"))
    plan_child_day(db_session, 1, DAY, TimeWindow("09:00", "09:30"))

    stored = TimetableRepository.get_for_child(db_session, 1, DAY)
    assert len(stored) == 1


def test_replan_drops_allocations_for_old_entries(db_session, sample_children, sample_templates, sample_staff):
    orchestrator = Orchestrator()
    orchestrator.plan_child_day(db_session, 1, DAY, TimeWindow("09:00", "11:00"))
    orchestrator.plan_child_day(db_session, 2, DAY, TimeWindow("09:00", "09:30"))
    orchestrator.allocate_day(db_session, DAY)
    assert len(StaffAllocationRepository.get_by_date(db_session, DAY)) == 4

    orchestrator.plan_child_day(db_session, 1, DAY, TimeWindow("09:00", "09:30"))

    remaining = StaffAllocationRepository.get_by_date(db_session, DAY)
    assert [(a.child_id, a.start, a.end) for a in remaining] == [(2, "09:00", "09:30")]


def test_plan_child_day_dry_run(db_session, sample_children, sample_templates):
    blocks = plan_child_day(db_session, 1, DAY, TimeWindow("09:00", "10:00"), persist=False)
    assert blocks
    assert TimetableRepository.get_for_child(db_session, 1, DAY) == []


def test_plan_unknown_child(db_session, sample_templates):
    with pytest.raises(RuntimeError, match="not found"):
        plan_child_day(db_session, 99, DAY, TimeWindow("09:00", "10:00"))


def test_plan_without_templates_is_empty(db_session, sample_children):
    assert plan_child_day(db_session, 1, DAY, TimeWindow("09:00", "10:00")) == []


def test_allocate_day_persists_and_stamps_staff(db_session, sample_children, sample_templates, sample_staff):
    orchestrator = Orchestrator()
    orchestrator.plan_child_day(db_session, 1, DAY, TimeWindow("09:00", "10:00"))
    orchestrator.plan_child_day(db_session, 2, DAY, TimeWindow("09:00", "10:00"))

    allocations = orchestrator.allocate_day(db_session, DAY)

    # Two children in parallel: each time slot needs both staff members
    assert len(allocations) == 2
    assert {a.staff_id for a in allocations} == {1, 2}
    assert not any(a.conflict for a in allocations)

    stored = StaffAllocationRepository.get_by_date(db_session, DAY)
    assert len(stored) == 2
    for entry in TimetableRepository.get_by_date(db_session, DAY):
        assert entry.staff_id in (1, 2)


def test_allocate_day_flags_conflicts(db_session, sample_children, sample_staff):
    db_session.add_all(
        [TimetableEntry(child_id=c, date=DAY, activity="Play", start="09:00", end="10:00") for c in (1, 2)]
        + [TimetableEntry(child_id=1, date=DAY, activity="Snack", start="09:30", end="10:00")]
    )
    db_session.commit()

    allocations = allocate_day(db_session, DAY)

    assert [a.conflict for a in allocations] == [False, False, True]
    assert allocations[-1].staff_id == 1
    assert len(StaffAllocationRepository.get_conflicts(db_session, DAY)) == 1


def test_allocate_day_replaces_previous_run(db_session, sample_children, sample_staff):
    db_session.add(TimetableEntry(child_id=1, date=DAY, activity="Play", start="09:00", end="10:00"))
    db_session.commit()

    allocate_day(db_session, DAY)
    allocate_day(db_session, DAY)

    assert db_session.query(StaffAllocation).count() == 1


def test_allocate_day_without_staff(db_session, sample_children):
    db_session.add(TimetableEntry(child_id=1, date=DAY, activity="Play", start="09:00", end="10:00"))
    db_session.commit()

    assert allocate_day(db_session, DAY) == []
    assert StaffAllocationRepository.get_by_date(db_session, DAY) == []


def test_summarize_allocations(db_session, sample_children, sample_staff):
    db_session.add_all(
        [TimetableEntry(child_id=c, date=DAY, activity="Play", start="09:00", end="10:00") for c in (1, 2, 1)]
    )
    db_session.commit()

    report = summarize_allocations(allocate_day(db_session, DAY, persist=False))
    assert "Conflicts: 1" in report
    assert summarize_allocations([]) == "No allocations."
