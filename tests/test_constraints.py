import pytest

from careplan.domain.values import Allocation, TimeBlock, TimeWindow
from careplan.services.constraints import (
    is_staff_free,
    validate_allocations,
    validate_engagement,
    validate_template_duration,
    validate_time_string,
    validate_window,
)


def test_staff_free_ignores_other_dates():
    existing = [Allocation(child_id=1, staff_id=1, date="2024-01-01", start="09:00", end="10:00")]
    assert is_staff_free(existing, TimeBlock(child_id=2, date="2024-01-02", start="09:00", end="10:00"))
    assert not is_staff_free(existing, TimeBlock(child_id=2, date="2024-01-01", start="09:59", end="10:30"))
    assert is_staff_free(existing, TimeBlock(child_id=2, date="2024-01-01", start="10:00", end="10:30"))


def test_staff_free_with_no_allocations():
    assert is_staff_free([], TimeBlock(child_id=1, date="2024-01-01", start="09:00", end="10:00"))


def test_validate_allocations_detects_overlap():
    allocations = [
        Allocation(child_id=1, staff_id=5, date="2024-01-01", start="09:00", end="10:00"),
        Allocation(child_id=2, staff_id=5, date="2024-01-01", start="09:30", end="10:30"),
    ]
    with pytest.raises(ValueError, match="Staff 5"):
        validate_allocations(allocations)


def test_validate_allocations_allows_flagged_conflicts():
    allocations = [
        Allocation(child_id=1, staff_id=5, date="2024-01-01", start="09:00", end="10:00"),
        Allocation(child_id=2, staff_id=5, date="2024-01-01", start="09:30", end="10:30", conflict=True),
    ]
    validate_allocations(allocations)


def test_time_string_validation():
    assert validate_time_string("07:05") == "07:05"
    for bad in ["7:05", "24:00", "12:60", "noon", ""]:
        with pytest.raises(ValueError):
            validate_time_string(bad)


def test_window_validation():
    assert validate_window(TimeWindow("09:00", "09:00"))
    with pytest.raises(ValueError):
        validate_window(TimeWindow("12:00", "09:00"))


def test_template_duration_and_engagement():
    assert validate_template_duration(15) == 15
    with pytest.raises(ValueError):
        validate_template_duration(0)
    assert validate_engagement(10) == 10
    with pytest.raises(ValueError):
        validate_engagement(11)
    with pytest.raises(ValueError):
        validate_engagement(-1)
