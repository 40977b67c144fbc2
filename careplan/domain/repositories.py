"""Repository classes for data access."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from .models import ActivityTemplate, Child, NarrativeCache, ProgressLog, Staff, StaffAllocation, TimetableEntry


class ChildRepository:
    """Repository for child profiles."""

    @staticmethod
    def get_all(session: Session) -> List[Child]:
        """Get all children in creation order."""
        return session.query(Child).order_by(Child.created_at, Child.id).all()

    @staticmethod
    def get_by_id(session: Session, child_id: int) -> Optional[Child]:
        return session.get(Child, child_id)

    @staticmethod
    def create(session: Session, child: Child) -> Child:
        session.add(child)
        session.commit()
        session.refresh(child)
        return child


class StaffRepository:
    """Repository for staff members."""

    @staticmethod
    def get_all(session: Session) -> List[Staff]:
        """Get all staff in creation order (this is allocation priority order)."""
        return session.query(Staff).order_by(Staff.created_at, Staff.id).all()

    @staticmethod
    def create(session: Session, staff: Staff) -> Staff:
        session.add(staff)
        session.commit()
        session.refresh(staff)
        return staff


class ActivityTemplateRepository:
    """Repository for activity templates."""

    @staticmethod
    def get_all(session: Session) -> List[ActivityTemplate]:
        """Get all templates in creation order (this is round-robin order)."""
        return session.query(ActivityTemplate).order_by(ActivityTemplate.created_at, ActivityTemplate.id).all()

    @staticmethod
    def create(session: Session, template: ActivityTemplate) -> ActivityTemplate:
        session.add(template)
        session.commit()
        session.refresh(template)
        return template


class TimetableRepository:
    """Repository for timetable entries."""

    @staticmethod
    def get_by_date(session: Session, day: str) -> List[TimetableEntry]:
        """Get all entries for a date across children."""
        return session.query(TimetableEntry).filter(TimetableEntry.date == day).order_by(TimetableEntry.id).all()

    @staticmethod
    def get_for_child(session: Session, child_id: int, day: str) -> List[TimetableEntry]:
        """Get a child's entries for a date."""
        return (
            session.query(TimetableEntry)
            .filter(TimetableEntry.child_id == child_id, TimetableEntry.date == day)
            .order_by(TimetableEntry.start, TimetableEntry.id)
            .all()
        )

    @staticmethod
    def get_all(session: Session) -> List[TimetableEntry]:
        return session.query(TimetableEntry).order_by(TimetableEntry.date, TimetableEntry.id).all()

    @staticmethod
    def bulk_create(session: Session, entries: List[TimetableEntry]) -> None:
        session.add_all(entries)
        session.commit()

    @staticmethod
    def delete_for_child(session: Session, child_id: int, day: str) -> int:
        """Delete a child's entries for a date. Returns number of deleted rows."""
        count = (
            session.query(TimetableEntry)
            .filter(TimetableEntry.child_id == child_id, TimetableEntry.date == day)
            .delete(synchronize_session=False)
        )
        session.commit()
        return count


class StaffAllocationRepository:
    """Repository for staff allocations."""

    @staticmethod
    def get_by_date(session: Session, day: str) -> List[StaffAllocation]:
        return session.query(StaffAllocation).filter(StaffAllocation.date == day).order_by(StaffAllocation.id).all()

    @staticmethod
    def get_all(session: Session) -> List[StaffAllocation]:
        return session.query(StaffAllocation).order_by(StaffAllocation.date, StaffAllocation.id).all()

    @staticmethod
    def get_conflicts(session: Session, day: str) -> List[StaffAllocation]:
        """Get flagged double-bookings for a date."""
        return (
            session.query(StaffAllocation)
            .filter(StaffAllocation.date == day, StaffAllocation.conflict.is_(True))
            .all()
        )

    @staticmethod
    def bulk_create(session: Session, allocations: List[StaffAllocation]) -> None:
        session.add_all(allocations)
        session.commit()

    @staticmethod
    def delete_by_date(session: Session, day: str) -> int:
        """Delete all allocations for a date. Returns number of deleted rows."""
        count = (
            session.query(StaffAllocation)
            .filter(StaffAllocation.date == day)
            .delete(synchronize_session=False)
        )
        session.commit()
        return count

    @staticmethod
    def delete_for_child(session: Session, child_id: int, day: str) -> int:
        """Delete a child's allocations for a date. Returns number of deleted rows."""
        count = (
            session.query(StaffAllocation)
            .filter(StaffAllocation.child_id == child_id, StaffAllocation.date == day)
            .delete(synchronize_session=False)
        )
        session.commit()
        return count


class ProgressLogRepository:
    """Repository for progress logs."""

    @staticmethod
    def get_for_child(session: Session, child_id: int, day: Optional[str] = None) -> List[ProgressLog]:
        """Get a child's logs, optionally restricted to one date."""
        query = session.query(ProgressLog).filter(ProgressLog.child_id == child_id)
        if day is not None:
            query = query.filter(ProgressLog.date == day)
        return query.order_by(ProgressLog.date, ProgressLog.created_at, ProgressLog.id).all()

    @staticmethod
    def get_recent(session: Session, child_id: int, limit: int = 20) -> List[ProgressLog]:
        """Most recent logs for a child, oldest first."""
        logs = ProgressLogRepository.get_for_child(session, child_id)
        return logs[-limit:]

    @staticmethod
    def get_all(session: Session) -> List[ProgressLog]:
        return session.query(ProgressLog).order_by(ProgressLog.date, ProgressLog.id).all()

    @staticmethod
    def create(session: Session, log: ProgressLog) -> ProgressLog:
        session.add(log)
        session.commit()
        session.refresh(log)
        return log


class NarrativeCacheRepository:
    """Key/value store for last good narrative responses."""

    @staticmethod
    def get(session: Session, cache_key: str) -> Optional[NarrativeCache]:
        return session.get(NarrativeCache, cache_key)

    @staticmethod
    def put(session: Session, cache_key: str, payload: str) -> NarrativeCache:
        """Insert or replace the cached payload for a key."""
        entry = session.get(NarrativeCache, cache_key)
        if entry is None:
            entry = NarrativeCache(cache_key=cache_key, payload=payload)
            session.add(entry)
        else:
            entry.payload = payload
            entry.stored_at = datetime.utcnow()
        session.commit()
        return entry
