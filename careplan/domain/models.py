"""SQLAlchemy models for the care planning store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Child(Base):
    """Child profile."""

    __tablename__ = "children"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    birth_date = Column(String(10), nullable=True)  # YYYY-MM-DD
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    timetable = relationship("TimetableEntry", back_populates="child")
    allocations = relationship("StaffAllocation", back_populates="child")
    progress_logs = relationship("ProgressLog", back_populates="child")

    def __repr__(self) -> str:
        return f"<Child(id={self.id}, name='{self.name}')>"


class Staff(Base):
    """Staff member (therapist, aide, teacher...)."""

    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    role = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    allocations = relationship("StaffAllocation", back_populates="staff")

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, name='{self.name}', role='{self.role}')>"


class ActivityTemplate(Base):
    """Reusable activity with a fixed duration."""

    __tablename__ = "activity_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    duration_mins = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ActivityTemplate(id={self.id}, title='{self.title}', mins={self.duration_mins})>"


class TimetableEntry(Base):
    """One scheduled activity block for a child on a date."""

    __tablename__ = "timetable"

    id = Column(Integer, primary_key=True, autoincrement=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    activity = Column(String(200), nullable=False)
    start = Column(String(5), nullable=False)  # HH:MM
    end = Column(String(5), nullable=False)  # HH:MM
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    child = relationship("Child", back_populates="timetable")

    def __repr__(self) -> str:
        return f"<TimetableEntry(id={self.id}, child={self.child_id}, {self.date} {self.start}-{self.end}, '{self.activity}')>"


class StaffAllocation(Base):
    """Staff member assigned to a child's time block."""

    __tablename__ = "staff_allocations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    date = Column(String(10), nullable=False)
    start = Column(String(5), nullable=False)
    end = Column(String(5), nullable=False)
    conflict = Column(Boolean, nullable=False, default=False)  # double-booked
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    child = relationship("Child", back_populates="allocations")
    staff = relationship("Staff", back_populates="allocations")

    def __repr__(self) -> str:
        return (
            f"<StaffAllocation(id={self.id}, child={self.child_id}, staff={self.staff_id}, "
            f"{self.date} {self.start}-{self.end}, conflict={self.conflict})>"
        )


class ProgressLog(Base):
    """Daily progress observation for a child."""

    __tablename__ = "progress_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False)
    date = Column(String(10), nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    engagement = Column(Integer, nullable=False)  # 0-10 scale
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    child = relationship("Child", back_populates="progress_logs")

    def __repr__(self) -> str:
        return f"<ProgressLog(id={self.id}, child={self.child_id}, date={self.date}, engagement={self.engagement})>"


class NarrativeCache(Base):
    """Last good response from the narrative backend, keyed per request."""

    __tablename__ = "narrative_cache"

    cache_key = Column(String(300), primary_key=True)
    payload = Column(Text, nullable=False)  # JSON
    stored_at = Column(DateTime, nullable=False, default=datetime.utcnow)
