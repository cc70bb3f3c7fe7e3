# models/calendar.py
# 학교 캘린더 테이블: 행사/학년별 커리큘럼/A·B 요일/특별일/자료
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, Text, ForeignKey,
    UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()

GRADE_MIN, GRADE_MAX = 9, 12


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (Index("idx_events_school_date", "school", "date"),)

    id = Column(Integer, primary_key=True, index=True)
    school = Column(String(10), nullable=False)
    date = Column(Date, nullable=False)
    title = Column(String(255), nullable=False)
    time = Column(String(5), nullable=True)  # HH:MM
    department = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    curriculum = relationship(
        "CurriculumEntry",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CurriculumEntry.grade",
    )


class CurriculumEntry(Base):
    __tablename__ = "curriculum_entries"
    __table_args__ = (
        CheckConstraint(f"grade BETWEEN {GRADE_MIN} AND {GRADE_MAX}", name="ck_curriculum_grade"),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    grade = Column(Integer, nullable=False)
    links = Column(Text, nullable=True)
    description = Column(Text, nullable=True)

    event = relationship("Event", back_populates="curriculum")


class DayLabel(Base):
    __tablename__ = "day_labels"
    __table_args__ = (UniqueConstraint("school", "date", name="uq_day_labels_school_date"),)

    id = Column(Integer, primary_key=True)
    school = Column(String(10), nullable=False)
    date = Column(Date, nullable=False)
    label = Column(String(1), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class SpecialDay(Base):
    __tablename__ = "special_days"
    __table_args__ = (UniqueConstraint("school", "date", name="uq_special_days_school_date"),)

    id = Column(Integer, primary_key=True)
    school = Column(String(10), nullable=False)
    date = Column(Date, nullable=False)
    type = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Material(Base):
    __tablename__ = "materials"
    __table_args__ = (
        CheckConstraint(f"grade BETWEEN {GRADE_MIN} AND {GRADE_MAX}", name="ck_materials_grade"),
        Index("idx_materials_school_date", "school", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    school = Column(String(10), nullable=False)
    date = Column(Date, nullable=False)
    grade = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    link = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    password = Column(String(255), nullable=True)  # 화면 단 잠금용(보안 경계 아님)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
