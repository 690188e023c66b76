"""ORM models for the HR star schema: employee and time dimensions, performance and retention facts."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    func,
)
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class DimEmployee(Base):
    """One employee; descriptive attributes beyond the core columns live in ``attributes``."""

    __tablename__ = "dim_employee"

    employee_id = Column(Integer, primary_key=True, autoincrement=False)
    first_name = Column(String(50), nullable=True)  # not in the HR export
    last_name = Column(String(50), nullable=True)
    gender = Column(String(10), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    hire_date = Column(Date, nullable=True)  # estimated from tenure when missing
    department = Column(String(50), nullable=True)
    role = Column(String(50), nullable=True)
    location = Column(String(50), nullable=True)
    tenure_years = Column(Float, nullable=True)
    attrition = Column(Boolean, nullable=False, default=False)
    distance_from_home = Column(Float, nullable=True)
    attributes = Column(JSON, nullable=True)  # {field_name: value} for the remaining export columns
    loaded_at = Column(DateTime(timezone=True), server_default=func.now())


class DimTime(Base):
    """Calendar attributes for every date referenced by a fact row."""

    __tablename__ = "dim_time"

    date_key = Column(Date, primary_key=True)
    year = Column(Integer, nullable=False)
    quarter = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    day = Column(Integer, nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday


class PerformanceFact(Base):
    """A dated performance score."""

    __tablename__ = "performance_fact"
    __table_args__ = (
        CheckConstraint("performance_score BETWEEN 1 AND 5", name="ck_performance_score_range"),
    )

    perf_id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("dim_employee.employee_id"), nullable=False, index=True)
    date_key = Column(Date, ForeignKey("dim_time.date_key"), nullable=False)
    performance_score = Column(Integer, nullable=False)


class RetentionFact(Base):
    """A hire or exit event."""

    __tablename__ = "retention_fact"

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("dim_employee.employee_id"), nullable=False, index=True)
    event_date = Column(Date, ForeignKey("dim_time.date_key"), nullable=False)
    event_type = Column(String(10), nullable=False)  # "hire" | "exit"
