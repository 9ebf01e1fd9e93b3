"""
SQLAlchemy models for the database.
Maps day ledgers, work segments and the directories to database tables.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Float, Date, ForeignKey,
    Enum as SQLEnum, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from timeledger.domain.models.directory import DEFAULT_PROJECT_COLOR, UserRole
from .database import Base


class ClientModel(Base):
    """Client table"""
    __tablename__ = 'clients'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    projects = relationship("ProjectModel", back_populates="client")


class ProjectModel(Base):
    """Project table"""
    __tablename__ = 'projects'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    color = Column(String(20), default=DEFAULT_PROJECT_COLOR)
    client_id = Column(Integer, ForeignKey('clients.id', ondelete='SET NULL'))
    active = Column(Boolean, default=True, nullable=False)

    client = relationship("ClientModel", back_populates="projects")


class EmployeeModel(Base):
    """Employee table"""
    __tablename__ = 'employees'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(SQLEnum(UserRole), default=UserRole.COLLABORATOR, nullable=False)

    day_ledgers = relationship("DayLedgerModel", back_populates="employee")


class DayLedgerModel(Base):
    """One employee's time record for one calendar day"""
    __tablename__ = 'day_ledgers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey('employees.id', ondelete='CASCADE'), nullable=False)
    day = Column(Date, nullable=False)
    permits_hours = Column(Float, default=0.0, nullable=False)
    illness = Column(Boolean, default=False, nullable=False)
    holiday = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    employee = relationship("EmployeeModel", back_populates="day_ledgers")
    worked_hours = relationship(
        "WorkSegmentModel",
        back_populates="day_ledger",
        cascade="all, delete-orphan",
        order_by="WorkSegmentModel.position",
    )

    __table_args__ = (
        UniqueConstraint('employee_id', 'day', name='unique_employee_day'),
        CheckConstraint('permits_hours >= 0', name='check_permits_hours_non_negative'),
        Index('idx_day_ledgers_day', 'day'),
    )


class WorkSegmentModel(Base):
    """Project hours booked on a day ledger"""
    __tablename__ = 'work_segments'

    id = Column(Integer, primary_key=True, autoincrement=True)
    day_ledger_id = Column(Integer, ForeignKey('day_ledgers.id', ondelete='CASCADE'), nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id'), nullable=False)
    customer_id = Column(Integer, ForeignKey('clients.id'))
    hours = Column(Float, nullable=False)
    position = Column(Integer, default=0, nullable=False)

    day_ledger = relationship("DayLedgerModel", back_populates="worked_hours")
    project = relationship("ProjectModel")

    __table_args__ = (
        CheckConstraint('hours > 0', name='check_segment_hours_positive'),
        Index('idx_work_segments_ledger', 'day_ledger_id'),
    )


def create_all_tables(engine):
    """Create all tables in the database"""
    Base.metadata.create_all(bind=engine)
