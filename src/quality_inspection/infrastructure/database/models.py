"""SQLAlchemy database models."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, String, DateTime, Boolean, Text, Enum as SQLEnum, JSON
from sqlalchemy.dialects.postgresql import UUID as PostgresUUID
from sqlalchemy.orm import declarative_base

from src.quality_inspection.domain.value_objects.inspection_status import InspectionStatus

Base = declarative_base()


class ChecklistTemplateModel(Base):
    """SQLAlchemy model for checklist templates."""

    __tablename__ = "checklist_templates"

    id = Column(String(64), primary_key=True)

    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    applicable_to_stages = Column(JSON, nullable=True)  # JSON array of stage names

    # Sections with their items (stored as JSON)
    sections = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ChecklistTemplateModel(id='{self.id}', name='{self.name}', active={self.is_active})>"


class InspectionResultModel(Base):
    """SQLAlchemy model for inspection result snapshots."""

    __tablename__ = "inspection_results"

    id = Column(PostgresUUID(as_uuid=True), primary_key=True, default=uuid4)

    # Template binding, fixed once the inspection is created
    checklist_id = Column(String(64), nullable=False, index=True)
    checklist_name = Column(String(200), nullable=False)

    # Scope
    order_id = Column(String(64), nullable=False, index=True)
    item_id = Column(String(64), nullable=True)

    inspector = Column(String(200), nullable=False)
    inspection_date = Column(DateTime, nullable=False, index=True)

    # Derived status, denormalized for metrics queries
    status = Column(SQLEnum(InspectionStatus, values_callable=lambda obj: [e.value for e in obj]), nullable=False, index=True)

    comments = Column(Text, nullable=False, default="")

    # Sections with recorded values and verdicts (stored as JSON)
    sections = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<InspectionResultModel(id={self.id}, order_id='{self.order_id}', status='{self.status}', checklist_id='{self.checklist_id}')>"
