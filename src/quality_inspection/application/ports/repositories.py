"""Port interfaces for repositories (Dependency Inversion Principle)."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.quality_inspection.domain.entities.checklist_template import ChecklistTemplate
    from src.quality_inspection.domain.entities.inspection_result import InspectionResult


class ChecklistTemplateRepository(ABC):
    """Port interface for the checklist template catalog."""

    @abstractmethod
    async def save(self, template: "ChecklistTemplate") -> "ChecklistTemplate":
        """Save a checklist template (create or update)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, template_id: str) -> Optional["ChecklistTemplate"]:
        """Find checklist template by ID, active or not."""
        raise NotImplementedError

    @abstractmethod
    async def find_all(self) -> List["ChecklistTemplate"]:
        """Find all checklist templates ordered by name."""
        raise NotImplementedError

    @abstractmethod
    async def find_active(self) -> List["ChecklistTemplate"]:
        """Find active checklist templates ordered by name."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, template_id: str) -> bool:
        """Delete a checklist template."""
        raise NotImplementedError


class InspectionResultRepository(ABC):
    """Port interface for persisted inspection snapshots."""

    @abstractmethod
    async def save(self, inspection: "InspectionResult") -> "InspectionResult":
        """Save an inspection snapshot (create or update); the snapshot must have an ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, inspection_id: UUID) -> Optional["InspectionResult"]:
        """Find inspection by ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_order(self, order_id: str) -> List["InspectionResult"]:
        """Find all inspections of an order (most recent inspection date first)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_checklist(self, checklist_id: str) -> List["InspectionResult"]:
        """Find all inspections bound to a checklist template."""
        raise NotImplementedError

    @abstractmethod
    async def find_all(self, limit: Optional[int] = None) -> List["InspectionResult"]:
        """Find inspections (most recent first), optionally limited by count."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, inspection_id: UUID) -> bool:
        """Delete an inspection by ID."""
        raise NotImplementedError

    @abstractmethod
    async def exists(self, inspection_id: UUID) -> bool:
        """Check if an inspection exists."""
        raise NotImplementedError

    @abstractmethod
    async def count_by_status(self, order_id: Optional[str] = None) -> Dict[str, int]:
        """Count inspections per status value, optionally for one order."""
        raise NotImplementedError
