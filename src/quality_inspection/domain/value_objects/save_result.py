"""Save operation result value object."""

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID


@dataclass(frozen=True)
class SaveResult:
    """Value object for the outcome of saving an inspection."""

    success: bool
    inspection_id: Optional[UUID] = None
    validation_errors: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    retryable: bool = False

    @classmethod
    def saved(cls, inspection_id: UUID) -> "SaveResult":
        return cls(success=True, inspection_id=inspection_id)

    @classmethod
    def invalid(cls, errors: List[str]) -> "SaveResult":
        return cls(success=False, validation_errors=list(errors))

    @classmethod
    def failed(cls, message: str) -> "SaveResult":
        return cls(success=False, error_message=message, retryable=True)
