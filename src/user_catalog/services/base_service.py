"""
Base service layer result type shared by all services
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from user_catalog.services.errors import NotFoundError, ServiceError, ValidationError

VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
EXECUTION_ERROR = "EXECUTION_ERROR"


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Any]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[List[Any]] = None, count: Optional[int] = None) -> "ServiceResult":
        data = data if data is not None else []
        return cls(success=True, data=data, count=len(data) if count is None else count)

    @classmethod
    def fail(cls, error: str, error_type: str) -> "ServiceResult":
        return cls(success=False, error=error, error_type=error_type)

    @property
    def first(self) -> Optional[Any]:
        """First data item, or None when the result is empty"""
        return self.data[0] if self.data else None

    def raise_for_error(self) -> "ServiceResult":
        """Raise the domain exception matching a failed result"""
        if self.success:
            return self
        if self.error_type == VALIDATION_ERROR:
            raise ValidationError(self.error)
        if self.error_type == NOT_FOUND:
            raise NotFoundError(self.error)
        raise ServiceError(self.error or "Service operation failed")
