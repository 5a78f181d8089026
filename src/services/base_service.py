"""
Base service layer shared by resource services
"""

import logging
import uuid
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

class BaseService:
    """Common result helpers and identifier handling for resource services"""

    def __init__(self, resource_name: str):
        self.resource_name = resource_name
        logger.info(f"{type(self).__name__} initialized for resource: {resource_name}")

    @staticmethod
    def parse_id(record_id: Any) -> Optional[uuid.UUID]:
        """Return the UUID form of an identifier, or None if it cannot name a record"""
        if isinstance(record_id, uuid.UUID):
            return record_id
        try:
            return uuid.UUID(str(record_id))
        except (ValueError, TypeError, AttributeError):
            return None

    def ok(self, data: Optional[List[Dict[str, Any]]] = None) -> ServiceResult:
        data = data or []
        return ServiceResult(success=True, data=data, count=len(data))

    def not_found(self, record_id: Any) -> ServiceResult:
        return ServiceResult(
            success=False,
            error=f"{self.resource_name} record not found: {record_id}",
            error_type="RESOURCE_NOT_FOUND"
        )

    def invalid_query(self, message: str) -> ServiceResult:
        return ServiceResult(
            success=False,
            error=message,
            error_type="INVALID_QUERY"
        )

    def database_error(self, operation: str, exc: Exception) -> ServiceResult:
        logger.error(f"{operation} operation failed for {self.resource_name}: {exc}", exc_info=True)
        return ServiceResult(
            success=False,
            error=f"Database operation failed: {exc}",
            error_type="DATABASE_ERROR"
        )
