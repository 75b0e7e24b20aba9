"""
Base service layer for store-backed resources
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional
from dataclasses import dataclass

from blog_api.database.connection import get_post_store
from blog_api.database.post_store import PostNotFoundError, PostStore, PostValidationError, StoreError

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Any]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None


class BaseService:
    """Runs a single store operation and reports the outcome as a ServiceResult"""

    def __init__(self, resource_name: str):
        self.resource_name = resource_name
        logger.info(f"BaseService initialized for resource: {resource_name}")

    def get_store(self) -> PostStore:
        store = get_post_store()
        if store is None:
            raise StoreError("Database store not initialized")
        return store

    async def execute(
        self,
        operation_name: str,
        operation: Callable[[PostStore], Awaitable[Any]]
    ) -> ServiceResult:
        """
        Execute one store operation

        Args:
            operation_name: Short name used in logs (e.g. "create")
            operation: Coroutine function receiving the store

        Returns:
            ServiceResult; lists are returned as-is, a single record is
            wrapped in a one-element list, None gives an empty result
        """
        try:
            outcome = await operation(self.get_store())

        except PostValidationError as e:
            logger.info(f"{operation_name.capitalize()} rejected for {self.resource_name}: {e}")
            return ServiceResult(
                success=False,
                error=str(e),
                error_type="VALIDATION_ERROR"
            )
        except PostNotFoundError as e:
            return ServiceResult(
                success=False,
                error=str(e),
                error_type="NOT_FOUND"
            )
        except StoreError as e:
            logger.error(f"{operation_name.capitalize()} operation failed for {self.resource_name}: {e}", exc_info=True)
            return ServiceResult(
                success=False,
                error=f"Database operation failed: {e}",
                error_type="DATABASE_ERROR"
            )
        except Exception as e:
            logger.error(f"{operation_name.capitalize()} operation failed for {self.resource_name}: {e}", exc_info=True)
            return ServiceResult(
                success=False,
                error=str(e),
                error_type="EXECUTION_ERROR"
            )

        if outcome is None:
            data = []
        elif isinstance(outcome, list):
            data = outcome
        else:
            data = [outcome]

        return ServiceResult(
            success=True,
            data=data,
            count=len(data)
        )
