"""
Base Service.

Base class for all services. Services check credentials, apply business
rules, and call repositories. Repositories and the row store are
synchronous, so services hand every store call to the I/O thread pool.

Usage:
    from modules.backend.services.base import BaseService

    class ProposalService(BaseService):
        def __init__(self, store: RowStore) -> None:
            super().__init__(store)
            self.repo = ProposalRepository(store)

        async def get(self, proposal_id: str) -> Proposal:
            return await self._run_store("read_proposal", self.repo.read, proposal_id)
"""

from typing import Any, Callable, TypeVar

from modules.backend.core.concurrency import run_blocking
from modules.backend.core.database import RowStore
from modules.backend.core.exceptions import StoreError, ValidationError
from modules.backend.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    """
    Base class for all services.

    Provides:
    - The row store handle
    - Logging context
    - Offloading of blocking store calls
    - Common validation patterns
    """

    def __init__(self, store: RowStore) -> None:
        self._store = store
        self._logger = get_logger(self.__class__.__module__)

    @property
    def store(self) -> RowStore:
        """Get the row store."""
        return self._store

    async def _run_store(
        self,
        operation: str,
        fn: Callable[..., T],
        *args: Any,
    ) -> T:
        """
        Run a blocking repository call on the I/O pool.

        Store failures are already StoreError; they are logged here with the
        operation name and re-raised unchanged.
        """
        try:
            return await run_blocking(fn, *args)
        except StoreError:
            self._logger.error(
                "Store operation failed",
                extra={"service": self.__class__.__name__, "operation": operation},
            )
            raise

    def _validate_required(
        self,
        fields: dict[str, Any],
        field_names: list[str],
    ) -> None:
        """
        Validate that required fields are present and not empty.

        Raises:
            ValidationError: If any required field is missing or empty
        """
        missing = []
        for name in field_names:
            value = fields.get(name)
            if value is None or (isinstance(value, str) and not value):
                missing.append(name)

        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """Log a service operation with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
