"""
Base Service.

Base class for the store-backed sessions. Holds the injected LocalStore and
tags every log record with the session source and the service class.

Usage:
    from studynotes.services.base import BaseService

    class NoteSession(BaseService):
        def __init__(self, store: LocalStore) -> None:
            super().__init__(store)

        def create(self) -> Note:
            ...
            self._log_operation("Created note", note_id=note.id)
"""

from typing import Any

from studynotes.core.logging import get_logger
from studynotes.repositories.store import LocalStore


class BaseService:
    """
    Base class for store-backed services.

    Provides:
    - Access to the injected LocalStore
    - Logging context
    """

    def __init__(self, store: LocalStore) -> None:
        """
        Initialize the service with a store.

        Args:
            store: LocalStore used for all persistence
        """
        self._store = store
        self._logger = get_logger(self.__class__.__module__)

    @property
    def store(self) -> LocalStore:
        """Get the local store."""
        return self._store

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            source="session",
            service=self.__class__.__name__,
            **context,
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        """Log debug information."""
        self._logger.debug(
            message,
            source="session",
            service=self.__class__.__name__,
            **context,
        )
