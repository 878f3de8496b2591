"""
Exception hierarchy for the indexing and hybrid search core.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class HybridIndexException(Exception):
    """Base exception for all hybrid_index errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(HybridIndexException):
    """Raised when input validation fails, before any work begins."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ProviderError(HybridIndexException):
    """Raised when the embedding provider times out, fails or returns a bad vector."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize provider error.

        Args:
            message: Error message
            model: Embedding model that was called
            details: Additional context
        """
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)


class StoreError(HybridIndexException):
    """Raised when a transactional write or query against the store fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize store error.

        Args:
            message: Error message
            operation: Operation that failed (reindex, claim, search)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class StaleWriteError(HybridIndexException):
    """Raised when a worker writes to a job or chunk removed by a concurrent re-index."""

    def __init__(
        self,
        message: str,
        job_id: str | None = None,
        chunk_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize stale write error.

        Args:
            message: Error message
            job_id: Job the worker was finalizing
            chunk_id: Chunk the worker was writing to
            details: Additional context
        """
        details = details or {}
        if job_id:
            details["job_id"] = job_id
        if chunk_id:
            details["chunk_id"] = chunk_id
        super().__init__(message, details)
