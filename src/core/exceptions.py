#!/usr/bin/env python3
"""
Standardized exception hierarchy for the Democracy Lens backend.

Every failure that crosses a service boundary is expressed as one of these
types so the HTTP layer can map it to a status code and a JSON envelope.
"""

from typing import Optional, Dict, Any

MISSING_FIELDS = "Missing required fields"


class DemocracyLensError(Exception):
    """Base exception for all Democracy Lens errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Upstream source exceptions
class SourceError(DemocracyLensError):
    """Base exception for external content sources (news feed, regulations API)."""
    pass


class NewsApiError(SourceError):
    """The news-search API failed or answered with a non-ok status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        context = {'status_code': status_code}
        super().__init__(message, context=context)
        self.status_code = status_code


class RegulationsApiError(SourceError):
    """The regulations API failed."""

    def __init__(self, operation: str, original_error: Any, status_code: Optional[int] = None):
        message = f"Regulations API {operation} failed"
        context = {
            'operation': operation,
            'status_code': status_code,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)
        self.status_code = status_code


class RateLimitError(DemocracyLensError):
    """An upstream service answered with HTTP 429."""

    def __init__(self, service: str, retry_after_seconds: Optional[int] = None):
        message = f"Too Many Requests from {service}"
        if retry_after_seconds:
            message += f", retry after {retry_after_seconds}s"

        context = {
            'service': service,
            'retry_after_seconds': retry_after_seconds
        }
        super().__init__(message, context=context)
        self.service = service
        self.retry_after_seconds = retry_after_seconds


# Database-related exceptions
class DatabaseError(DemocracyLensError):
    """Base exception for database errors."""
    pass


class DatabaseConnectionError(DatabaseError):
    """Failed to connect to database."""

    def __init__(self, connection_type: str, original_error: Exception):
        message = f"Failed to connect to database via {connection_type}"
        context = {
            'connection_type': connection_type,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class DatabaseOperationError(DatabaseError):
    """Database operation failed."""

    def __init__(self, operation: str, table: str, original_error: Exception):
        message = f"Database {operation} failed on table {table}"
        context = {
            'operation': operation,
            'table': table,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class StorageError(DemocracyLensError):
    """Object storage operation failed."""

    def __init__(self, operation: str, bucket: str, original_error: Exception):
        message = f"Storage {operation} failed in bucket {bucket}"
        context = {
            'operation': operation,
            'bucket': bucket,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Analysis-related exceptions
class AnalysisError(DemocracyLensError):
    """Base exception for analysis errors."""
    pass


class LLMError(AnalysisError):
    """LLM completion failed."""

    def __init__(self, provider: str, model: str, original_error: Exception):
        message = f"LLM error from {provider} ({model})"
        context = {
            'provider': provider,
            'model': model,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Request-level exceptions
class ValidationError(DemocracyLensError):
    """Request data failed validation."""

    def __init__(self, field: str, issue: str, message: Optional[str] = None):
        message = message or f"Invalid {field}: {issue}"
        context = {
            'field': field,
            'issue': issue
        }
        super().__init__(message, context=context)
        self.field = field


class NotFoundError(DemocracyLensError):
    """Requested resource does not exist."""

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} not found"
        context = {
            'resource': resource,
            'identifier': identifier
        }
        super().__init__(message, context=context)


# Configuration-related exceptions
class ConfigurationError(DemocracyLensError):
    """Configuration is invalid or missing."""

    def __init__(self, config_key: str, issue: str):
        message = f"Configuration error for {config_key}: {issue}"
        context = {
            'config_key': config_key,
            'issue': issue
        }
        super().__init__(message, context=context)


class ErrorClassifier:
    """Maps exceptions onto HTTP status codes for the API layer."""

    STATUS_BY_TYPE = [
        (ValidationError, 400),
        (NotFoundError, 404),
        (RateLimitError, 429),
        (ConfigurationError, 503),
        (SourceError, 502),
        (AnalysisError, 502),
        (StorageError, 502),
        (DatabaseError, 500),
    ]

    @classmethod
    def status_code(cls, error: Exception) -> int:
        """Get the HTTP status for an error (500 when unknown)."""
        for error_type, status in cls.STATUS_BY_TYPE:
            if isinstance(error, error_type):
                return status
        return 500

    @staticmethod
    def is_rate_limit(error: Any) -> bool:
        """Check whether an arbitrary upstream error signals rate limiting."""
        if isinstance(error, RateLimitError):
            return True
        # postgrest APIError carries the HTTP status as its code
        if str(getattr(error, 'code', '')) == '429':
            return True
        response = getattr(error, 'response', None)
        if getattr(response, 'status_code', None) == 429:
            return True
        return 'Too Many Requests' in str(error)
