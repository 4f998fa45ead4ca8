"""Custom exceptions and error handling utilities."""
from fastapi import HTTPException, status
from typing import Optional


class AppException(Exception):
    """Base exception for application errors."""
    pass


class ValidationError(AppException):
    """Raised when a record is missing required fields or carries invalid values."""
    pass


class StorageError(AppException):
    """Raised when the underlying store is unavailable or a query fails."""
    pass


def validation_error(message: str) -> HTTPException:
    """
    Create a standardized 400 validation error.

    Args:
        message: Validation error message

    Returns:
        HTTPException with 400 status
    """
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def storage_error(error: Exception, operation: str) -> HTTPException:
    """
    Convert store failures to HTTP exceptions.

    Storage failures are never retried here; callers may retry since every
    operation is either a read or an append.

    Args:
        error: The storage error
        operation: Description of the operation that failed

    Returns:
        HTTPException with 500 status
    """
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Storage error during {operation}: {error}",
    )


def not_found_error(resource: str, identifier: Optional[str] = None) -> HTTPException:
    """
    Create a standardized 404 error.

    Args:
        resource: Name of the resource (e.g., "Route")
        identifier: Optional identifier that was not found

    Returns:
        HTTPException with 404 status
    """
    message = f"{resource} not found"
    if identifier:
        message += f": {identifier}"
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
