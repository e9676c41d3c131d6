"""
Custom exceptions for the Agenda de Contatos service.
Provides structured error handling with proper HTTP status codes and messages.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class BusinessLogicError(Exception):
    """Base exception for business logic errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BusinessLogicError):
    """Raised when input validation fails."""
    pass


class NotFoundError(BusinessLogicError):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(BusinessLogicError):
    """Raised when there's a conflict with existing data."""
    pass


class InternalError(BusinessLogicError):
    """Raised when storage fails for a reason the caller cannot fix.

    The message is safe to return to clients; the underlying cause travels
    in ``__cause__`` and is only logged.
    """
    pass


def business_exception_to_http(exc: BusinessLogicError) -> HTTPException:
    """Convert business logic exceptions to appropriate HTTP exceptions."""
    
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message)
    
    # InternalError and anything unforeseen
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)


class ErrorHandler:
    """Centralized error handling utilities."""
    
    @staticmethod
    def validate_required_fields(data: Dict[str, Any], required_fields: list[str], message: Optional[str] = None) -> None:
        """Validate that all required fields are present and truthy."""
        missing_fields = [field for field in required_fields if not data.get(field)]
        
        if missing_fields:
            raise ValidationError(
                message or f"Missing required fields: {', '.join(missing_fields)}",
                {"missing_fields": missing_fields}
            )
