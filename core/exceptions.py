"""
Application errors. Services raise these; the handler in main.py turns them
into the standard error body with the class's status code.
"""
from typing import Any, Dict, Optional
from fastapi import status


class BaseCustomException(Exception):
    """Base for errors that map straight onto an HTTP status"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class BusinessLogicError(BaseCustomException):
    """A well-formed request the current state doesn't allow"""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(BaseCustomException):
    """Input that passed parsing but fails a check against the database"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if field:
            details["field"] = field
        super().__init__(message, details)


class AuthenticationError(BaseCustomException):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class AuthorizationError(BaseCustomException):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Insufficient permissions", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ResourceNotFoundError(BaseCustomException):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: str, details: Optional[Dict[str, Any]] = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with identifier '{identifier}' not found", details)


class ConflictError(BaseCustomException):
    """Duplicate email, duplicate rating and similar uniqueness violations"""

    status_code = status.HTTP_409_CONFLICT
