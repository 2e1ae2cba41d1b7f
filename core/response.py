"""
Response bodies shared by every router
"""
from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Body for endpoints whose only result is a confirmation"""
    success: bool = True
    message: str = Field(description="Human-readable message")
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ErrorResponse(BaseModel):
    success: bool = False
    message: str = Field(description="Error message")
    error_code: Optional[str] = Field(None, description="Error code for programmatic handling")
    details: Optional[Dict[str, Any]] = Field(None, description="Field errors or other context")
    request_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


def message_response(message: str) -> Dict[str, Any]:
    return MessageResponse(message=message).model_dump(mode="json")


def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build the JSON error body used by all exception handlers"""
    return ErrorResponse(
        message=message,
        error_code=error_code,
        details=details,
        request_id=request_id
    ).model_dump(mode="json")
