from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Envelope for every successful response."""
    message: str = Field(..., description="A human-readable message about the response.")
    data: Optional[DataType] = Field(None, description="The payload, if any.")

class ErrorDetail(BaseModel):
    code: str = Field(..., description="Stable error code, e.g. NOT_FOUND or ALREADY_SUBMITTED")
    message: str = Field(..., description="Message that can be shown to the user")
    details: Optional[Dict[str, Any]] = Field(None, description="Structured context for the error")

class ErrorResponse(BaseModel):
    """Envelope for every error response."""
    error: ErrorDetail
    timestamp: str = Field(..., description="ISO 8601 timestamp of the error")
    path: str = Field(..., description="Request path that caused the error")
    request_id: Optional[str] = Field(None, description="Identifier echoed in the X-Request-ID header")
