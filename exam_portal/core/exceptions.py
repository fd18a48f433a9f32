from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class ExamPortalError(HTTPException):
    """HTTPException carrying a stable error code for the response envelope."""
    code: str = "BAD_REQUEST"
    status_code_default: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=self.status_code_default, detail=detail)
        self.details = details


class NotFoundError(ExamPortalError):
    code = "NOT_FOUND"
    status_code_default = status.HTTP_404_NOT_FOUND


class InsufficientPoolError(ExamPortalError):
    code = "INSUFFICIENT_POOL"
    status_code_default = status.HTTP_400_BAD_REQUEST

    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            detail=f"Not enough questions. Quiz has {available} questions, but {requested} were requested.",
            details={"available": available, "requested": requested},
        )


class AlreadySubmittedError(ExamPortalError):
    code = "ALREADY_SUBMITTED"
    status_code_default = status.HTTP_409_CONFLICT

    def __init__(self, detail: str = "Exam already submitted."):
        super().__init__(detail=detail)


class ValidationFailedError(ExamPortalError):
    code = "VALIDATION_ERROR"
    status_code_default = status.HTTP_400_BAD_REQUEST


class AccessExpiredError(ExamPortalError):
    code = "ACCESS_EXPIRED"
    status_code_default = status.HTTP_403_FORBIDDEN

    def __init__(self, detail: str = "Access expired"):
        super().__init__(detail=detail)
