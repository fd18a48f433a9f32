from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from exam_portal.schemas.response import ErrorResponse, ErrorDetail
from exam_portal.utils.timeutils import utcnow
import logging
import uuid

logger = logging.getLogger(__name__)

def _get_error_code(status_code: int) -> str:
    code_map = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_SERVER_ERROR",
    }
    return code_map.get(status_code, f"HTTP_{status_code}")

def _request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
    return request_id

def _error_response(request: Request, status_code: int, detail: ErrorDetail, headers=None) -> JSONResponse:
    request_id = _request_id(request)
    error_response = ErrorResponse(
        error=detail,
        timestamp=utcnow().isoformat(),
        path=request.url.path,
        request_id=request_id
    )
    response_headers = dict(headers or {})
    response_headers["X-Request-ID"] = request_id
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_response.model_dump()),
        headers=response_headers
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    logger.warning(f"[{request_id}] Validation error: {exc.errors()}", extra={"request_id": request_id})
    return _error_response(request, 422, ErrorDetail(
        code="VALIDATION_ERROR",
        message="Request validation failed",
        details={"validation_errors": jsonable_encoder(exc.errors())}
    ))

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    request_id = _request_id(request)
    # Domain errors carry their own code; plain HTTPExceptions fall back to the status map.
    error_code = getattr(exc, "code", None) or _get_error_code(exc.status_code)
    logger.warning(f"[{request_id}] HTTP {exc.status_code} {error_code}: {exc.detail}", extra={"request_id": request_id})
    return _error_response(
        request,
        exc.status_code,
        ErrorDetail(
            code=error_code,
            message=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
            details=getattr(exc, "details", None)
        ),
        headers=getattr(exc, "headers", None)
    )

async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.error(f"[{request_id}] Unhandled exception: {exc}", exc_info=True, extra={"request_id": request_id})
    return _error_response(request, 500, ErrorDetail(
        code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        details={"error_type": type(exc).__name__}
    ))
