"""
Domain exceptions and exception handlers with request ID support
Standardized error response format: { code, message, details?, request_id }
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Optional, Dict, Any

from .logging_config import get_request_id

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """Base exception for marketplace operations scoped to a single request"""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "MARKETPLACE_ERROR"
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(MarketplaceError):
    """A creator, job or other record does not exist"""
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    
    def __init__(self, resource: str, resource_id: Any, back_to: str = "/"):
        super().__init__(
            f"{resource.capitalize()} not found",
            details={"resource": resource, "id": resource_id, "back_to": back_to},
        )
        self.resource = resource
        self.resource_id = resource_id
        self.back_to = back_to


class DuplicateApplicationError(MarketplaceError):
    """The creator already applied to this job"""
    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE_APPLICATION"
    
    def __init__(self, job_id: int, creator_id: int):
        super().__init__(
            "You have already applied to this job",
            details={"job_id": job_id, "creator_id": creator_id},
        )


class ProfileIncompleteError(MarketplaceError):
    """Authenticated identity has no linked creator profile yet"""
    status_code = status.HTTP_409_CONFLICT
    code = "PROFILE_INCOMPLETE"
    
    def __init__(self, user_id: int):
        super().__init__(
            "Your creator profile is not set up yet. Complete your profile to continue.",
            details={"user_id": user_id, "next": "/api/auth/complete-profile"},
        )


class GatewayError(MarketplaceError):
    """A read or write against the datastore failed"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "BACKEND_ERROR"
    
    def __init__(self, action: str):
        super().__init__(f"Failed to {action}, please try again.", details={"action": action})
        self.action = action


class EmailAlreadyRegisteredError(MarketplaceError):
    """Sign-up with an email that already has an identity"""
    status_code = status.HTTP_409_CONFLICT
    code = "EMAIL_ALREADY_REGISTERED"

    def __init__(self, email: str):
        super().__init__(
            "Email already registered. Log in to finish setting up your profile.",
            details={"next": "/login"},
        )


class ErrorResponse:
    """
    Standard error response format
    
    Schema: { code, message, details?, request_id }
    """
    
    @staticmethod
    def create(
        message: str,
        code: str,
        status_code: int,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> dict:
        """
        Create standardized error response
        
        Args:
            message: Human-readable error message
            code: Error code (e.g., "VALIDATION_ERROR", "NOT_FOUND", "DUPLICATE_APPLICATION")
            status_code: HTTP status code
            request_id: Request ID from context (auto-fetched if None)
            details: Optional additional error details
        """
        if request_id is None:
            request_id = get_request_id()
        
        response = {
            "code": code,
            "message": message,
            "status_code": status_code,
        }
        if request_id:
            response["request_id"] = request_id
        if details:
            response["details"] = details
        return response


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    """Handle domain errors raised by services and the gateway"""
    request_id = get_request_id()
    
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"{exc.code}: {exc.message}",
        extra={"request_id": request_id, "path": request.url.path},
    )
    
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse.create(
            message=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            request_id=request_id,
            details=exc.details,
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with request ID"""
    request_id = get_request_id()
    
    error_code_map = {
        400: "BAD_REQUEST",
        401: "AUTH_ERROR",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        409: "CONFLICT",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_ERROR",
        503: "SERVICE_UNAVAILABLE"
    }
    error_code = error_code_map.get(exc.status_code, "HTTP_ERROR")
    
    detail = exc.detail
    error_message = str(detail) if detail else f"HTTP {exc.status_code} error"
    error_details = None
    
    if isinstance(detail, dict):
        error_message = detail.get("message", str(detail))
        error_code = detail.get("error", error_code)
        error_details = {k: v for k, v in detail.items() if k not in ["error", "message", "code"]}
    
    logger.warning(
        f"HTTP {exc.status_code}: {detail}",
        extra={"request_id": request_id, "path": request.url.path}
    )
    
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse.create(
            message=error_message,
            code=error_code,
            status_code=exc.status_code,
            request_id=request_id,
            details=error_details,
        ),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle general exceptions with request ID"""
    request_id = get_request_id()
    
    # Don't expose internal error details outside dev
    from .config import config
    error_message = "Internal server error"
    error_details = None
    
    if config.ENV == "dev":
        error_message = f"Internal server error: {str(exc)}"
        error_details = {"exception_type": type(exc).__name__}
    
    logger.error(
        f"Unhandled exception: {str(exc)}",
        exc_info=True,
        extra={"request_id": request_id, "path": request.url.path}
    )
    
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse.create(
            message=error_message,
            code="INTERNAL_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
            details=error_details,
        ),
    )
