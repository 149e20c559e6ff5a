"""
Error Handler Middleware
Sanitizes error responses so datastore and validation failures never leak internals
"""
import logging
import re
from typing import Dict, Any
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError

from ..exceptions import (
    ErrorResponse,
    MarketplaceError,
    marketplace_error_handler,
    http_exception_handler,
    general_exception_handler,
)
from ..logging_config import get_request_id

logger = logging.getLogger(__name__)


class ErrorSanitizer:
    """
    Sanitizes error messages before they leave the service
    
    - Removes file paths
    - Hides SQL statements and connection strings
    - Redacts email addresses
    """
    
    PATH_PATTERN = re.compile(r'(?:[A-Z]:\\|/)[^\s\'"<>|]+')
    SQL_PATTERN = re.compile(r'(SELECT|INSERT|UPDATE|DELETE|CREATE|DROP|ALTER)\s+.*', re.IGNORECASE)
    CONNECTION_PATTERN = re.compile(r'(postgresql|sqlite|mysql)(\+\w+)?://[^\s\'"<>]+')
    EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
    
    @classmethod
    def sanitize_message(cls, message: str) -> str:
        """Sanitize error message to remove sensitive information"""
        if not message:
            return "An error occurred"
        
        # Connection strings first, the path pattern would otherwise eat them
        message = cls.CONNECTION_PATTERN.sub('[REDACTED_CONNECTION]', message)
        message = cls.PATH_PATTERN.sub('[REDACTED_PATH]', message)
        message = cls.SQL_PATTERN.sub('SQL statement [REDACTED]', message)
        message = cls.EMAIL_PATTERN.sub('[REDACTED_EMAIL]', message)
        
        if len(message) > 500:
            message = message[:500] + "... [truncated]"
        
        return message
    
    @classmethod
    def sanitize_details(cls, details: Dict[str, Any]) -> Dict[str, Any]:
        """Sanitize details dict, dropping sensitive keys"""
        if not details:
            return {}
        
        sanitized = {}
        for key, value in details.items():
            if key.lower() in ['password', 'token', 'secret', 'hashed_password']:
                continue
            
            if isinstance(value, str):
                sanitized[key] = cls.sanitize_message(value)
            elif isinstance(value, dict):
                sanitized[key] = cls.sanitize_details(value)
            elif isinstance(value, (list, tuple)):
                sanitized[key] = [
                    cls.sanitize_message(item) if isinstance(item, str) else item
                    for item in value
                ]
            else:
                sanitized[key] = value
        
        return sanitized


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Handle datastore errors that escaped the gateway
    
    Never echoes SQL, connection strings or schema details.
    """
    request_id = get_request_id()
    
    logger.error(
        f"Database error (request_id: {request_id}): {type(exc).__name__}",
        exc_info=True,
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method
        }
    )
    
    if isinstance(exc, IntegrityError):
        error_message = "Database constraint violation. The operation could not be completed."
        error_code = "DATABASE_CONSTRAINT_ERROR"
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, OperationalError):
        error_message = "Database connection error. Please try again later."
        error_code = "DATABASE_CONNECTION_ERROR"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        error_message = "A database error occurred. Please try again later."
        error_code = "DATABASE_ERROR"
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse.create(
            message=error_message,
            code=error_code,
            status_code=status_code,
            request_id=request_id,
            details={"error_type": type(exc).__name__},
        ),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle form validation errors with field-level annotations
    
    Each entry names the field that blocked the submission so the client can
    annotate it; the request payload is never echoed back.
    """
    request_id = get_request_id()
    
    logger.warning(
        f"Validation error (request_id: {request_id}): {exc.errors()}",
        extra={"request_id": request_id, "path": request.url.path}
    )
    
    safe_errors = []
    for error in exc.errors():
        loc = error.get('loc', [])
        field = '.'.join(str(part) for part in loc if part not in ('body', 'query', 'path'))
        safe_errors.append({
            "field": field,
            "message": ErrorSanitizer.sanitize_message(error.get('msg', 'Validation error')),
            "type": error.get('type', 'value_error'),
        })
    
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse.create(
            message="Request validation failed. Please check your input.",
            code="VALIDATION_ERROR",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            request_id=request_id,
            details={"errors": safe_errors},
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the application"""
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
