"""
Structured logging for the marketplace API
Every line carries the environment, the request id and the caller ("anon" or
user id with role) resolved by the session store for that request.
"""
import logging
import sys
import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from .logging_filter import setup_pii_redaction

ANONYMOUS_ACTOR = "anon"


@dataclass
class RequestContext:
    """Mutable per-request log context; sync dependencies run on a copied context and update it in place"""
    request_id: str
    actor: str = ANONYMOUS_ACTOR


request_context_var: ContextVar[Optional[RequestContext]] = ContextVar('request_context', default=None)


def get_request_id() -> Optional[str]:
    context = request_context_var.get()
    return context.request_id if context else None


def get_actor() -> Optional[str]:
    context = request_context_var.get()
    return context.actor if context else None


def describe_actor(user_id: Optional[int], role: Optional[str]) -> str:
    if user_id is None:
        return ANONYMOUS_ACTOR
    return f"user:{user_id}/{role or 'NO_ROLE'}"


def bind_actor(user_id: Optional[int], role: Optional[str] = None) -> None:
    """Record the caller on the current request's log context (no-op outside a request)"""
    context = request_context_var.get()
    if context is not None:
        context.actor = describe_actor(user_id, role)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Open a log context per request and echo X-Request-ID"""

    async def dispatch(self, request: Request, call_next):
        context = RequestContext(request_id=request.headers.get("X-Request-ID") or str(uuid.uuid4()))
        token = request_context_var.set(context)
        try:
            response = await call_next(request)
        finally:
            request_context_var.reset(token)

        response.headers["X-Request-ID"] = context.request_id
        return response


class StructuredFormatter(logging.Formatter):
    """timestamp [ENV] [REQUEST_ID] [ACTOR] level logger message"""

    def __init__(self, env: str = "dev", fmt: str = None, datefmt: str = "%Y-%m-%d %H:%M:%S"):
        self.env = env
        fmt = fmt or "%(asctime)s [%(env)s] [%(request_id)s] [%(actor)s] %(levelname)-8s %(name)s: %(message)s"
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        record.env = self.env
        record.request_id = get_request_id() or "-"
        record.actor = get_actor() or "-"
        return super().format(record)


def setup_logging(env: str = "dev", log_level: str = "INFO"):
    """
    Configure the root logger with one console handler

    Args:
        env: Environment name (dev, test, staging, prod)
        log_level: Logging level name; unknown names fall back to INFO
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(StructuredFormatter(env=env))
    setup_pii_redaction(console_handler)
    root_logger.addHandler(console_handler)

    # SQL echo stays off even at DEBUG
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return root_logger
