"""
Custom exceptions for the mock interview application.

This module defines a hierarchy of exceptions to provide specific error handling
and better error messages throughout the application.
"""
import logging
from typing import Optional
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class AppError(Exception):
    """Base exception for all application errors."""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(AppError):
    """Exception raised when configuration is invalid or missing."""
    pass


class SessionValidationError(AppError):
    """Exception raised when interview setup fields are missing or blank."""
    status_code = 422


class NoActiveSessionError(AppError):
    """Exception raised when an operation needs a session and none exists."""
    status_code = 409


class RecordingStateError(AppError):
    """Exception raised when a recording operation is not allowed in the current state."""
    status_code = 409


class InvalidTransitionError(AppError):
    """Exception raised when a recording entry is moved along an illegal edge."""
    status_code = 409


class CaptureError(AppError):
    """Exception raised when the capture device produced no usable artifact."""
    status_code = 400


class StorageError(AppError):
    """Exception raised when an object storage call fails."""
    status_code = 502


class ResumeValidationError(AppError):
    """Exception raised when an uploaded resume is rejected."""
    status_code = 400


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def app_error_handler(request: Request, exc: AppError):
    logger.warning(f"{type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__, "details": exc.details},
    )

async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "error": str(exc)},
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"HTTP exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
