"""
Custom exception classes for the application
"""
from typing import Optional, Dict, Any


class VerifyHubException(Exception):
    """Base exception for VerifyHub"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(VerifyHubException):
    """Resource not found errors"""

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message += f": {identifier}"
        super().__init__(message, status_code=404)


class ValidationError(VerifyHubException):
    """Missing or invalid input"""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class InvalidTokenError(VerifyHubException):
    """Verification link is unknown or past its expiry"""

    def __init__(self, message: str = "Invalid or expired link"):
        super().__init__(message, status_code=400)


class ConflictError(VerifyHubException):
    """Unique field or state conflicts"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=409, details=details)


class InvalidTransitionError(ConflictError):
    """Verification status change not allowed by the lifecycle"""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot move verification from {current} to {target}",
            details={"current_status": current, "target_status": target},
        )


class FileValidationError(VerifyHubException):
    """Uploaded file rejected before storage"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class StorageError(VerifyHubException):
    """File storage failures"""

    def __init__(self, message: str = "Failed to upload file", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)


class NotificationError(VerifyHubException):
    """Outbound email failures"""

    def __init__(self, message: str = "Failed to send verification email", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details)
