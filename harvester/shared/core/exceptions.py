from typing import Optional, Dict, Any


class HarvesterException(Exception):
    """Base exception for all harvester errors."""
    def __init__(
        self,
        message: str,
        code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class ConfigurationError(HarvesterException):
    """Raised when application configuration or credentials are invalid or missing."""
    def __init__(self, message: str, code: str = "config_error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class ProviderConnectionError(HarvesterException):
    """Raised when a cloud provider client cannot be established."""
    def __init__(self, message: str, code: str = "provider_connection_error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class ListingError(HarvesterException):
    """Raised when a provider listing call fails mid-pagination."""
    def __init__(self, message: str, code: str = "listing_error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class PreconditionViolation(HarvesterException):
    """
    Programmer error (e.g. empty classification path).
    Never converted into a reported discovery failure.
    """
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="precondition_violation", details=details)
