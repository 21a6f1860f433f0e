"""
Discovery Error Reporting

Single choke point for every discovery failure: classifies the exception,
records it through structlog and Prometheus, and keeps the failure so the
host can inspect it after the scan. Reporting never raises.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import List
import structlog
from google.api_core import exceptions as api_exceptions
from google.auth import exceptions as auth_exceptions

from harvester.shared.core.exceptions import ListingError, ProviderConnectionError
from harvester.shared.core.ops_metrics import DISCOVERY_FAILURES

logger = structlog.get_logger()

ERROR_KIND_CONNECTION = "connection"
ERROR_KIND_LISTING = "listing"
ERROR_KIND_PERMISSION_DENIED = "permission_denied"
ERROR_KIND_NOT_FOUND = "not_found"
ERROR_KIND_UNKNOWN = "unknown"


@dataclass(frozen=True)
class DiscoveryFailure:
    """A single reported discovery failure."""
    resource_type: str
    error_kind: str
    error_type: str
    message: str
    reported_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


def classify_error(error: BaseException) -> str:
    """Map an exception onto the discovery error taxonomy."""
    if isinstance(error, ProviderConnectionError):
        return ERROR_KIND_CONNECTION
    if isinstance(error, ListingError) and error.__cause__ is not None:
        error = error.__cause__
    if isinstance(error, auth_exceptions.GoogleAuthError):
        return ERROR_KIND_CONNECTION
    if isinstance(error, (api_exceptions.PermissionDenied, api_exceptions.Unauthenticated)):
        return ERROR_KIND_PERMISSION_DENIED
    if isinstance(error, api_exceptions.NotFound):
        return ERROR_KIND_NOT_FOUND
    if isinstance(error, (api_exceptions.GoogleAPIError, ListingError)):
        return ERROR_KIND_LISTING
    return ERROR_KIND_UNKNOWN


class ErrorReporter:
    """
    Records discovery failures.

    Thread-safe: plugins running on separate workers report concurrently.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._failures: List[DiscoveryFailure] = []

    @property
    def failures(self) -> List[DiscoveryFailure]:
        with self._lock:
            return list(self._failures)

    def report(self, resource_type: str, error: BaseException) -> None:
        try:
            kind = classify_error(error)
            failure = DiscoveryFailure(
                resource_type=resource_type,
                error_kind=kind,
                error_type=type(error).__name__,
                message=str(error),
            )
            with self._lock:
                self._failures.append(failure)
            DISCOVERY_FAILURES.labels(resource_type=resource_type, error_kind=kind).inc()
            logger.error(
                "discovery_failed",
                resource_type=resource_type,
                error_kind=kind,
                error_type=failure.error_type,
                error=failure.message,
            )
        except Exception as exc:  # pragma: no cover - reporting must not raise
            logger.warning(
                "discovery_failure_report_failed",
                resource_type=resource_type,
                error=str(exc),
            )

    def clear(self) -> None:
        with self._lock:
            self._failures.clear()
