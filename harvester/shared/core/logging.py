import sys
import structlog
import logging
from typing import Any, cast
from harvester.shared.core.config import get_settings


def secret_redactor(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Recursively redact credential material from log events.
    Service account keys and tokens must never reach the log sink.
    """
    import re

    secret_fields = {
        "password",
        "token",
        "secret",
        "authorization",
        "api_key",
        "access_token",
        "refresh_token",
        "client_secret",
        "private_key",
        "private_key_id",
        "service_account_json",
    }
    secret_suffixes = ("_token", "_secret", "_password", "_key")
    private_key_regex = re.compile(
        r"-----BEGIN [A-Z ]*PRIVATE KEY-----.*?-----END [A-Z ]*PRIVATE KEY-----",
        re.DOTALL,
    )

    def is_sensitive_key(key: Any) -> bool:
        key_norm = str(key).lower().strip().replace("-", "_")
        if key_norm in secret_fields:
            return True
        return key_norm.endswith(secret_suffixes)

    def redact_recursive(data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: ("[REDACTED]" if is_sensitive_key(k) else redact_recursive(v))
                for k, v in data.items()
            }
        elif isinstance(data, list):
            return [redact_recursive(item) for item in data]
        elif isinstance(data, str):
            return private_key_regex.sub("[PRIVATE_KEY_REDACTED]", data)
        return data

    redacted = redact_recursive(event_dict)
    if isinstance(redacted, dict):
        return cast(dict[str, Any], redacted)
    return {}


def setup_logging() -> None:
    settings = get_settings()

    base_processors = [
        structlog.contextvars.merge_contextvars,  # project_id / session_id of the running scan
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        secret_redactor,
    ]

    if settings.DEBUG:
        renderer: Any = structlog.dev.ConsoleRenderer()
        processors = base_processors + [renderer]
        min_level = logging.DEBUG
    else:
        renderer = structlog.processors.JSONRenderer()
        processors = base_processors + [structlog.processors.dict_tracebacks, renderer]
        min_level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(min_level, int):
            min_level = logging.INFO

    structlog.configure(
        processors=cast(Any, processors),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # A cached logger keeps the stream it first wrote to; tests swap stderr per test.
        cache_logger_on_first_use=not settings.TESTING,
    )

    # Route google-cloud / grpc library logs through the same stream.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=min_level,
    )
