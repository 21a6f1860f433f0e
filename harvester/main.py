"""
Inventory harvest command line.

Runs every registered GCP discovery plugin for one project and writes the
versioned envelopes as newline-delimited JSON.

Example:
  python -m harvester.main --project-id my-project-123 --services logging,trace \\
    --output inventory.jsonl
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import IO, Optional, Sequence

import structlog

from harvester.modules.discovery.adapters.emitters import JsonLinesEmitter
from harvester.modules.discovery.adapters.gcp import build_gcp_registry
from harvester.modules.discovery.domain.service import DiscoveryService
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.adapters.gcp import GCPClientFactory, validate_project_id
from harvester.shared.core.config import get_settings
from harvester.shared.core.credentials import AUTH_APPLICATION_DEFAULT, GCPCredentials
from harvester.shared.core.error_reporting import ErrorReporter
from harvester.shared.core.exceptions import ConfigurationError
from harvester.shared.core.logging import setup_logging

logger = structlog.get_logger()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Harvest a cloud resource inventory for one GCP project."
    )
    parser.add_argument(
        "--project-id",
        dest="project_id",
        default=settings.GCP_PROJECT_ID or "",
        help="GCP project to scan (default: GCP_PROJECT_ID).",
    )
    parser.add_argument(
        "--services",
        dest="services",
        default=",".join(settings.DISCOVERY_ENABLED_SERVICES),
        help="Comma-separated discovery services (default: all registered).",
    )
    parser.add_argument(
        "--concurrency",
        dest="concurrency",
        type=int,
        default=settings.DISCOVERY_MAX_CONCURRENCY,
        help="Plugins run in parallel (1 = sequential).",
    )
    parser.add_argument(
        "--output",
        dest="output",
        default="-",
        help="Write JSON lines to this path ('-' for stdout).",
    )
    parser.add_argument(
        "--strict",
        dest="strict",
        action="store_true",
        help="Exit non-zero when any discovery failure was reported.",
    )
    parser.add_argument(
        "--list-services",
        dest="list_services",
        action="store_true",
        help="Print the registered discovery services and exit.",
    )
    return parser.parse_args(argv)


def _build_credentials() -> GCPCredentials:
    settings = get_settings()
    if settings.GCP_SERVICE_ACCOUNT_JSON is None:
        return GCPCredentials(auth_method=AUTH_APPLICATION_DEFAULT)
    return GCPCredentials(service_account_json=settings.GCP_SERVICE_ACCOUNT_JSON)


async def harvest(
    project_id: str,
    stream: IO[str],
    services: Sequence[str] = (),
    concurrency: Optional[int] = None,
    clients: Optional[GCPClientFactory] = None,
    reporter: Optional[ErrorReporter] = None,
) -> ErrorReporter:
    """Run one scan into ``stream`` and return the reporter holding any failures."""
    if not validate_project_id(project_id):
        raise ConfigurationError(f"Invalid GCP project ID format: '{project_id}'")

    reporter = reporter or ErrorReporter()
    clients = clients or GCPClientFactory(_build_credentials())
    registry = build_gcp_registry(clients, reporter)
    service = DiscoveryService(registry, reporter, max_concurrency=concurrency)
    session = DiscoverySession()
    emitter = JsonLinesEmitter(stream)

    await service.run_all(project_id, session, emitter, services=services)
    logger.info(
        "harvest_complete",
        project_id=project_id,
        session_id=session.id,
        envelopes=emitter.count,
        failures=len(reporter.failures),
    )
    return reporter


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging()
    args = _parse_args(argv)
    services = [s.strip() for s in args.services.split(",") if s.strip()]

    if args.list_services:
        registry = build_gcp_registry(GCPClientFactory(), ErrorReporter())
        for name in registry.services:
            print(name)
        return 0

    if not args.project_id:
        logger.error("harvest_missing_project_id")
        return 2

    try:
        if args.output == "-":
            reporter = asyncio.run(
                harvest(args.project_id, sys.stdout, services, args.concurrency)
            )
        else:
            with open(args.output, "w", encoding="utf-8") as stream:
                reporter = asyncio.run(
                    harvest(args.project_id, stream, services, args.concurrency)
                )
    except (ConfigurationError, ValueError) as exc:
        logger.error("harvest_configuration_invalid", error=str(exc))
        return 2

    if args.strict and reporter.failures:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
