"""
Discovery Orchestration Service

Drives every registered discovery plugin for a project. Plugins are
independent: they share only the read-only session and the emitter, so
they may run concurrently on worker threads (the provider SDKs block).
A plugin failure never stops the remaining plugins.
"""

import asyncio
import time
from typing import Iterable, Optional
import structlog

from harvester.modules.discovery.domain.plugin import DiscoveryPlugin
from harvester.modules.discovery.domain.ports import Emitter
from harvester.modules.discovery.domain.registry import DiscoveryRegistry
from harvester.schemas.inventory import DiscoverySession
from harvester.shared.core.config import get_settings
from harvester.shared.core.error_reporting import ErrorReporter
from harvester.shared.core.exceptions import PreconditionViolation
from harvester.shared.core.ops_metrics import DISCOVERY_PLUGIN_DURATION

logger = structlog.get_logger()


class DiscoveryService:
    """
    Main entry point for a project-wide inventory scan.
    """

    def __init__(
        self,
        registry: DiscoveryRegistry,
        reporter: ErrorReporter,
        max_concurrency: Optional[int] = None,
    ):
        self.registry = registry
        self.reporter = reporter
        if max_concurrency is None:
            max_concurrency = get_settings().DISCOVERY_MAX_CONCURRENCY
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.max_concurrency = max_concurrency

    async def run_all(
        self,
        project_id: str,
        session: DiscoverySession,
        emitter: Emitter,
        services: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Invoke ``discover`` exactly once on every selected plugin.
        Returns normally regardless of individual plugin outcomes.
        """
        if not project_id:
            raise PreconditionViolation("project_id is required for a discovery scan")

        plugins = self.registry.select(services)
        failures_before = len(self.reporter.failures)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(plugin: DiscoveryPlugin) -> None:
            async with semaphore:
                await asyncio.to_thread(
                    self._run_plugin, plugin, project_id, session, emitter
                )

        structlog.contextvars.bind_contextvars(
            project_id=project_id, session_id=session.id
        )
        try:
            logger.info(
                "discovery_scan_started",
                plugins=[p.service for p in plugins],
                max_concurrency=self.max_concurrency,
            )
            await asyncio.gather(*(run(plugin) for plugin in plugins))
            logger.info(
                "discovery_scan_complete",
                plugins_run=len(plugins),
                failures=len(self.reporter.failures) - failures_before,
            )
        finally:
            structlog.contextvars.unbind_contextvars("project_id", "session_id")

    def _run_plugin(
        self,
        plugin: DiscoveryPlugin,
        project_id: str,
        session: DiscoverySession,
        emitter: Emitter,
    ) -> None:
        """Run a single plugin; anything escaping its own boundary is reported here."""
        status = "success"
        started = time.perf_counter()
        try:
            plugin.discover(project_id, session, emitter)
        except PreconditionViolation:
            status = "error"
            raise
        except Exception as e:
            status = "error"
            logger.error("discovery_plugin_failed", plugin=plugin.service, error=str(e))
            self.reporter.report(plugin.service, e)
        finally:
            DISCOVERY_PLUGIN_DURATION.labels(
                service=plugin.service, status=status
            ).observe(time.perf_counter() - started)
