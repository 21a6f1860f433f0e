"""
Operational Metrics for discovery scans

Prometheus counters and histograms describing scan volume, failures and
per-plugin latency. Exposed by the host process that owns the registry.
"""

from prometheus_client import Counter, Histogram

DISCOVERY_ENVELOPES_EMITTED = Counter(
    "harvester_discovery_envelopes_emitted_total",
    "Total number of resource envelopes handed to the emitter",
    ["service", "resource_type"],
)

DISCOVERY_FAILURES = Counter(
    "harvester_discovery_failures_total",
    "Total number of reported discovery failures",
    ["resource_type", "error_kind"],
)

DISCOVERY_PLUGIN_DURATION = Histogram(
    "harvester_discovery_plugin_duration_seconds",
    "Duration of a single discovery plugin run",
    ["service", "status"],
    buckets=(0.5, 1, 5, 10, 30, 60, 120, 300, 600),
)
