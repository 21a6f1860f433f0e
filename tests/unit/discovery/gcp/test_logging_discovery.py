"""
Tests for the Cloud Logging discovery plugin.

These tests verify:
1. Metrics, sinks, buckets and exclusions are emitted under distinct subtypes
2. A failing sub-kind does not hide its siblings
3. A failing config client is reported once per affected resource type
"""
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as api_exceptions
from google.cloud.logging_v2.types import LogSink

from harvester.modules.discovery.adapters.gcp.plugins import LoggingDiscovery
from harvester.shared.adapters.gcp import LOGGING_CONFIG, LOGGING_METRICS
from tests.utils import fake_factory, fake_items, namespace_serializer


@pytest.fixture
def metrics_client():
    client = MagicMock()
    client.list_log_metrics.return_value = fake_items("projects/p/metrics/errors")
    return client


@pytest.fixture
def config_client():
    client = MagicMock()
    client.list_sinks.return_value = fake_items("projects/p/sinks/a", "projects/p/sinks/b")
    client.list_buckets.return_value = fake_items("projects/p/locations/global/buckets/_Default")
    client.list_exclusions.return_value = fake_items("projects/p/exclusions/noisy")
    return client


def _paths(emitter):
    return [e.classification_path[0] for e in emitter.envelopes]


def test_emits_every_sub_kind(project_id, session, reporter, emitter, metrics_client, config_client):
    clients = fake_factory(**{LOGGING_METRICS: metrics_client, LOGGING_CONFIG: config_client})
    plugin = LoggingDiscovery(clients, reporter, serializer=namespace_serializer)

    plugin.discover(project_id, session, emitter)

    assert _paths(emitter) == [
        "logging:metric",
        "logging:sink",
        "logging:sink",
        "logging:bucket",
        "logging:exclusion",
    ]
    assert reporter.failures == []
    config_client.list_sinks.assert_called_once_with(parent=f"projects/{project_id}")
    config_client.list_buckets.assert_called_once_with(
        parent=f"projects/{project_id}/locations/-"
    )
    config_client.list_exclusions.assert_called_once_with(parent=f"projects/{project_id}")
    metrics_client.list_log_metrics.assert_called_once_with(parent=f"projects/{project_id}")


def test_shared_config_client_is_opened_once_and_released(project_id, session, reporter, emitter, metrics_client, config_client):
    opened = []

    def build(_creds, _project):
        opened.append(config_client)
        return config_client

    clients = fake_factory(**{LOGGING_METRICS: metrics_client})
    clients._builders[LOGGING_CONFIG] = build
    plugin = LoggingDiscovery(clients, reporter, serializer=namespace_serializer)

    plugin.discover(project_id, session, emitter)

    assert len(opened) == 1
    config_client.close.assert_called_once()
    metrics_client.close.assert_called_once()


def test_failed_sub_kind_does_not_hide_siblings(project_id, session, reporter, emitter, metrics_client, config_client):
    config_client.list_buckets.side_effect = api_exceptions.PermissionDenied("logging.buckets.list")
    clients = fake_factory(**{LOGGING_METRICS: metrics_client, LOGGING_CONFIG: config_client})
    plugin = LoggingDiscovery(clients, reporter, serializer=namespace_serializer)

    plugin.discover(project_id, session, emitter)

    assert set(_paths(emitter)) == {"logging:metric", "logging:sink", "logging:exclusion"}
    assert [f.resource_type for f in reporter.failures] == ["GCP::Logging::Bucket"]
    assert reporter.failures[0].error_kind == "permission_denied"


def test_failure_mid_pagination_keeps_already_emitted_items(project_id, session, reporter, emitter, metrics_client, config_client):
    def pages():
        yield from fake_items("projects/p/sinks/a")
        raise api_exceptions.ServiceUnavailable("page 2")

    config_client.list_sinks.return_value = pages()
    clients = fake_factory(**{LOGGING_METRICS: metrics_client, LOGGING_CONFIG: config_client})
    plugin = LoggingDiscovery(clients, reporter, serializer=namespace_serializer)

    plugin.discover(project_id, session, emitter)

    assert _paths(emitter).count("logging:sink") == 1
    assert [f.resource_type for f in reporter.failures] == ["GCP::Logging::Sink"]
    assert reporter.failures[0].error_kind == "listing"
    assert reporter.failures[0].error_type == "ListingError"


def test_config_client_failure_reported_per_resource_type(project_id, session, reporter, emitter, metrics_client):
    clients = fake_factory(
        **{LOGGING_METRICS: metrics_client, LOGGING_CONFIG: RuntimeError("no credentials")}
    )
    plugin = LoggingDiscovery(clients, reporter, serializer=namespace_serializer)

    plugin.discover(project_id, session, emitter)

    assert _paths(emitter) == ["logging:metric"]
    assert sorted(f.resource_type for f in reporter.failures) == [
        "GCP::Logging::Bucket",
        "GCP::Logging::Exclusion",
        "GCP::Logging::Sink",
    ]
    assert {f.error_kind for f in reporter.failures} == {"connection"}


def test_default_serializer_handles_proto_messages(project_id, session, reporter, emitter, metrics_client, config_client):
    config_client.list_sinks.return_value = [
        LogSink(name="audit", destination="bigquery.googleapis.com/projects/p/datasets/audit")
    ]
    config_client.list_buckets.return_value = []
    config_client.list_exclusions.return_value = []
    metrics_client.list_log_metrics.return_value = []
    clients = fake_factory(**{LOGGING_METRICS: metrics_client, LOGGING_CONFIG: config_client})
    plugin = LoggingDiscovery(clients, reporter)

    plugin.discover(project_id, session, emitter)

    (envelope,) = emitter.envelopes
    assert envelope.payload["resourceId"] == "audit"
    assert envelope.payload["resourceType"] == "GCP::Logging::Sink"
    assert envelope.payload["configuration"]["destination"] == (
        "bigquery.googleapis.com/projects/p/datasets/audit"
    )
