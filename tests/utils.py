"""Shared fakes for discovery tests."""
from types import SimpleNamespace
from typing import Any, Dict

from harvester.shared.adapters.gcp import GCPClientFactory


def namespace_serializer(item: Any) -> Dict[str, Any]:
    """Serializer for SimpleNamespace provider fakes."""
    return dict(vars(item))


def fake_items(*values: str, attr: str = "name") -> list:
    return [SimpleNamespace(**{attr: value}) for value in values]


def fake_factory(**clients: Any) -> GCPClientFactory:
    """
    Client factory whose builders return the given fakes.
    An exception instance is raised when that client is opened.
    """

    def builder_for(client: Any):
        def build(_creds, _project_id):
            if isinstance(client, BaseException):
                raise client
            return client
        return build

    return GCPClientFactory(builders={name: builder_for(c) for name, c in clients.items()})
