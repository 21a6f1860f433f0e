from typing import Dict, Iterable, Iterator, List, Optional

from harvester.modules.discovery.domain.plugin import DiscoveryPlugin


class DiscoveryRegistry:
    """
    Registry of discovery plugins keyed by service name.
    Iteration follows registration order, which is also the scan order.
    """

    def __init__(self, plugins: Iterable[DiscoveryPlugin] = ()):
        self._plugins: Dict[str, DiscoveryPlugin] = {}
        for plugin in plugins:
            self.register(plugin)

    def register(self, plugin: DiscoveryPlugin) -> DiscoveryPlugin:
        service = plugin.service
        if not service:
            raise ValueError(f"{type(plugin).__name__} declares an empty service name")
        existing = self._plugins.get(service)
        # Re-registering the same instance is a no-op; a different plugin for the same service is not.
        if existing is not None and existing is not plugin:
            raise ValueError(
                f"Duplicate discovery plugin registration for '{service}': "
                f"{type(existing).__name__} vs {type(plugin).__name__}"
            )
        self._plugins[service] = plugin
        return plugin

    def get(self, service: str) -> DiscoveryPlugin:
        plugin = self._plugins.get(service)
        if plugin is None:
            available = ", ".join(self._plugins) or "none"
            raise ValueError(
                f"No discovery plugin registered for '{service}'. Available: {available}"
            )
        return plugin

    @property
    def services(self) -> List[str]:
        return list(self._plugins)

    def select(self, services: Optional[Iterable[str]] = None) -> List[DiscoveryPlugin]:
        """Plugins for ``services`` (all when empty/None), in registration order."""
        wanted = [s for s in services or () if s]
        if not wanted:
            return list(self._plugins.values())
        for service in wanted:
            self.get(service)
        selected = set(wanted)
        return [p for s, p in self._plugins.items() if s in selected]

    def __contains__(self, service: object) -> bool:
        return service in self._plugins

    def __iter__(self) -> Iterator[DiscoveryPlugin]:
        return iter(list(self._plugins.values()))

    def __len__(self) -> int:
        return len(self._plugins)
