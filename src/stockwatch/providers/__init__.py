"""Bar provider registry."""

from __future__ import annotations

from stockwatch.config import MonitorProviderType
from stockwatch.providers.base import BaseBarProvider

# Lazy registry; classes are imported on first use.
PROVIDER_CLASSES: dict[MonitorProviderType, str] = {
    MonitorProviderType.ALPHAVANTAGE: "stockwatch.providers.alphavantage.AlphaVantageProvider",
    MonitorProviderType.POLYGON: "stockwatch.providers.polygon.PolygonProvider",
    MonitorProviderType.MOCK: "stockwatch.providers.mock.MockProvider",
}


def create_provider(
    provider_type: MonitorProviderType,
    **kwargs,
) -> BaseBarProvider:
    """Instantiate a provider by type, forwarding kwargs to its constructor."""
    import importlib

    dotted = PROVIDER_CLASSES[provider_type]
    module_path, cls_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, cls_name)
    return cls(**kwargs)


__all__ = ["BaseBarProvider", "PROVIDER_CLASSES", "create_provider"]
