"""
Connector Registry — pick the data source for the configured mode.

Built-in connectors are referenced by import path so a connector's
dependencies are only imported when it is actually used. Any fully qualified
``module.ClassName`` is accepted as well.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from wisetracker.errors import ConfigurationError

if TYPE_CHECKING:
    from wisetracker.config import TrackerConfig
    from wisetracker.connectors.base import BaseConnector

logger = logging.getLogger("wisetracker.connectors.registry")

# Built-in connector type mapping
_BUILTIN_CONNECTORS: dict[str, str] = {
    "wise": "wisetracker.connectors.wise_connector.WiseConnector",
    "mock": "wisetracker.connectors.mock_connector.MockConnector",
}


def available_connectors() -> dict[str, str]:
    return dict(_BUILTIN_CONNECTORS)


def _load_class(kind: str) -> type[BaseConnector]:
    connector_path = _BUILTIN_CONNECTORS.get(kind, kind)
    try:
        module_path, class_name = connector_path.rsplit(".", 1)
        module = importlib.import_module(module_path)
        return getattr(module, class_name)
    except (ValueError, ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot load connector '{kind}': {e}") from e


def create_connector(config: TrackerConfig, kind: str | None = None) -> BaseConnector:
    """Instantiate the connector for *config*.

    Without an explicit *kind*, mock mode selects ``"mock"`` and everything
    else selects ``"wise"``.
    """
    kind = kind or ("mock" if config.mock_mode else "wise")
    connector_cls = _load_class(kind)

    from_config = getattr(connector_cls, "from_config", None)
    connector = from_config(config) if callable(from_config) else connector_cls()

    logger.info("Using connector: %s", connector.name)
    return connector
