"""Connectors package — payment data sources."""
from wisetracker.connectors.base import BaseConnector, ProviderSnapshot
from wisetracker.connectors.mock_connector import MockConnector
from wisetracker.connectors.registry import create_connector
from wisetracker.connectors.wise_connector import WiseConnector

__all__ = [
    "BaseConnector",
    "MockConnector",
    "ProviderSnapshot",
    "WiseConnector",
    "create_connector",
]
