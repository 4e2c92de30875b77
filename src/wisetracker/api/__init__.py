"""HTTP API package."""
from wisetracker.api.server import create_app, get_tracker

__all__ = ["create_app", "get_tracker"]
