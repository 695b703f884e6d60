"""One URI of an exposer, with its collectables and optional authentication."""

from __future__ import annotations

from promkit.auth import AuthCallback, BasicAuthHandler
from promkit.handler import MetricsHandler
from promkit.model import Collectable
from promkit.registry import Registry


class Endpoint:
    """Serves the metrics registered for one URI.

    The endpoint keeps a registry of its own with statistics about its
    scrapes, which is always exposed along with the registered collectables.
    """

    def __init__(self, uri: str) -> None:
        self.uri = uri
        self.registry = Registry()
        self.metrics_handler = MetricsHandler(self.registry)
        self.auth_handler: BasicAuthHandler | None = None
        self.register_collectable(self.registry)

    def register_collectable(self, collectable: Collectable) -> None:
        """Expose collectable on this endpoint."""
        self.metrics_handler.register_collectable(collectable)

    def register_auth(self, callback: AuthCallback, realm: str) -> None:
        """Require HTTP Basic credentials accepted by callback, replacing any earlier check."""
        self.auth_handler = BasicAuthHandler(callback, realm)

    def remove_collectable(self, collectable: Collectable) -> None:
        """Stop exposing collectable on this endpoint."""
        self.metrics_handler.remove_collectable(collectable)