"""API client, watch streams and transport construction."""

from keel.client.api_client import KubeClient
from keel.client.transport import build_http_client
from keel.client.watch import WatchState, WatchStream

__all__ = [
    "KubeClient",
    "WatchState",
    "WatchStream",
    "build_http_client",
]
