"""Remote playlist source."""

from .client import DevByteClient, RemoteSource
from .models import NetworkVideo, NetworkVideoContainer

__all__ = ["DevByteClient", "NetworkVideo", "NetworkVideoContainer", "RemoteSource"]
