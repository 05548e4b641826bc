"""
Upstream gateway package for the Realms lookup service.

Re-exports the capability interface and the concrete HTTP/RakNet
implementations so callers can import from ``realmsapi.gateway`` directly.
"""

from realmsapi.gateway.abstract import UpstreamGateway
from realmsapi.gateway.http import HttpUpstreamGateway
from realmsapi.gateway.raknet import RakNetPinger

__all__ = [
    "UpstreamGateway",
    "HttpUpstreamGateway",
    "RakNetPinger",
]
