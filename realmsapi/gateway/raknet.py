"""
Bedrock server status query (RakNet unconnected ping).

Sends a single ``ID_UNCONNECTED_PING`` datagram and parses the semicolon
separated server id string carried by ``ID_UNCONNECTED_PONG``:

    MCPE;<motd>;<protocol>;<version>;<online>;<max>;<server id>;<level name>;
    <gamemode>;<gamemode id>;<port v4>;<port v6>;

Only the status query is implemented; nothing of the game protocol itself.
"""

from __future__ import annotations

import asyncio
import os
import struct
import time
from typing import List, Optional

from realmsapi.domain.models import ServerStatus
from realmsapi.errors import StatusUnavailableError
from realmsapi.utils.logging import get_logger

log = get_logger(__name__)

UNCONNECTED_PING = 0x01
UNCONNECTED_PONG = 0x1C
OFFLINE_MESSAGE_MAGIC = bytes.fromhex("00ffff00fefefefefdfdfdfd12345678")

# id (1) + ping time (8) + server guid (8) + magic (16) + string length (2)
_PONG_HEADER_SIZE = 35


def build_ping(client_guid: int, timestamp_ms: Optional[int] = None) -> bytes:
    if timestamp_ms is None:
        timestamp_ms = int(time.monotonic() * 1000)
    return (
        struct.pack(">Bq", UNCONNECTED_PING, timestamp_ms)
        + OFFLINE_MESSAGE_MAGIC
        + struct.pack(">Q", client_guid)
    )


def _int_field(fields: List[str], index: int) -> int:
    try:
        return int(fields[index])
    except (IndexError, ValueError):
        return 0


def _str_field(fields: List[str], index: int) -> str:
    return fields[index] if index < len(fields) else ""


def parse_pong(packet: bytes) -> ServerStatus:
    """Decode an unconnected pong into a ``ServerStatus``."""
    if len(packet) < _PONG_HEADER_SIZE or packet[0] != UNCONNECTED_PONG:
        raise StatusUnavailableError("Malformed pong packet")
    if packet[17:33] != OFFLINE_MESSAGE_MAGIC:
        raise StatusUnavailableError("Pong packet carries wrong offline magic")
    (length,) = struct.unpack(">H", packet[33:35])
    body = packet[_PONG_HEADER_SIZE : _PONG_HEADER_SIZE + length].decode("utf-8", "replace")
    fields = body.split(";")

    return ServerStatus(
        motd=_str_field(fields, 1),
        protocol=_int_field(fields, 2),
        version=_str_field(fields, 3),
        players_online=_int_field(fields, 4),
        players_max=_int_field(fields, 5),
        server_id=_str_field(fields, 6),
        level_name=_str_field(fields, 7),
        gamemode=_str_field(fields, 8),
        gamemode_id=_int_field(fields, 9),
        port_v4=_int_field(fields, 10),
        port_v6=_int_field(fields, 11),
    )


class _PongProtocol(asyncio.DatagramProtocol):
    def __init__(self, waiter: "asyncio.Future[bytes]") -> None:
        self._waiter = waiter

    def datagram_received(self, data: bytes, addr) -> None:  # type: ignore[override]
        if data and data[0] == UNCONNECTED_PONG and not self._waiter.done():
            self._waiter.set_result(data)

    def error_received(self, exc: Exception) -> None:
        if not self._waiter.done():
            self._waiter.set_exception(exc)


class RakNetPinger:
    """Query a Bedrock server's status over UDP."""

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout
        self._guid = int.from_bytes(os.urandom(8), "big")

    async def ping(self, host: str, port: int) -> ServerStatus:
        loop = asyncio.get_running_loop()
        waiter: "asyncio.Future[bytes]" = loop.create_future()
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _PongProtocol(waiter), remote_addr=(host, port)
            )
        except OSError as exc:
            raise StatusUnavailableError(f"Cannot reach {host}:{port}: {exc}") from exc

        try:
            transport.sendto(build_ping(self._guid))
            packet = await asyncio.wait_for(waiter, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise StatusUnavailableError(
                f"No status answer from {host}:{port} within {self.timeout}s"
            ) from exc
        except OSError as exc:
            raise StatusUnavailableError(f"Status ping to {host}:{port} failed: {exc}") from exc
        finally:
            transport.close()

        status = parse_pong(packet)
        log.debug(
            "Status pong received",
            extra={"host": host, "port": port, "protocol": status.protocol},
        )
        return status


__all__ = ["RakNetPinger", "build_ping", "parse_pong"]
