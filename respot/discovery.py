"""Zeroconf discovery: advertise this device and receive login credentials.

Clients on the local network find the device by mDNS/DNS-SD, query it over
HTTP (``getInfo``) and hand over encrypted credentials (``addUser``).
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import ipaddress
import json
import logging
import queue
import select
import socket
import struct
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Iterable, Iterator, Mapping, Protocol
from urllib.parse import parse_qsl, urlsplit

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

_log = logging.getLogger(__name__)

LIBRARY_VERSION = "0.1.0"

_SERVICE_TYPE = "_spotify-connect._tcp.local"
_TXT_RECORDS = ("VERSION=1.0", "CPath=/")
_MDNS_GROUP = "224.0.0.251"
_MDNS_PORT = 5353


class DiscoveryError(Exception):
    """Setting up discovery or handling a client's request failed."""


class _DhKeys(Protocol):
    def public_key(self) -> bytes: ...

    def shared_secret(self, remote_key: bytes) -> bytes: ...


@dataclass(frozen=True)
class DiscoveredCredentials:
    """Credentials handed over by a client: the user and the decrypted blob."""

    username: str
    blob: bytes
    device_id: str


@dataclass
class DiscoveryConfig:
    device_id: str
    client_id: str
    name: str = "Librespot"
    device_type: str = "Speaker"


def decrypt_blob(shared_key: bytes, encrypted_blob: bytes) -> bytes | None:
    """Check and decrypt a credentials blob; None if its checksum does not match.

    The blob is a 16-byte IV, the ciphertext and a 20-byte HMAC-SHA1.
    """
    if len(encrypted_blob) < 36:
        raise DiscoveryError(
            f"Creating SHA1 HMAC failed for base key {list(encrypted_blob)}"
        )
    iv = encrypted_blob[:16]
    encrypted = encrypted_blob[16:-20]
    checksum = encrypted_blob[-20:]

    base_key = hashlib.sha1(shared_key).digest()[:16]
    checksum_key = hmac.new(base_key, b"checksum", hashlib.sha1).digest()
    encryption_key = hmac.new(base_key, b"encryption", hashlib.sha1).digest()

    mac = hmac.new(checksum_key, encrypted, hashlib.sha1).digest()
    if not hmac.compare_digest(mac, checksum):
        return None

    decryptor = Cipher(algorithms.AES(encryption_key[:16]), modes.CTR(iv)).decryptor()
    return decryptor.update(encrypted) + decryptor.finalize()


def _require(params: Mapping[str, str], key: str) -> str:
    try:
        return params[key]
    except KeyError:
        raise DiscoveryError(f"Missing params for key {key}") from None


class RequestHandler:
    """Answers the HTTP requests of clients; delivers credentials to a callback."""

    def __init__(
        self,
        config: DiscoveryConfig,
        keys: _DhKeys,
        on_credentials: Callable[[DiscoveredCredentials], None],
    ) -> None:
        self.config = config
        self.keys = keys
        self.username: str | None = None
        self._on_credentials = on_credentials

    def get_info(self) -> dict:
        return {
            "status": 101,
            "statusString": "OK",
            "spotifyError": 0,
            "version": "2.9.0",
            "deviceID": self.config.device_id,
            "deviceType": self.config.device_type,
            "remoteName": self.config.name,
            "publicKey": base64.b64encode(self.keys.public_key()).decode("ascii"),
            "brandDisplayName": "librespot",
            "modelDisplayName": "librespot",
            "libraryVersion": LIBRARY_VERSION,
            "resolverVersion": "1",
            "groupStatus": "NONE",
            # "accesstoken" is documented but makes clients fail to connect.
            "tokenType": "default",
            "clientID": self.config.client_id,
            "productID": 0,
            "scope": "streaming",
            "availability": "",
            "supported_drm_media_formats": [],
            "supported_capabilities": 1,
            "accountReq": "PREMIUM",
            "activeUser": self.username or "",
        }

    def add_user(self, params: Mapping[str, str]) -> dict:
        """Decrypt the user's blob and deliver the credentials."""
        username = _require(params, "userName")
        blob_text = _require(params, "blob")
        client_key_text = _require(params, "clientKey")

        encrypted_blob = base64.b64decode(blob_text, validate=True)
        client_key = base64.b64decode(client_key_text, validate=True)
        shared_key = self.keys.shared_secret(client_key)

        decrypted = decrypt_blob(shared_key, encrypted_blob)
        if decrypted is None:
            _log.warning("Login error for user %r: MAC mismatch", username)
            return {"status": 102, "spotifyError": 1, "statusString": "ERROR-MAC"}

        self._on_credentials(
            DiscoveredCredentials(username, decrypted, self.config.device_id)
        )
        return {"status": 101, "spotifyError": 0, "statusString": "OK"}

    def handle(self, method: str, query: str, body: bytes) -> tuple[int, bytes]:
        """Return HTTP status and body; body parameters override query ones."""
        params = dict(parse_qsl(query, keep_blank_values=True))
        if method != "GET":
            _log.debug("%s %r", method, params)
        params.update(
            parse_qsl(
                body.decode("utf-8", errors="replace"),
                keep_blank_values=True,
            )
        )
        action = params.get("action")
        if method == "GET" and action == "getInfo":
            result = self.get_info()
        elif method == "POST" and action == "addUser":
            result = self.add_user(params)
        else:
            return 404, b""
        return 200, json.dumps(result, separators=(",", ":")).encode("utf-8")


def _make_http_handler(handler: RequestHandler) -> type[BaseHTTPRequestHandler]:
    class _Http(BaseHTTPRequestHandler):
        def _dispatch(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length > 0 else b""
            query = urlsplit(self.path).query
            try:
                status, payload = handler.handle(self.command, query, body)
            except (DiscoveryError, ValueError) as exc:
                _log.error("could not handle discovery request: %s", exc)
                self.close_connection = True
                return
            self.send_response(status)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(payload)

        do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = _dispatch
        do_HEAD = do_OPTIONS = _dispatch

        def log_message(self, format: str, *args) -> None:
            _log.debug("discovery http: " + format, *args)

    return _Http


def _encode_name(name: str) -> bytes:
    out = bytearray()
    for label in name.rstrip(".").split("."):
        raw = label.encode("utf-8")[:63]
        out.append(len(raw))
        out += raw
    out.append(0)
    return bytes(out)


def _read_name(packet: bytes, offset: int) -> tuple[str, int]:
    labels = []
    end = None
    hops = 0
    while True:
        length = packet[offset]
        if length == 0:
            offset += 1
            break
        if length & 0xC0 == 0xC0:
            if end is None:
                end = offset + 2
            offset = ((length & 0x3F) << 8) | packet[offset + 1]
            hops += 1
            if hops > 16:
                raise ValueError("too many name pointers")
            continue
        labels.append(packet[offset + 1 : offset + 1 + length].decode("utf-8", "replace"))
        offset += 1 + length
    return ".".join(labels), end if end is not None else offset


def _record(name: str, rtype: int, rclass: int, ttl: int, rdata: bytes) -> bytes:
    return _encode_name(name) + struct.pack("!HHIH", rtype, rclass, ttl, len(rdata)) + rdata


def _default_ipv4() -> ipaddress.IPv4Address:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        try:
            probe.connect(("10.255.255.255", 1))
            return ipaddress.IPv4Address(probe.getsockname()[0])
        except OSError:
            return ipaddress.IPv4Address("127.0.0.1")


class _MdnsResponder:
    """Answers mDNS queries for the service with PTR, SRV, TXT and A records."""

    def __init__(self, instance: str, port: int, addresses: list) -> None:
        self._instance = f"{instance}.{_SERVICE_TYPE}"
        host_label = socket.gethostname().split(".")[0] or "localhost"
        self._host = f"{host_label}.local"
        self._names = {n.lower() for n in (_SERVICE_TYPE, self._instance, self._host)}
        ipv4 = [a for a in addresses if a.version == 4]
        self._packet = self._build_response(port, ipv4 or [_default_ipv4()])

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if hasattr(socket, "SO_REUSEPORT"):
                try:
                    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
                except OSError:
                    pass
            sock.bind(("", _MDNS_PORT))
            interfaces = ipv4 or [ipaddress.IPv4Address("0.0.0.0")]
            for iface in interfaces:
                membership = struct.pack(
                    "4s4s", socket.inet_aton(_MDNS_GROUP), iface.packed
                )
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_ADD_MEMBERSHIP, membership)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 255)
        except OSError:
            sock.close()
            raise
        self._sock = sock
        self._closed = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()
        self._announce()

    def _build_response(self, port: int, addresses: list) -> bytes:
        txt = b"".join(
            bytes([len(entry)]) + entry.encode("ascii") for entry in _TXT_RECORDS
        )
        records = [
            _record(_SERVICE_TYPE, 12, 1, 4500, _encode_name(self._instance)),
            _record(
                self._instance,
                33,
                0x8001,
                120,
                struct.pack("!HHH", 0, 0, port) + _encode_name(self._host),
            ),
            _record(self._instance, 16, 0x8001, 4500, txt),
        ]
        records += [_record(self._host, 1, 0x8001, 120, a.packed) for a in addresses]
        header = struct.pack("!HHHHHH", 0, 0x8400, 0, len(records), 0, 0)
        return header + b"".join(records)

    def _announce(self) -> None:
        try:
            self._sock.sendto(self._packet, (_MDNS_GROUP, _MDNS_PORT))
        except OSError as exc:
            _log.debug("mDNS announcement failed: %s", exc)

    def _wants(self, packet: bytes) -> bool:
        try:
            _, flags, questions = struct.unpack_from("!HHH", packet)
            if flags & 0x8000:
                return False
            offset = 12
            for _ in range(questions):
                name, offset = _read_name(packet, offset)
                qtype, _ = struct.unpack_from("!HH", packet, offset)
                offset += 4
                if name.lower() in self._names and qtype in (1, 12, 16, 33, 255):
                    return True
        except (struct.error, ValueError, IndexError):
            return False
        return False

    def _serve(self) -> None:
        while not self._closed.is_set():
            try:
                ready, _, _ = select.select([self._sock], [], [], 0.5)
                if not ready:
                    continue
                packet, _ = self._sock.recvfrom(9000)
            except (OSError, ValueError):
                break
            if self._wants(packet):
                self._announce()

    def close(self) -> None:
        self._closed.set()
        self._thread.join(timeout=1.0)
        self._sock.close()


class Discovery:
    """A running discovery service; yields credentials as clients send them."""

    def __init__(
        self,
        server: ThreadingHTTPServer,
        thread: threading.Thread,
        responder: _MdnsResponder,
        credentials: queue.Queue,
    ) -> None:
        self._server = server
        self._thread = thread
        self._responder = responder
        self._credentials = credentials
        self._closed = False
        self.port: int = server.server_address[1]

    @classmethod
    def builder(cls, device_id: str, client_id: str, keys: _DhKeys) -> DiscoveryBuilder:
        return DiscoveryBuilder(device_id, client_id, keys)

    def close(self) -> None:
        """Stop advertising and serving; pending waits return None."""
        if self._closed:
            return
        self._closed = True
        self._responder.close()
        self._server.shutdown()
        self._server.server_close()
        self._credentials.put(None)

    def next_credentials(self, timeout: float | None = None) -> DiscoveredCredentials | None:
        """Wait for the next credentials; None on timeout or once closed."""
        if self._closed and self._credentials.empty():
            return None
        try:
            item = self._credentials.get(timeout=timeout)
        except queue.Empty:
            return None
        if item is None:
            self._credentials.put(None)
        return item

    def __iter__(self) -> Iterator[DiscoveredCredentials]:
        while (item := self.next_credentials()) is not None:
            yield item

    def __enter__(self) -> Discovery:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class DiscoveryBuilder:
    """Configures and launches a Discovery service."""

    def __init__(self, device_id: str, client_id: str, keys: _DhKeys) -> None:
        self.config = DiscoveryConfig(device_id=device_id, client_id=client_id)
        self._keys = keys
        self._port = 0
        self._zeroconf_ip: list = []

    def name(self, name: str) -> DiscoveryBuilder:
        """Name shown to clients; default "Librespot"."""
        self.config.name = name
        return self

    def device_type(self, device_type: str) -> DiscoveryBuilder:
        """Icon shown to clients; default "Speaker"."""
        self.config.device_type = device_type
        return self

    def zeroconf_ip(self, addresses: Iterable) -> DiscoveryBuilder:
        """Addresses to advertise on; empty means all interfaces."""
        self._zeroconf_ip = [ipaddress.ip_address(a) for a in addresses]
        return self

    def port(self, port: int) -> DiscoveryBuilder:
        """Port for incoming connections; 0 picks any free port."""
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"port out of range: {port}")
        self._port = port
        return self

    def launch(self) -> Discovery:
        """Start the HTTP server and the mDNS responder."""
        credentials: queue.Queue = queue.Queue()
        handler = RequestHandler(self.config, self._keys, credentials.put)
        try:
            server = ThreadingHTTPServer(
                ("0.0.0.0", self._port), _make_http_handler(handler)
            )
        except OSError as exc:
            raise DiscoveryError(f"Setting up the HTTP server failed: {exc}") from exc
        server.daemon_threads = True
        port = server.server_address[1]
        _log.debug("Zeroconf server listening on 0.0.0.0:%d", port)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()

        try:
            responder = _MdnsResponder(self.config.name, port, self._zeroconf_ip)
        except OSError as exc:
            server.shutdown()
            server.server_close()
            raise DiscoveryError(f"Setting up dns-sd failed: {exc}") from exc
        return Discovery(server, thread, responder, credentials)