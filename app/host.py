# =============================================================================
# app/host.py - Web Host
# =============================================================================
# Owns the listen URLs and the blocking serve loop.
#
# The host starts with the framework default URL; the bootstrap clears it and
# adds its own. run() binds every URL up front (all or nothing) and then hands
# the bound sockets to uvicorn, which handles SIGINT/SIGTERM and graceful
# shutdown.
#
# Usage:
#   host = WebHost(app, settings)
#   host.urls.clear()
#   host.urls.append("http://+:8080")
#   host.run()
# =============================================================================

import errno
import logging
import socket
from dataclasses import dataclass
from urllib.parse import urlsplit

import uvicorn
from fastapi import FastAPI

from app.config import Settings
from app.exceptions import HostStartupError, InvalidListenUrlError, ListenerBindError

logger = logging.getLogger(__name__)

DEFAULT_URLS = ("http://localhost:5000",)

# '+' and '*' are the wildcard hosts of the URL form we accept
WILDCARD_HOSTS = {"+", "*"}
ALL_INTERFACES = "0.0.0.0"
ALL_INTERFACES_V6 = "::"

# Errors meaning "this machine has no usable IPv6", not "address taken"
IPV6_UNAVAILABLE = {errno.EAFNOSUPPORT, errno.EADDRNOTAVAIL, errno.EPROTONOSUPPORT}


# =============================================================================
# Listen URLs
# =============================================================================

@dataclass(frozen=True)
class ListenEndpoint:
    """A parsed listen URL."""
    url: str
    host: str
    port: int
    # Written as + or *: served dual-stack (IPv6 and IPv4) where possible
    wildcard: bool = False

    @property
    def all_interfaces(self) -> bool:
        return self.wildcard or self.host in (ALL_INTERFACES, ALL_INTERFACES_V6)

    @property
    def family(self) -> socket.AddressFamily:
        return socket.AF_INET6 if ":" in self.host else socket.AF_INET


def parse_listen_url(url: str) -> ListenEndpoint:
    """
    Parse a listen URL into an endpoint.

    Examples:
        "http://+:8080"       -> all interfaces:8080 (:: dual-stack, else 0.0.0.0)
        "http://*:80"         -> all interfaces:80
        "http://localhost"    -> localhost:80
        "http://[::1]:5000"   -> ::1:5000

    Raises:
        InvalidListenUrlError: unsupported scheme, path, or bad host/port
    """
    parts = urlsplit(url.strip())

    if parts.scheme.lower() != "http":
        raise InvalidListenUrlError(url, f"unsupported scheme {parts.scheme!r} (only http)")
    if parts.path not in ("", "/") or parts.query or parts.fragment:
        raise InvalidListenUrlError(url, "a listen URL cannot have a path, query or fragment")

    # urlsplit lowercases hostname, which keeps '+' and '*' intact
    host = parts.hostname
    if not host:
        raise InvalidListenUrlError(url, "missing host")

    try:
        port = parts.port
    except ValueError as e:
        raise InvalidListenUrlError(url, str(e))

    wildcard = host in WILDCARD_HOSTS
    if wildcard:
        host = ALL_INTERFACES

    return ListenEndpoint(url=url, host=host, port=80 if port is None else port, wildcard=wildcard)


# =============================================================================
# Host
# =============================================================================

class WebHost:
    """Serves an ASGI app on a set of listen URLs."""

    def __init__(self, app: FastAPI, settings: Settings):
        self.app = app
        self.settings = settings
        self.urls: list[str] = list(DEFAULT_URLS)

    @property
    def endpoints(self) -> list[ListenEndpoint]:
        return [parse_listen_url(url) for url in self.urls]

    def bind(self) -> list[socket.socket]:
        """
        Bind one socket per URL.

        Either every socket is bound, or none stays open and
        ListenerBindError is raised.
        """
        endpoints = self.endpoints
        if not endpoints:
            raise HostStartupError(
                "No listen URLs configured",
                code="NO_LISTEN_URLS",
                suggestion="Add at least one URL to WebHost.urls",
            )

        sockets: list[socket.socket] = []
        try:
            for endpoint in endpoints:
                sockets.append(_bind_socket(endpoint))
        except ListenerBindError:
            for sock in sockets:
                sock.close()
            raise
        return sockets

    def run(self) -> None:
        """
        Bind and serve until the process is told to stop.

        Raises:
            ListenerBindError: a URL could not be bound
            HostStartupError: the server did not finish starting
        """
        sockets = self.bind()

        config = uvicorn.Config(
            self.app,
            log_level=self.settings.log_level.lower(),
            # Keep the root logging config from app.main
            log_config=None,
            lifespan="on",
        )
        server = uvicorn.Server(config)

        for url in self.urls:
            logger.info(f"Now listening on: {url}")
        logger.info(f"Hosting environment: {self.settings.ENVIRONMENT}")

        try:
            server.run(sockets=sockets)
        finally:
            for sock in sockets:
                sock.close()

        if not server.started:
            raise HostStartupError("Server stopped before it finished starting")

        logger.info("Application is shut down")


def _bind_socket(endpoint: ListenEndpoint) -> socket.socket:
    if endpoint.wildcard and socket.has_ipv6:
        try:
            return _bind(endpoint, socket.AF_INET6, ALL_INTERFACES_V6, dual_stack=True)
        except OSError as e:
            if e.errno not in IPV6_UNAVAILABLE:
                raise ListenerBindError(endpoint.url, e.strerror or str(e)) from e
            logger.debug(f"IPv6 unavailable for {endpoint.url} ({e}), using {ALL_INTERFACES}")

    try:
        return _bind(endpoint, endpoint.family, endpoint.host)
    except OSError as e:
        raise ListenerBindError(endpoint.url, e.strerror or str(e)) from e


def _bind(endpoint: ListenEndpoint, family: socket.AddressFamily, host: str,
          dual_stack: bool = False) -> socket.socket:
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if dual_stack:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
        sock.bind((host, endpoint.port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock
