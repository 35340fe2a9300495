# =============================================================================
# tests/test_host.py - Web Host Tests
# =============================================================================
# Tests for listen URL parsing, socket binding and the uvicorn hand-off.
# =============================================================================

import errno
import socket
from unittest.mock import patch

import pytest

from app.exceptions import HostStartupError, InvalidListenUrlError, ListenerBindError
from app.host import DEFAULT_URLS, ListenEndpoint, WebHost, parse_listen_url
from app.main import create_app


# =============================================================================
# parse_listen_url Tests
# =============================================================================

class TestParseListenUrl:
    """Test listen URL parsing."""

    def test_plus_means_all_interfaces(self):
        endpoint = parse_listen_url("http://+:8080")
        assert endpoint == ListenEndpoint(url="http://+:8080", host="0.0.0.0", port=8080, wildcard=True)
        assert endpoint.all_interfaces
        assert endpoint.family == socket.AF_INET

    def test_star_means_all_interfaces(self):
        endpoint = parse_listen_url("http://*:9000")
        assert endpoint.host == "0.0.0.0"
        assert endpoint.port == 9000

    def test_default_port(self):
        endpoint = parse_listen_url("http://localhost")
        assert endpoint.host == "localhost"
        assert endpoint.port == 80
        assert not endpoint.all_interfaces

    def test_trailing_slash_allowed(self):
        assert parse_listen_url("http://127.0.0.1:5000/").port == 5000

    def test_ipv6(self):
        endpoint = parse_listen_url("http://[::1]:5000")
        assert endpoint.host == "::1"
        assert endpoint.family == socket.AF_INET6

    @pytest.mark.parametrize("url", [
        "https://+:8443",
        "ftp://+:21",
        "http://+:8080/api",
        "http://+:8080?x=1",
        "http://+:70000",
        "http://:8080",
    ])
    def test_rejected(self, url):
        with pytest.raises(InvalidListenUrlError):
            parse_listen_url(url)


# =============================================================================
# WebHost Tests
# =============================================================================

@pytest.fixture
def host(dev_settings):
    return WebHost(create_app(dev_settings), dev_settings)


class TestWebHostUrls:

    def test_starts_with_framework_default(self, host):
        assert host.urls == list(DEFAULT_URLS)

    def test_clear_and_add(self, host):
        host.urls.clear()
        host.urls.append("http://+:8080")
        assert host.endpoints == [ListenEndpoint(url="http://+:8080", host="0.0.0.0", port=8080, wildcard=True)]


class TestWebHostBind:
    """Test binding behaviour."""

    def test_binds_one_socket_per_url(self, host):
        host.urls[:] = ["http://127.0.0.1:0"]
        sockets = host.bind()
        try:
            assert len(sockets) == 1
            assert sockets[0].getsockname()[0] == "127.0.0.1"
        finally:
            for sock in sockets:
                sock.close()

    def test_no_urls(self, host):
        host.urls.clear()
        with pytest.raises(HostStartupError):
            host.bind()

    def test_port_in_use(self, host, busy_port):
        host.urls[:] = [f"http://127.0.0.1:{busy_port}"]
        with pytest.raises(ListenerBindError) as exc_info:
            host.bind()
        assert exc_info.value.details["url"] == f"http://127.0.0.1:{busy_port}"

    def test_failed_bind_releases_earlier_sockets(self, host, busy_port, free_port):
        """Test that no partial listener state survives a failed bind."""
        host.urls[:] = [f"http://127.0.0.1:{free_port}", f"http://127.0.0.1:{busy_port}"]
        with pytest.raises(ListenerBindError):
            host.bind()

        # The first port must be free again
        check = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            check.bind(("127.0.0.1", free_port))
        finally:
            check.close()


class TestWildcardBind:
    """Test binding + and * URLs."""

    def test_wildcard_binds_all_interfaces(self, host):
        host.urls[:] = ["http://+:0"]
        sockets = host.bind()
        try:
            assert len(sockets) == 1
            sock = sockets[0]
            assert sock.getsockname()[1] > 0
            if sock.family == socket.AF_INET6:
                assert sock.getsockname()[0] == "::"
                # Dual-stack: IPv4 clients are served too
                assert sock.getsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY) == 0
            else:
                assert sock.getsockname()[0] == "0.0.0.0"
        finally:
            for sock in sockets:
                sock.close()

    def test_ipv4_only_machine(self, host):
        host.urls[:] = ["http://*:0"]
        with patch("app.host.socket.has_ipv6", False):
            sockets = host.bind()
        try:
            assert sockets[0].family == socket.AF_INET
            assert sockets[0].getsockname()[0] == "0.0.0.0"
        finally:
            for sock in sockets:
                sock.close()

    def test_falls_back_when_ipv6_unusable(self, host):
        host.urls[:] = ["http://+:0"]
        real_socket = socket.socket

        def no_ipv6(family=socket.AF_INET, *args, **kwargs):
            if family == socket.AF_INET6:
                raise OSError(errno.EAFNOSUPPORT, "Address family not supported by protocol")
            return real_socket(family, *args, **kwargs)

        with patch("app.host.socket.has_ipv6", True), patch("app.host.socket.socket", side_effect=no_ipv6):
            sockets = host.bind()
        try:
            assert sockets[0].family == socket.AF_INET
        finally:
            for sock in sockets:
                sock.close()

    def test_port_in_use_is_not_masked_by_fallback(self, host):
        """Test that a taken port fails instead of retrying on IPv4."""
        host.urls[:] = ["http://+:8080"]
        taken = OSError(errno.EADDRINUSE, "Address already in use")
        with patch("app.host.socket.has_ipv6", True), patch("app.host._bind", side_effect=taken) as bind:
            with pytest.raises(ListenerBindError) as exc_info:
                host.bind()
        assert bind.call_count == 1
        assert exc_info.value.details["error"] == "Address already in use"


class TestWebHostRun:
    """Test the hand-off to uvicorn."""

    def test_serves_bound_sockets(self, host):
        host.urls[:] = ["http://127.0.0.1:0"]
        with patch("app.host.uvicorn.Server") as server_cls:
            server = server_cls.return_value
            server.started = True
            host.run()

        server.run.assert_called_once()
        sockets = server.run.call_args.kwargs["sockets"]
        assert len(sockets) == 1
        # Closed once the server returns
        assert sockets[0].fileno() == -1

        config = server_cls.call_args.args[0]
        assert config.app is host.app
        assert config.log_config is None

    def test_not_started_is_an_error(self, host):
        host.urls[:] = ["http://127.0.0.1:0"]
        with patch("app.host.uvicorn.Server") as server_cls:
            server_cls.return_value.started = False
            with pytest.raises(HostStartupError):
                host.run()

    def test_bind_failure_never_starts_server(self, host, busy_port):
        host.urls[:] = [f"http://127.0.0.1:{busy_port}"]
        with patch("app.host.uvicorn.Server") as server_cls:
            with pytest.raises(ListenerBindError):
                host.run()
        server_cls.assert_not_called()
