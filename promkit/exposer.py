"""An HTTP server exposing registered collectables for scraping."""

from __future__ import annotations

import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import urlsplit

from promkit.auth import AuthCallback
from promkit.endpoint import Endpoint
from promkit.handler import MetricsResponse
from promkit.model import Collectable

DEFAULT_URI = "/metrics"
DEFAULT_REALM = "Prometheus-cpp Exporter"


def _parse_bind_address(bind_address: str) -> tuple[str, int]:
    host, sep, port_text = bind_address.rpartition(":")
    if not sep:
        host, port_text = "", bind_address
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Invalid bind address: {bind_address!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"Invalid port in bind address: {bind_address!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, port


class _RequestHandler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"
    timeout = 5

    def do_GET(self) -> None:
        exposer: Exposer = self.server.exposer  # type: ignore[attr-defined]
        endpoint = exposer._find_endpoint(urlsplit(self.path).path)
        if endpoint is None:
            self.send_error(404)
            return

        auth = endpoint.auth_handler
        if auth is not None and not auth.authorize(self.headers.get("Authorization")):
            self.send_response(auth.status)
            for name, value in auth.unauthorized_headers():
                self.send_header(name, value)
            self.end_headers()
            self.close_connection = True
            return

        response = endpoint.metrics_handler.handle_get(
            self.headers.get("Accept-Encoding")
        )
        self._send(response)

    def _send(self, response: MetricsResponse) -> None:
        self.send_response(response.status)
        for name, value in response.headers:
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(response.body)

    def log_message(self, format: str, *args: object) -> None:
        pass


class _Server(HTTPServer):
    def __init__(self, address: tuple[str, int], exposer: Exposer, num_threads: int):
        if ":" in address[0]:
            self.address_family = socket.AF_INET6
        self.exposer = exposer
        self._pool = ThreadPoolExecutor(max_workers=num_threads)
        super().__init__(address, _RequestHandler)

    def process_request(self, request, client_address) -> None:
        self._pool.submit(self._process, request, client_address)

    def _process(self, request, client_address) -> None:
        try:
            self.finish_request(request, client_address)
        except Exception:
            self.handle_error(request, client_address)
        finally:
            self.shutdown_request(request)

    def server_close(self) -> None:
        super().server_close()
        self._pool.shutdown(wait=False, cancel_futures=True)


class Exposer:
    """Serves the metrics of registered collectables over HTTP.

    ``bind_address`` is ``host:port``; port 0 picks a free port. The server
    starts at once in a background thread and runs until ``close``.
    """

    def __init__(self, bind_address: str, num_threads: int = 2) -> None:
        if num_threads < 1:
            raise ValueError("num_threads must be positive")
        address = _parse_bind_address(bind_address)
        self._lock = threading.Lock()
        self._endpoints: dict[str, Endpoint] = {}
        self._server = _Server(address, self, num_threads)
        self._thread = threading.Thread(
            target=self._server.serve_forever, name="exposer", daemon=True
        )
        self._thread.start()
        self._closed = False

    def __enter__(self) -> Exposer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def register_collectable(
        self, collectable: Collectable, uri: str = DEFAULT_URI
    ) -> None:
        """Expose collectable on uri for as long as it is alive elsewhere."""
        with self._lock:
            self._endpoint_for(uri).register_collectable(collectable)

    def register_auth(
        self,
        callback: AuthCallback,
        realm: str = DEFAULT_REALM,
        uri: str = DEFAULT_URI,
    ) -> None:
        """Require HTTP Basic credentials accepted by callback on uri."""
        with self._lock:
            self._endpoint_for(uri).register_auth(callback, realm)

    def remove_collectable(
        self, collectable: Collectable, uri: str = DEFAULT_URI
    ) -> None:
        """Stop exposing collectable on uri."""
        with self._lock:
            self._endpoint_for(uri).remove_collectable(collectable)

    def listening_ports(self) -> list[int]:
        """The ports the server listens on."""
        return [self._server.server_address[1]]

    def close(self) -> None:
        """Stop the server and release its socket."""
        if self._closed:
            return
        self._closed = True
        self._server.shutdown()
        self._server.server_close()
        self._thread.join()

    def _endpoint_for(self, uri: str) -> Endpoint:
        endpoint = self._endpoints.get(uri)
        if endpoint is None:
            endpoint = self._endpoints[uri] = Endpoint(uri)
        return endpoint

    def _find_endpoint(self, uri: str) -> Endpoint | None:
        with self._lock:
            return self._endpoints.get(uri)