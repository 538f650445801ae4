"""
Fake Edgecast realtime stats API for testing without an account.

    python -m edgecast_exporter.mock.fake_edgecast_server --port 9100
    edgecast-exporter --account-id ABCD --token x --api-url http://127.0.0.1:9100 --port 9101 serve
"""

from __future__ import annotations

import json
import re
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import click

from edgecast_exporter.mock.generator import MockEdgecastAPI

_PATH_RE = re.compile(
    r"^/v2/realtimestats/customers/(?P<account>[^/]+)/media/(?P<platform>\d+)/(?P<method>\w+)$"
)
_METHODS = ("bandwidth", "connections", "cachestatus", "statuscode")

_api = MockEdgecastAPI(seed=42)
_api_lock = threading.Lock()


class _StatsHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        match = _PATH_RE.match(self.path)
        if not match or match.group("method") not in _METHODS:
            self._send(404, {"Message": "Not found"})
            return

        if not self.headers.get("Authorization", "").startswith("TOK:"):
            self._send(401, {"Message": "Access denied"})
            return

        platform_id = int(match.group("platform"))
        with _api_lock:
            payload = getattr(_api, match.group("method"))(platform_id)
        self._send(200, payload)

    def _send(self, status: int, payload):
        body = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass  # Suppress request logging noise


def make_server(host: str = "127.0.0.1", port: int = 9100) -> ThreadingHTTPServer:
    """Bind the fake API; call serve_forever() on the result (tests use a thread)."""
    return ThreadingHTTPServer((host, port), _StatsHandler)


@click.command()
@click.option("--host", default="127.0.0.1", help="Address to bind")
@click.option("--port", default=9100, type=int, help="Port to serve the fake API on")
def main(host: str, port: int):
    """Serve fake Edgecast realtime stats until interrupted."""
    server = make_server(host, port)
    click.echo(f"Fake Edgecast stats API at http://{host}:{port}  "
               f"(pass --api-url http://{host}:{port} to edgecast-exporter)")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
