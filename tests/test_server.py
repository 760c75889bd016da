# tests/test_server.py
import threading
import urllib.request
from unittest.mock import MagicMock
from urllib.error import HTTPError
from wsgiref.util import setup_testing_defaults

import pytest
from prometheus_client import CollectorRegistry

from fafgear_exporter.client import ProtocolClient
from fafgear_exporter.collector import StatusCollector
from fafgear_exporter.metrics import FafGearCollector, MetricRegistry
from fafgear_exporter.server import create_app, make_http_server
from fafgear_exporter.state import StatusSnapshot


def _call(app, path):
    environ = {"PATH_INFO": path}
    setup_testing_defaults(environ)
    start_response = MagicMock()
    body = b"".join(app(environ, start_response))
    status = start_response.call_args[0][0]
    return status, body


@pytest.fixture
def app():
    status_collector = MagicMock(spec=StatusCollector)
    status_collector.collect_sync.return_value = StatusSnapshot.unreachable()
    registry = CollectorRegistry()
    registry.register(
        FafGearCollector(MetricRegistry.build("fafgearclient"), status_collector, "x:1")
    )
    return create_app(registry, "/metrics")


def test_metrics_path(app):
    status, body = _call(app, "/metrics")
    assert status.startswith("200")
    assert b"fafgearclient_fafgeard_up 0.0" in body


def test_landing_page(app):
    status, body = _call(app, "/")
    assert status.startswith("200")
    assert b'href="/metrics"' in body


def test_unknown_path(app):
    status, _ = _call(app, "/other")
    assert status.startswith("404")


def test_http_end_to_end(threaded_status_server):
    """真实 HTTP 抓取 -> 真实 TCP 状态交互"""
    with threaded_status_server(payload=b"3;10;2;0;0;0;0;0;0;0;0") as address:
        registry = CollectorRegistry()
        collector = StatusCollector(ProtocolClient(timeout=1.0))
        registry.register(
            FafGearCollector(MetricRegistry.build("fafgearclient"), collector, address)
        )
        httpd = make_http_server("127.0.0.1", 0, create_app(registry, "/metrics"))
        thread = threading.Thread(target=httpd.serve_forever, daemon=True)
        thread.start()
        try:
            port = httpd.server_address[1]
            with urllib.request.urlopen(f"http://127.0.0.1:{port}/metrics", timeout=5) as resp:
                body = resp.read().decode()
            with pytest.raises(HTTPError):
                urllib.request.urlopen(f"http://127.0.0.1:{port}/nope", timeout=5)
        finally:
            httpd.shutdown()
            httpd.server_close()

    assert "fafgearclient_fafgeard_up 1.0" in body
    assert "fafgearclient_server_database_connections_max 10.0" in body
