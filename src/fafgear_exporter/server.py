# File: src/fafgear_exporter/server.py
"""
FAF Gear Exporter - HTTP 暴露层 (Exposition)

基于 wsgiref 的多线程 WSGI 服务：
- metrics_path 交给 prometheus_client 输出文本格式。
- "/" 返回一个简单的引导页。
- 其他路径返回 404。
"""

import logging
from socketserver import ThreadingMixIn
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app

logger = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>FAF Gear Exporter</title></head>
<body>
<h1>FAF Gear Exporter</h1>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
"""


class ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    """每个请求一个线程，并发抓取互不阻塞。"""

    daemon_threads = True


class _QuietHandler(WSGIRequestHandler):
    """将访问日志转入 logging，而不是直接写 stderr。"""

    def log_message(self, format, *args):
        logger.debug(f"{self.address_string()} - {format % args}")


def create_app(registry: CollectorRegistry, metrics_path: str):
    """构建 WSGI 应用。"""
    metrics_app = make_wsgi_app(registry)
    landing = LANDING_PAGE.format(path=metrics_path).encode("utf-8")

    def app(environ, start_response):
        path = environ.get("PATH_INFO", "/")
        if path == metrics_path:
            return metrics_app(environ, start_response)
        if path == "/":
            start_response("200 OK", [("Content-Type", "text/html; charset=utf-8")])
            return [landing]
        start_response("404 Not Found", [("Content-Type", "text/plain")])
        return [b"Not Found"]

    return app


def make_http_server(host: str, port: int, app) -> ThreadingWSGIServer:
    return make_server(
        host, port, app, server_class=ThreadingWSGIServer, handler_class=_QuietHandler
    )


def serve(host: str, port: int, app) -> None:
    """启动 HTTP 服务并阻塞，直到被中断。"""
    httpd = make_http_server(host, port, app)
    logger.info(f"HTTP 服务已启动: http://{host}:{port}")
    try:
        httpd.serve_forever()
    finally:
        httpd.server_close()
        logger.info("HTTP 服务已停止")
