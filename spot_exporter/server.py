# spot_exporter/server.py
import logging
import threading
from http.server import ThreadingHTTPServer
from urllib.parse import urlparse

from prometheus_client import REGISTRY, MetricsHandler

log = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>AWS spot market Exporter</title></head>
<body>
<h1>AWS spot market Exporter</h1>
<p><a href="{metrics_path}">Metrics</a></p>
</body>
</html>
"""


def make_handler(metrics_path="/metrics", registry=REGISTRY):
    """
    prometheus_client's handler serves the metrics path (content negotiation,
    gzip, name[] filtering); everything else is the landing page or a 404.
    """

    class ExporterHandler(MetricsHandler.factory(registry)):
        def do_GET(self):
            path = urlparse(self.path).path
            if path == metrics_path:
                super().do_GET()
            elif path == "/":
                body = LANDING_PAGE.format(metrics_path=metrics_path).encode("utf-8")
                self._reply(200, "text/html; charset=utf-8", body)
            else:
                self._reply(404, "text/plain; charset=utf-8", b"not found\n")

        def _reply(self, status, content_type, body):
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            log.debug("%s - %s", self.address_string(), format % args)

    return ExporterHandler


def start_metrics_server(host, port, metrics_path="/metrics", registry=REGISTRY):
    server = ThreadingHTTPServer((host, port), make_handler(metrics_path, registry))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    log.info("Listening on %s:%s", host, server.server_address[1])
    return server
