import gzip
import unittest
import urllib.error
import urllib.request

from prometheus_client import CollectorRegistry, Gauge

from spot_exporter.server import start_metrics_server


class TestMetricsServer(unittest.TestCase):
    def setUp(self):
        self.registry = CollectorRegistry()
        Gauge("test_up", "Test gauge", registry=self.registry).set(1)
        self.server = start_metrics_server("127.0.0.1", 0, metrics_path="/prices", registry=self.registry)
        self.base = f"http://127.0.0.1:{self.server.server_address[1]}"

    def tearDown(self):
        self.server.shutdown()
        self.server.server_close()

    def test_metrics_path(self):
        with urllib.request.urlopen(self.base + "/prices") as resp:
            body = resp.read().decode("utf-8")
            self.assertEqual(resp.status, 200)
            self.assertTrue(resp.headers["Content-Type"].startswith("text/plain"))
        self.assertIn("test_up 1.0", body)

    def test_metrics_content_negotiation(self):
        """OpenMetrics and gzip are served when the scraper asks for them"""
        req = urllib.request.Request(
            self.base + "/prices",
            headers={
                "Accept": "application/openmetrics-text; version=1.0.0",
                "Accept-Encoding": "gzip",
            },
        )
        with urllib.request.urlopen(req) as resp:
            raw = resp.read()
            self.assertTrue(resp.headers["Content-Type"].startswith("application/openmetrics-text"))
            self.assertEqual(resp.headers["Content-Encoding"], "gzip")
        body = gzip.decompress(raw).decode("utf-8")
        self.assertIn("test_up 1.0", body)
        self.assertTrue(body.rstrip().endswith("# EOF"))

    def test_landing_page_links_metrics(self):
        with urllib.request.urlopen(self.base + "/") as resp:
            body = resp.read().decode("utf-8")
        self.assertIn("AWS spot market Exporter", body)
        self.assertIn('href="/prices"', body)

    def test_unknown_path(self):
        with self.assertRaises(urllib.error.HTTPError) as ctx:
            urllib.request.urlopen(self.base + "/nope")
        self.assertEqual(ctx.exception.code, 404)
        ctx.exception.close()


if __name__ == '__main__':
    unittest.main()
