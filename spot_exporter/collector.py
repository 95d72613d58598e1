# spot_exporter/collector.py
import logging
import threading

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from spot_exporter.aggregator import PRICE_LABELS, Snapshot, SnapshotAggregator
from spot_exporter.aws import EC2ClientFactory, create_session
from spot_exporter.orchestrator import ScrapeOrchestrator
from spot_exporter.stream import SampleStream

log = logging.getLogger(__name__)

NAMESPACE = "aws_spot_market_exporter"

DURATION_HELP = "The scrape duration."
SCRAPES_HELP = "Total AWS spot market scrapes."
ERROR_HELP = "The scrape error status."
PRICE_HELP = "Current market price of a spot instance, per hour, in dollars"


class SpotMarketCollector:
    """
    Custom prometheus_client collector exposing EC2 spot prices.

    Every collect() runs a full scrape cycle against AWS. Cycles are
    serialized by a lock held from the fresh snapshot until the metric
    families have been built, so a scrape never sees a half-written cycle.
    """

    def __init__(
        self,
        session=None,
        session_region="eu-west-1",
        profile=None,
        connect_timeout=None,
        read_timeout=None,
        namespace=NAMESPACE,
        stream_size=1,
    ):
        # Raises SessionError; callers treat it as fatal.
        self.session = session or create_session(session_region, profile=profile)
        self.clients = EC2ClientFactory(self.session, connect_timeout=connect_timeout, read_timeout=read_timeout)
        self.orchestrator = ScrapeOrchestrator(self.clients)
        self.namespace = namespace
        self.stream_size = stream_size
        self.lock = threading.Lock()

        self.duration = 0.0
        self.errors = 0
        self.total_scrapes = 0
        self.snapshot = Snapshot()

    def _name(self, name):
        return f"{self.namespace}_{name}"

    def describe(self):
        return [
            GaugeMetricFamily(self._name("scrape_duration_seconds"), DURATION_HELP),
            CounterMetricFamily(self._name("scrapes_total"), SCRAPES_HELP),
            GaugeMetricFamily(self._name("scrape_error"), ERROR_HELP),
            GaugeMetricFamily(self._name("spot_price"), PRICE_HELP, labels=PRICE_LABELS),
        ]

    def collect(self):
        with self.lock:
            families = self._run_cycle()
        yield from families

    def _run_cycle(self):
        self.snapshot = Snapshot()
        stream = SampleStream(maxsize=self.stream_size)

        aggregator = SnapshotAggregator(self.snapshot)
        drain = aggregator.run_in_thread(stream)
        try:
            outcome = self.orchestrator.scrape(stream)
        finally:
            drain.join()

        self.total_scrapes += 1
        self.errors = outcome.errors
        self.duration = outcome.duration
        log.info(
            "Scrape finished: regions=%d prices=%d errors=%d duration=%.3fs",
            outcome.regions,
            len(self.snapshot),
            self.errors,
            self.duration,
        )

        return [
            GaugeMetricFamily(self._name("scrape_duration_seconds"), DURATION_HELP, value=self.duration),
            CounterMetricFamily(self._name("scrapes_total"), SCRAPES_HELP, value=self.total_scrapes),
            GaugeMetricFamily(self._name("scrape_error"), ERROR_HELP, value=self.errors),
            self.snapshot.to_metric_family(self._name("spot_price"), PRICE_HELP),
        ]
