# spot_exporter/aggregator.py
import logging
import threading

from prometheus_client.core import GaugeMetricFamily

log = logging.getLogger(__name__)

PRICE_LABELS = ["region", "az", "product", "instance_type"]


class Snapshot:
    """Label-keyed spot prices produced by a single scrape cycle."""

    def __init__(self):
        self._prices = {}

    def set(self, label_key, price):
        self._prices[label_key] = price

    def get(self, label_key):
        return self._prices.get(label_key)

    def __len__(self):
        return len(self._prices)

    def to_metric_family(self, name, documentation):
        family = GaugeMetricFamily(name, documentation, labels=PRICE_LABELS)
        for label_key, price in sorted(self._prices.items()):
            family.add_metric(list(label_key), price)
        return family


class SnapshotAggregator:
    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def drain(self, stream):
        log.debug("set spot market metrics")
        for sample in stream:
            log.debug("Setting %s to %g", sample.label_key, sample.price)
            self.snapshot.set(sample.label_key, sample.price)

    def run_in_thread(self, stream):
        thread = threading.Thread(target=self.drain, args=(stream,), name="snapshot-aggregator", daemon=True)
        thread.start()
        return thread
