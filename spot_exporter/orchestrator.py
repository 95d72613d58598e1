# spot_exporter/orchestrator.py
import logging
import threading
import time

from botocore.exceptions import BotoCoreError, ClientError

from spot_exporter.fetcher import RegionPriceFetcher
from spot_exporter.models import PartialScrapeError, ScrapeOutcome

log = logging.getLogger(__name__)


class ErrorCounter:
    def __init__(self):
        self.lock = threading.Lock()
        self._value = 0

    def add(self, n=1):
        with self.lock:
            self._value += n

    @property
    def value(self):
        with self.lock:
            return self._value


class ScrapeOrchestrator:
    """
    One scrape cycle: discover regions, fetch every region on its own
    thread, and close the stream once all of them are done.
    """

    def __init__(self, clients, fetcher: RegionPriceFetcher | None = None):
        self.clients = clients
        self.fetcher = fetcher or RegionPriceFetcher(clients)

    def list_regions(self):
        resp = self.clients.client().describe_regions()
        return [r["RegionName"] for r in resp.get("Regions", [])]

    def scrape(self, stream) -> ScrapeOutcome:
        start = time.monotonic()
        errors = ErrorCounter()
        regions = []

        try:
            try:
                regions = self.list_regions()
            except (ClientError, BotoCoreError) as e:
                log.error("There was an error listing all regions: %s", e)
                errors.add(1)
            except Exception:
                log.exception("Unexpected failure while listing all regions")
                errors.add(1)
            else:
                threads = [
                    threading.Thread(
                        target=self._fetch_region,
                        args=(region, stream, errors),
                        name=f"fetch-{region}",
                        daemon=True,
                    )
                    for region in regions
                ]
                for t in threads:
                    t.start()
                for t in threads:
                    t.join()
        finally:
            stream.close()

        duration = time.monotonic() - start
        log.debug("Scraped %d regions in %.3fs with %d errors", len(regions), duration, errors.value)
        return ScrapeOutcome(errors=errors.value, duration=duration, regions=len(regions))

    def _fetch_region(self, region, stream, errors):
        try:
            self.fetcher.fetch(region, stream)
        except PartialScrapeError as e:
            log.error("An error happened while fetching spot market prices in %s: %s", region, e)
            errors.add(e.count)
        except Exception:
            log.exception("Unexpected failure while fetching spot market prices in %s", region)
            errors.add(1)
