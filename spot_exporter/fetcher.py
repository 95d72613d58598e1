# spot_exporter/fetcher.py
import logging
from datetime import datetime, timezone

from botocore.exceptions import BotoCoreError, ClientError

from spot_exporter.models import PartialScrapeError, PriceSample

log = logging.getLogger(__name__)


def to_sample(region, record):
    """
    Convert one SpotPriceHistory entry into a PriceSample.

    Returns None when the record carries no price. Raises ValueError when the
    price is present but not a number.
    """
    raw_price = record.get("SpotPrice")
    if raw_price is None:
        return None
    try:
        price = float(raw_price)
    except (TypeError, ValueError):
        raise ValueError(f"invalid spot price {raw_price!r}")
    return PriceSample(
        region=region,
        availability_zone=record.get("AvailabilityZone", ""),
        product=record.get("ProductDescription", ""),
        instance_type=record.get("InstanceType", ""),
        price=price,
    )


class RegionPriceFetcher:
    def __init__(self, clients):
        self.clients = clients

    def fetch(self, region, stream):
        """
        Stream the current spot prices of one region. Raises
        PartialScrapeError once every record has been looked at if anything
        went wrong along the way.
        """
        error_count = 0
        now = datetime.now(timezone.utc)

        try:
            ec2 = self.clients.client(region)
            paginator = ec2.get_paginator("describe_spot_price_history")
            for page in paginator.paginate(StartTime=now, EndTime=now):
                for record in page.get("SpotPriceHistory", []):
                    try:
                        sample = to_sample(region, record)
                    except ValueError as e:
                        log.error("Skipping spot price record in %s: %s", region, e)
                        error_count += 1
                        continue
                    if sample is not None:
                        stream.send(sample)
        except (ClientError, BotoCoreError) as e:
            log.error("There was an error querying AWS spot market in %s: %s", region, e)
            error_count += 1

        if error_count > 0:
            raise PartialScrapeError(error_count)
