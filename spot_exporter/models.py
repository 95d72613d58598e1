# spot_exporter/models.py
from dataclasses import dataclass


@dataclass(frozen=True)
class PriceSample:
    region: str
    availability_zone: str
    product: str
    instance_type: str
    price: float

    @property
    def label_key(self):
        return (self.region, self.availability_zone, self.product, self.instance_type)


@dataclass
class ScrapeOutcome:
    errors: int
    duration: float
    regions: int = 0


class SessionError(RuntimeError):
    """Raised when no AWS session can be established; fatal at startup."""


class PartialScrapeError(Exception):
    """
    A region fetch finished with errors. Only the count is carried, the
    details have already been logged.
    """

    def __init__(self, count: int):
        super().__init__(f"Error count: {count}")
        self.count = count
