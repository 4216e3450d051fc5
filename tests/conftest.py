"""Pytest configuration and shared fixtures."""

import random

import pytest

from core.config import TesseraConfig
from core.exceptions import DataSourceUnavailableError
from core.gallery import Gallery
from core.records import Record, parse_records
from spatial.entities import Entity
from spatial.layouts import LayoutGenerator


class SequenceRandom(random.Random):
    """Random source that replays a fixed sequence of values."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)
        self._position = 0

    def random(self):
        value = self._values[self._position % len(self._values)]
        self._position += 1
        return value


class StaticSource:
    """Record provider returning a fixed list."""

    def __init__(self, records: list[Record]):
        self.records = records
        self.fetch_count = 0

    async def fetch(self) -> list[Record]:
        self.fetch_count += 1
        return list(self.records)


class FailingSource:
    """Record provider whose fetch always fails."""

    async def fetch(self) -> list[Record]:
        raise DataSourceUnavailableError("endpoint unreachable")


def make_payload(count: int) -> list[dict]:
    worths = ["$50,000", "$150,000", "$250,000"]
    return [
        {
            "Name": f"Person {i}",
            "Photo": f"https://example.test/photos/{i}.jpg",
            "Age": str(20 + i % 50),
            "Country": "NZ",
            "Interest": "Sailing",
            "NetWorth": worths[i % 3],
        }
        for i in range(count)
    ]


def make_entities(count: int) -> list[Entity]:
    return [Entity(index=i) for i in range(count)]


@pytest.fixture
def generator():
    """Create a layout generator."""
    return LayoutGenerator()


@pytest.fixture
def config():
    """Configuration with a short base duration and a fixed seed."""
    return TesseraConfig(base_duration=1.0, random_seed=1234)


@pytest.fixture
def sample_records():
    """Twenty-five parsed records."""
    return parse_records(make_payload(25))


@pytest.fixture
def gallery(sample_records, config):
    """Create an uninitialized gallery over the sample records."""
    return Gallery(StaticSource(sample_records), config=config)


@pytest.fixture
async def ready_gallery(gallery):
    """Create an initialized gallery."""
    await gallery.initialize()
    yield gallery
    await gallery.stop()
