# core/records.py

"""Source records: parsing, tier classification, and loading."""

import json
import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import DataSourceUnavailableError, RecordParseError
from .logging import get_logger

logger = get_logger(__name__)

LOW_TIER_MAX = 100_000
MID_TIER_MAX = 200_000

_NON_NUMERIC = re.compile(r"[^0-9.-]+")


class Tier(str, Enum):
    """Presentation tier derived from a record's net worth."""

    LOW = "low"
    MID = "mid"
    HIGH = "high"

    @classmethod
    def for_value(cls, net_worth: float) -> "Tier":
        if net_worth <= LOW_TIER_MAX:
            return cls.LOW
        if net_worth <= MID_TIER_MAX:
            return cls.MID
        return cls.HIGH


def parse_net_worth(raw: Any) -> float:
    """Parse a numeric or currency-formatted value such as ``"$1,250.50"``.

    Raises:
        RecordParseError: If no number remains after stripping formatting
    """
    if isinstance(raw, bool) or raw is None:
        raise RecordParseError(f"Net worth is missing or invalid: {raw!r}")
    if isinstance(raw, (int, float)):
        return float(raw)

    cleaned = _NON_NUMERIC.sub("", str(raw))
    try:
        return float(cleaned)
    except ValueError as e:
        raise RecordParseError(f"Net worth is not numeric: {raw!r}") from e


class Record(BaseModel):
    """One source record. ``display`` is forwarded to the render layer untouched."""

    model_config = ConfigDict(frozen=True)

    index: int
    identifier: str
    net_worth: float
    tier: Tier
    display: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, index: int, payload: Any) -> "Record":
        """Build a record from one raw JSON object.

        Raises:
            RecordParseError: If the payload is not an object or lacks a net worth
        """
        if not isinstance(payload, dict):
            raise RecordParseError(f"Record {index} is not an object: {type(payload).__name__}")

        raw_worth = payload.get("NetWorth", payload.get("net_worth"))
        net_worth = parse_net_worth(raw_worth)
        identifier = payload.get("id", payload.get("ID", payload.get("Name")))

        return cls(
            index=index,
            identifier=str(identifier) if identifier is not None else str(index),
            net_worth=net_worth,
            tier=Tier.for_value(net_worth),
            display=dict(payload),
        )


def parse_records(payload: Any) -> list[Record]:
    """Parse an ordered JSON array of record objects.

    Raises:
        RecordParseError: If the payload is not a list or any record is malformed
    """
    if not isinstance(payload, list):
        raise RecordParseError(f"Expected a list of records, got {type(payload).__name__}")
    return [Record.from_payload(i, entry) for i, entry in enumerate(payload)]


class RecordSource:
    """Fetches records once from an HTTP endpoint."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> list[Record]:
        """Fetch and parse the records.

        Raises:
            DataSourceUnavailableError: If the request fails or the body is not UTF-8 JSON
            RecordParseError: If the JSON does not describe records
        """
        logger.info("records.fetching", url=self.url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            raise DataSourceUnavailableError(f"Failed to fetch records from {self.url}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DataSourceUnavailableError(f"Records endpoint returned invalid JSON: {e}") from e

        records = parse_records(payload)
        logger.info("records.fetched", url=self.url, record_count=len(records))
        return records


class FileRecordSource:
    """Reads the same JSON array from disk for offline runs."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def fetch(self) -> list[Record]:
        return load_records_file(self.path)


def load_records_file(path: str | Path) -> list[Record]:
    """Load records from a JSON file.

    Raises:
        DataSourceUnavailableError: If the file is missing or not valid UTF-8 JSON
    """
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DataSourceUnavailableError(f"Failed to read records from {path}: {e}") from e
    return parse_records(payload)
