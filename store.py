"""
In-memory record store for the egg price data system.

Reads the source CSV once, turns each row into an immutable PriceRecord and
publishes the finished tuple to a PriceStore. Readers always see either the
empty store or a complete load, never a partial one.

Usage:
    # Programmatic
    from store import PriceStore, load_records
    result = load_records("data/egg.csv")
    store = PriceStore(result.records)

    # Background load (API startup)
    store = PriceStore()
    start_background_load(store, "data/egg.csv")
"""

import logging
import math
import os
import threading
from typing import Iterable, Mapping, NamedTuple, Optional, Tuple

import pandas as pd
from pydantic import ValidationError

from models import PriceRecord
from utils import log

logger = logging.getLogger(__name__)


BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(BASE_DIR, "data")
DEFAULT_DATA_PATH = os.path.join(DATA_DIR, "egg.csv")

# Literal used by the source for a missing net change
NOT_APPLICABLE = "N/A"


# ---------------------------------------------------------------------------
# Source columns
# ---------------------------------------------------------------------------

COL_SERIES_ID = "Series ID"
COL_YEAR = "Year"
COL_PERIOD = "Period"
COL_LABEL = "Label"
COL_VALUE = "Value"
COL_NET_CHANGE = "1-Month Net Change"

REQUIRED_COLUMNS = (
    COL_SERIES_ID,
    COL_YEAR,
    COL_PERIOD,
    COL_LABEL,
    COL_VALUE,
    COL_NET_CHANGE,
)


class MalformedRowError(ValueError):
    """Raised when a source row has an unparseable year or value."""
    pass


class LoadResult(NamedTuple):
    records: Tuple[PriceRecord, ...]
    skipped: int


# ---------------------------------------------------------------------------
# Row transform
# ---------------------------------------------------------------------------

def _parse_change(raw: Optional[str]) -> Optional[float]:
    # Short rows leave trailing cells missing (None or NaN)
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text or raw == NOT_APPLICABLE:
        return None
    return float(text)


def parse_row(row: Mapping[str, str]) -> PriceRecord:
    """
    Transform one raw CSV row into a PriceRecord.

    Args:
        row: Mapping of column name to raw cell text

    Returns:
        PriceRecord built from the row

    Raises:
        MalformedRowError: if Year, Value or a non-sentinel net change
            cannot be parsed
    """
    try:
        year = int(str(row[COL_YEAR]).strip())
        value = float(str(row[COL_VALUE]).strip())
        change = _parse_change(row.get(COL_NET_CHANGE))
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedRowError(str(e)) from e

    if not math.isfinite(value) or (change is not None and not math.isfinite(change)):
        raise MalformedRowError(f"non-finite number: value={value}, change={change}")

    try:
        return PriceRecord(
            series_id=row.get(COL_SERIES_ID, ""),
            year=year,
            period=row.get(COL_PERIOD, ""),
            month_label=row.get(COL_LABEL, ""),
            value=value,
            monthly_change=change,
        )
    except ValidationError as e:
        raise MalformedRowError(str(e)) from e


def build_records(rows: Iterable[Mapping[str, str]]) -> LoadResult:
    """Transform rows in order, skipping (and counting) malformed ones."""
    records = []
    skipped = 0
    for row_no, row in enumerate(rows, start=1):
        try:
            records.append(parse_row(row))
        except MalformedRowError as e:
            skipped += 1
            logger.warning(f"Skipping malformed data row {row_no}: {e}")
    return LoadResult(records=tuple(records), skipped=skipped)


def load_records(path: str = DEFAULT_DATA_PATH) -> LoadResult:
    """
    Read the source CSV and build the record tuple.

    Every column is read as text and pandas NA detection is disabled so the
    literal "N/A" reaches the row transform untouched. Lines with more
    fields than the header are skipped and counted with the malformed rows.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if a required column is missing from the header
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Price data not found: {path}")

    bad_lines = []

    def _skip_bad_line(fields):
        bad_lines.append(fields)
        logger.warning(f"Skipping row with {len(fields)} fields in {path}: {fields}")
        return None

    df = pd.read_csv(
        path,
        dtype=str,
        keep_default_na=False,
        na_filter=False,
        engine="python",
        on_bad_lines=_skip_bad_line,
    )

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in {path}: {', '.join(missing)}")

    built = build_records(df.to_dict(orient="records"))
    result = LoadResult(records=built.records, skipped=built.skipped + len(bad_lines))
    if result.skipped:
        logger.warning(f"Skipped {result.skipped} malformed rows in {path}")
    logger.info(f"Loaded {len(result.records)} price records from {path}")
    return result


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class PriceStore:
    """
    Holds the most recently published record tuple.

    Empty until publish() is called. Publishing is a single reference
    assignment, so readers need no lock.
    """

    def __init__(self, records: Optional[Iterable[PriceRecord]] = None):
        self._records: Tuple[PriceRecord, ...] = ()
        self._ready = threading.Event()
        if records is not None:
            self.publish(records)

    @property
    def records(self) -> Tuple[PriceRecord, ...]:
        return self._records

    def publish(self, records: Iterable[PriceRecord]) -> None:
        """Make a fully built record set visible to readers."""
        self._records = tuple(records)
        self._ready.set()

    def is_ready(self) -> bool:
        return self._ready.is_set()

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the first publish. Returns False on timeout."""
        return self._ready.wait(timeout)

    def __len__(self) -> int:
        return len(self._records)


def _load_and_publish(store: PriceStore, path: str) -> None:
    try:
        result = load_records(path)
    except Exception:
        logger.exception(f"Failed to load price data from {path}")
        log.err(f"Price data load failed: {path}")
        return

    store.publish(result.records)
    log.ok(f"CSV file successfully processed ({len(result.records)} records, {result.skipped} skipped)")


def start_background_load(store: PriceStore, path: str = DEFAULT_DATA_PATH) -> threading.Thread:
    """
    Load the CSV on a daemon thread and publish into the store when done.

    Returns:
        The started thread (join it to wait for the load)
    """
    log.step(f"Loading price data from {path}")
    thread = threading.Thread(
        target=_load_and_publish,
        args=(store, path),
        name="price-loader",
        daemon=True,
    )
    thread.start()
    return thread
