"""Shared fixtures for the test suite."""

import csv
import pytest

from fastapi.testclient import TestClient

from api.data_access import PriceDataProvider
from api.main import create_app
from models import PriceRecord
from store import PriceStore

CSV_HEADER = ["Series ID", "Year", "Period", "Label", "Value", "1-Month Net Change"]


@pytest.fixture
def sample_row():
    """Factory fixture — call with overrides to get a raw CSV row dict."""
    def _make(**overrides):
        row = {
            "Series ID": "APU0000708111",
            "Year": "2023",
            "Period": "M01",
            "Label": "2023 Jan",
            "Value": "3.50",
            "1-Month Net Change": "N/A",
        }
        row.update(overrides)
        return row
    return _make


@pytest.fixture
def make_record():
    """Factory fixture for PriceRecord objects."""
    def _make(year=2023, period="M01", value=3.5, monthly_change=None, **overrides):
        fields = {
            "series_id": "APU0000708111",
            "year": year,
            "period": period,
            "month_label": f"{year} {period}",
            "value": value,
            "monthly_change": monthly_change,
        }
        fields.update(overrides)
        return PriceRecord(**fields)
    return _make


@pytest.fixture
def write_csv(tmp_path):
    """Write rows to a CSV in tmp_path and return its path."""
    def _write(rows, name="egg.csv", header=CSV_HEADER):
        path = tmp_path / name
        with open(path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=header, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(rows)
        return str(path)
    return _write


@pytest.fixture
def sample_records(make_record):
    """Two years of records, including a duplicate (2023, M01)."""
    return [
        make_record(2022, "M11", 3.59, 0.17),
        make_record(2022, "M12", 4.25, 0.66),
        make_record(2023, "M01", 3.50, None),
        make_record(2023, "M02", 4.00, 0.5),
        make_record(2023, "M01", 9.99, 5.0, series_id="DUPLICATE"),
    ]


@pytest.fixture
def store(sample_records):
    return PriceStore(sample_records)


@pytest.fixture
def provider(store):
    return PriceDataProvider(store)


@pytest.fixture
def client(store):
    """TestClient over a pre-loaded store (no CSV load at startup)."""
    return TestClient(create_app(store=store, data_path=None))


@pytest.fixture
def empty_client():
    """TestClient whose store has not been published yet."""
    return TestClient(create_app(store=PriceStore(), data_path=None))
