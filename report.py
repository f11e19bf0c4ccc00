"""
Egg Price Report

Loads the price CSV directly (no server needed) and prints the yearly
average/min/max summary, optionally with the monthly detail of one year.

Usage:
    python report.py                              # Default data file
    python report.py --data path/to/egg.csv       # Specific file
    python report.py --year 2023                  # Add monthly detail for 2023
"""

import argparse
import datetime
from typing import Optional

from utils import log
from store import PriceStore, load_records, DEFAULT_DATA_PATH
from api.data_access import PriceDataProvider, DataNotFoundError


def run_report(data_path: str = DEFAULT_DATA_PATH, year: Optional[int] = None) -> int:
    """
    Print the yearly summary (and optional monthly detail).

    Returns:
        Process exit code: 0 on success, 1 if the requested year has no data
    """
    start = datetime.datetime.now()
    log.header("EGG PRICE REPORT")

    log.step(f"Loading {data_path}")
    result = load_records(data_path)
    if result.skipped:
        log.warn(f"Skipped {result.skipped} malformed rows")
    log.info(f"Loaded {len(result.records)} records")

    data = PriceDataProvider(PriceStore(result.records))

    averages = data.yearly_averages()
    log.summary_table("Yearly Averages", [
        (str(a.year), f"avg {a.average_price:.2f}  min {a.min_price:.2f}  max {a.max_price:.2f}")
        for a in averages
    ])

    if year is not None:
        try:
            records = data.by_year(year)
        except DataNotFoundError as e:
            log.err(str(e))
            return 1
        for r in records:
            change = "n/a" if r.monthly_change is None else f"{r.monthly_change:+.2f}"
            log.year_msg(r.year, f"{r.period} {r.month_label}: {r.value:.2f} ({change})")

    elapsed = datetime.datetime.now() - start
    log.ok(f"Report complete in {elapsed}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Print yearly egg price summary from the source CSV")
    parser.add_argument("--data", default=DEFAULT_DATA_PATH, help="Path to the price CSV")
    parser.add_argument("--year", type=int, help="Also print monthly records for this year")
    args = parser.parse_args()

    raise SystemExit(run_report(data_path=args.data, year=args.year))


if __name__ == "__main__":
    main()
