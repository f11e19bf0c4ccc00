"""
Data access layer for the egg price store.
Provides read-only queries over the in-memory records with a clean interface.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

from models import PriceRecord, YearlyAverage
from store import PriceStore


PERIOD_PATTERN = re.compile(r"M(0[1-9]|1[0-2])")
INVALID_PERIOD_MESSAGE = "Month should be in format M01-M12"

_CENTS = Decimal("0.01")


def is_valid_period(period: str) -> bool:
    """True for month keys M01 through M12, exactly."""
    return PERIOD_PATTERN.fullmatch(period) is not None


def round_price(value: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


class PriceDataProvider:
    """
    Provides egg price data from the in-memory store.
    Safe to share across requests: every query reads one published snapshot.
    """

    def __init__(self, store: PriceStore):
        """
        Args:
            store: PriceStore to query (may still be empty while loading)
        """
        self.store = store

    # ----------------------------------------------------------------
    # Lookups
    # ----------------------------------------------------------------

    def list_all(self) -> List[PriceRecord]:
        """Get every record in load order."""
        return list(self.store.records)

    def by_year(self, year: int) -> List[PriceRecord]:
        """
        Get all records for a year, in load order.

        Args:
            year: Calendar year

        Returns:
            Non-empty list of records

        Raises:
            DataNotFoundError: if no record has that year
        """
        records = [r for r in self.store.records if r.year == year]
        if not records:
            raise DataNotFoundError(f"No data found for year {year}")
        return records

    def by_year_and_month(self, year: int, period: str) -> PriceRecord:
        """
        Get the record for a year and month.

        The period is validated before the store is touched. When the
        data holds duplicates for the pair, the first loaded one wins.

        Args:
            year: Calendar year
            period: Month key, 'M01' through 'M12'

        Raises:
            InvalidPeriodError: if period is not M01-M12
            DataNotFoundError: if no record matches
        """
        if not is_valid_period(period):
            raise InvalidPeriodError(INVALID_PERIOD_MESSAGE)

        for record in self.store.records:
            if record.year == year and record.period == period:
                return record

        raise DataNotFoundError(f"No data found for {period}/{year}")

    # ----------------------------------------------------------------
    # Aggregates
    # ----------------------------------------------------------------

    def yearly_averages(self) -> List[YearlyAverage]:
        """
        Average, minimum and maximum price per year, sorted by year.

        An empty store gives an empty list.
        """
        groups: Dict[int, List[float]] = {}
        for record in self.store.records:
            groups.setdefault(record.year, []).append(record.value)

        return [
            YearlyAverage(
                year=year,
                average_price=round_price(sum(prices) / len(prices)),
                min_price=round_price(min(prices)),
                max_price=round_price(max(prices)),
            )
            for year, prices in sorted(groups.items())
        ]

    def stats(self) -> Dict:
        """Record count, distinct year count and load status."""
        # Ready is read first: once set, records are already published
        loaded = self.store.is_ready()
        records = self.store.records
        return {
            "loaded": loaded,
            "total_records": len(records),
            "total_years": len({r.year for r in records}),
        }


class InvalidPeriodError(ValueError):
    """Raised when a month key is not in M01-M12 format."""
    pass


class DataNotFoundError(LookupError):
    """Raised when no records match a lookup."""
    pass
