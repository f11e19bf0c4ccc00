"""Tests for PriceDataProvider query operations."""

import pytest

from api.data_access import (
    PriceDataProvider,
    DataNotFoundError,
    InvalidPeriodError,
    is_valid_period,
    round_price,
)
from store import PriceStore


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class TestIsValidPeriod:
    @pytest.mark.parametrize("period", ["M01", "M09", "M10", "M12"])
    def test_valid(self, period):
        assert is_valid_period(period)

    @pytest.mark.parametrize("period", ["M00", "M13", "1", "13", "m01", "M1", "", "M011", " M01", "M01 ", "01"])
    def test_invalid(self, period):
        assert not is_valid_period(period)


class TestRoundPrice:
    def test_two_decimals(self):
        assert round_price(3.14159) == 3.14

    def test_half_rounds_away_from_zero(self):
        assert round_price(2.675) == 2.68
        assert round_price(0.125) == 0.13
        assert round_price(-0.125) == -0.13

    def test_already_rounded(self):
        assert round_price(3.5) == 3.5


# ---------------------------------------------------------------------------
# list_all
# ---------------------------------------------------------------------------

class TestListAll:
    def test_returns_all_in_order(self, provider, sample_records):
        assert provider.list_all() == sample_records

    def test_empty_store(self):
        assert PriceDataProvider(PriceStore()).list_all() == []


# ---------------------------------------------------------------------------
# by_year
# ---------------------------------------------------------------------------

class TestByYear:
    def test_filters_year_in_order(self, provider, sample_records):
        result = provider.by_year(2023)
        assert result == [r for r in sample_records if r.year == 2023]
        assert [r.period for r in result] == ["M01", "M02", "M01"]

    def test_every_present_year_non_empty(self, provider, sample_records):
        for year in {r.year for r in sample_records}:
            result = provider.by_year(year)
            assert result
            assert all(r.year == year for r in result)

    def test_absent_year_not_found(self, provider):
        with pytest.raises(DataNotFoundError, match="No data found for year 1999"):
            provider.by_year(1999)

    def test_empty_store_not_found(self):
        with pytest.raises(DataNotFoundError):
            PriceDataProvider(PriceStore()).by_year(2023)


# ---------------------------------------------------------------------------
# by_year_and_month
# ---------------------------------------------------------------------------

class TestByYearAndMonth:
    def test_returns_single_record(self, provider):
        r = provider.by_year_and_month(2022, "M12")
        assert r.year == 2022
        assert r.period == "M12"
        assert r.value == pytest.approx(4.25)

    def test_first_match_wins(self, provider):
        r = provider.by_year_and_month(2023, "M01")
        assert r.series_id == "APU0000708111"
        assert r.value == pytest.approx(3.5)

    def test_not_found(self, provider):
        with pytest.raises(DataNotFoundError, match="No data found for M05/2023"):
            provider.by_year_and_month(2023, "M05")

    @pytest.mark.parametrize("period", ["M00", "M13", "1", "m01", "M1", ""])
    def test_invalid_period(self, provider, period):
        with pytest.raises(InvalidPeriodError, match="Month should be in format M01-M12"):
            provider.by_year_and_month(2023, period)

    @pytest.mark.parametrize("year", [2023, 1999, 0])
    def test_invalid_period_independent_of_year(self, provider, year):
        with pytest.raises(InvalidPeriodError):
            provider.by_year_and_month(year, "M13")

    def test_invalid_period_checked_before_store(self):
        # Empty store would give not-found; validation must win
        with pytest.raises(InvalidPeriodError):
            PriceDataProvider(PriceStore()).by_year_and_month(2023, "M00")


# ---------------------------------------------------------------------------
# yearly_averages
# ---------------------------------------------------------------------------

class TestYearlyAverages:
    def test_groups_sorted_by_year(self, provider):
        result = provider.yearly_averages()
        assert [a.year for a in result] == [2022, 2023]

    def test_aggregates(self, provider):
        by_year = {a.year: a for a in provider.yearly_averages()}
        assert by_year[2022].average_price == pytest.approx(3.92)
        assert by_year[2022].min_price == pytest.approx(3.59)
        assert by_year[2022].max_price == pytest.approx(4.25)
        # (3.50 + 4.00 + 9.99) / 3 = 5.83
        assert by_year[2023].average_price == pytest.approx(5.83)
        assert by_year[2023].min_price == pytest.approx(3.5)
        assert by_year[2023].max_price == pytest.approx(9.99)

    def test_min_avg_max_ordering(self, provider):
        for a in provider.yearly_averages():
            assert a.min_price - 0.01 <= a.average_price <= a.max_price + 0.01

    def test_unsorted_input_sorted_output(self, make_record):
        store = PriceStore([make_record(2024), make_record(2021), make_record(2023), make_record(2021, "M02")])
        result = PriceDataProvider(store).yearly_averages()
        assert [a.year for a in result] == [2021, 2023, 2024]

    def test_empty_store_empty_list(self):
        assert PriceDataProvider(PriceStore()).yearly_averages() == []


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

class TestPurity:
    def test_repeated_calls_identical(self, provider):
        assert provider.list_all() == provider.list_all()
        assert provider.by_year(2023) == provider.by_year(2023)
        assert provider.by_year_and_month(2023, "M02") == provider.by_year_and_month(2023, "M02")
        assert provider.yearly_averages() == provider.yearly_averages()

    def test_queries_do_not_mutate_store(self, provider, store):
        before = store.records
        provider.list_all().clear()
        provider.by_year(2023).clear()
        provider.yearly_averages()
        assert store.records is before
        assert len(store) == 5


class TestEndToEnd:
    def test_two_row_example(self, make_record):
        first = make_record(2023, "M01", 3.50, None)
        second = make_record(2023, "M02", 4.00, 0.5)
        data = PriceDataProvider(PriceStore([first, second]))

        assert data.by_year(2023) == [first, second]
        assert data.by_year_and_month(2023, "M01").monthly_change is None
        averages = data.yearly_averages()
        assert len(averages) == 1
        assert averages[0].model_dump(by_alias=True) == {
            "year": 2023, "averagePrice": 3.75, "minPrice": 3.5, "maxPrice": 4.0,
        }
        with pytest.raises(DataNotFoundError):
            data.by_year(2022)
        with pytest.raises(InvalidPeriodError):
            data.by_year_and_month(2023, "M13")


class TestStats:
    def test_stats(self, provider):
        assert provider.stats() == {"loaded": True, "total_records": 5, "total_years": 2}

    def test_stats_before_publish(self):
        assert PriceDataProvider(PriceStore()).stats() == {
            "loaded": False, "total_records": 0, "total_years": 0,
        }

    def test_publish_between_reads_never_reports_loaded_and_empty(self, make_record):
        records = [make_record(), make_record(period="M02")]

        class PublishOnFirstRead(PriceStore):
            """Publishes right after the first of is_ready()/records is read."""
            def __init__(self):
                super().__init__()
                self._fired = False

            def _fire(self):
                if not self._fired:
                    self._fired = True
                    return True
                return False

            def is_ready(self):
                ready = super().is_ready()
                if self._fire():
                    self.publish(records)
                return ready

            @property
            def records(self):
                current = self._records
                if self._fire():
                    self.publish(records)
                return current

        stats = PriceDataProvider(PublishOnFirstRead()).stats()
        assert not (stats["loaded"] and stats["total_records"] == 0)
