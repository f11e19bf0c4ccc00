"""
Pydantic data models for the egg price data system.

These models enforce type safety and define the JSON shape of every
record served by the API. Field names are snake_case in Python and
camelCase on the wire (via aliases).
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


# ---------------------------------------------------------------------------
# Core Entities
# ---------------------------------------------------------------------------

class PriceRecord(BaseModel):
    """
    A single monthly price observation loaded from the source CSV.
    Immutable once built.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    series_id: str = Field(alias="seriesId")
    year: int
    period: str
    month_label: str = Field(default="", alias="monthLabel")
    value: float
    monthly_change: Optional[float] = Field(default=None, alias="monthlyChange")


class YearlyAverage(BaseModel):
    """Aggregate prices for one calendar year, rounded to 2 decimals."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    year: int
    average_price: float = Field(alias="averagePrice")
    min_price: float = Field(alias="minPrice")
    max_price: float = Field(alias="maxPrice")
