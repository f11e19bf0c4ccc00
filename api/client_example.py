"""
Example client for the Egg Price API.

Demonstrates how to read prices from the API in a notebook,
dashboard or other application.
"""

import requests
from typing import Dict, List, Optional


class EggPriceClient:
    """
    Client for the Egg Price API.

    Usage:
        client = EggPriceClient("http://localhost:3000")
        prices = client.get_prices_for_year(2023)
        jan = client.get_price(2023, "M01")
    """

    def __init__(self, api_url: str = "http://localhost:3000"):
        """
        Initialize API client.

        Args:
            api_url: Base URL of the API server
        """
        self.api_url = api_url.rstrip('/')
        self.session = requests.Session()

    def _get(self, endpoint: str, params: Dict = None):
        """Make GET request to API."""
        url = f"{self.api_url}{endpoint}"
        response = self.session.get(url, params=params)
        response.raise_for_status()
        return response.json()

    def _get_or_none(self, endpoint: str):
        """GET that maps a 404 to None."""
        url = f"{self.api_url}{endpoint}"
        response = self.session.get(url)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    # ----------------------------------------------------------------
    # Health & Info
    # ----------------------------------------------------------------

    def welcome(self) -> Dict:
        """Get the welcome message and endpoint listing."""
        return self._get("/")

    def health_check(self) -> Dict:
        """Check API health and whether the data has loaded."""
        return self._get("/health")

    # ----------------------------------------------------------------
    # Prices
    # ----------------------------------------------------------------

    def get_all_prices(self) -> List[Dict]:
        """Get every price record."""
        return self._get("/api/prices")

    def get_prices_for_year(self, year: int) -> Optional[List[Dict]]:
        """
        Get price records for a year.

        Returns:
            List of records, or None if the API has no data for the year
        """
        return self._get_or_none(f"/api/prices/{year}")

    def get_price(self, year: int, month: str) -> Optional[Dict]:
        """
        Get the price record for a year and month.

        Args:
            year: Calendar year
            month: Month key, 'M01' through 'M12'

        Returns:
            The record, or None if missing

        Raises:
            requests.HTTPError: 400 if the month key is malformed
        """
        return self._get_or_none(f"/api/prices/{year}/{month}")

    def get_yearly_averages(self) -> List[Dict]:
        """Get average/min/max price per year."""
        return self._get("/api/yearly-averages")


# ----------------------------------------------------------------
# Example Usage
# ----------------------------------------------------------------

if __name__ == "__main__":
    client = EggPriceClient("http://localhost:3000")

    print("=" * 60)
    print("Egg Price API - Client Examples")
    print("=" * 60)

    print("\n1. Health Check")
    health = client.health_check()
    print(f"   Service: {health['service']}")
    print(f"   Status: {health['status']}")
    print(f"   Records: {health['store_stats']['total_records']}")

    print("\n2. Prices for 2023")
    prices = client.get_prices_for_year(2023) or []
    for p in prices[:3]:
        print(f"   {p['monthLabel']}: ${p['value']:.2f}")

    print("\n3. January 2023")
    jan = client.get_price(2023, "M01")
    if jan:
        print(f"   {jan['monthLabel']}: ${jan['value']:.2f} (change: {jan['monthlyChange']})")

    print("\n4. Yearly Averages")
    for row in client.get_yearly_averages():
        print(f"   {row['year']}: avg ${row['averagePrice']:.2f} "
              f"(min ${row['minPrice']:.2f}, max ${row['maxPrice']:.2f})")

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)
