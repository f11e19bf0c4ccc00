"""
FastAPI application for the Egg Price API.

Serves historical egg prices from memory via HTTP endpoints with
auto-generated OpenAPI documentation at /docs.
"""

from contextlib import asynccontextmanager
from pathlib import Path
import logging
import re

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import List, Optional

from models import PriceRecord, YearlyAverage
from store import PriceStore, start_background_load

from .config import settings
from .data_access import (
    PriceDataProvider,
    DataNotFoundError,
    InvalidPeriodError,
    INVALID_PERIOD_MESSAGE,
    is_valid_period,
)
from .models import (
    WelcomeResponse,
    HealthResponse,
    ErrorResponse,
)

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


ENDPOINTS = {
    "/api/prices": "Get all egg prices",
    "/api/prices/:year": "Get egg prices for a specific year",
    "/api/prices/:year/:month": "Get egg price for a specific year and month (month as M01-M12)",
    "/api/yearly-averages": "Get average egg prices by year",
}

_YEAR_PATTERN = re.compile(r"-?[0-9]+")

router = APIRouter()


def get_provider(request: Request) -> PriceDataProvider:
    return request.app.state.provider


def _parse_year(raw: str, not_found_message: str) -> int:
    # A year segment that is not an integer can match no record
    if not _YEAR_PATTERN.fullmatch(raw):
        raise DataNotFoundError(not_found_message)
    try:
        return int(raw)
    except ValueError:
        # Past the interpreter's int conversion digit limit
        raise DataNotFoundError(not_found_message)


# ----------------------------------------------------------------
# Health & Info
# ----------------------------------------------------------------

@router.get("/", response_model=WelcomeResponse, tags=["Health"])
def root():
    """
    Welcome message listing the available endpoints.
    """
    return {
        "message": "Welcome to the Egg Price API",
        "endpoints": ENDPOINTS,
    }


@router.get("/health", response_model=HealthResponse, tags=["Health"])
def health(request: Request, data: PriceDataProvider = Depends(get_provider)):
    """
    API health check.

    Reports whether the price data has finished loading and how many
    records are being served.
    """
    stats = data.stats()
    return {
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "status": "healthy" if stats["loaded"] else "loading",
        "data_path": request.app.state.data_path or "",
        "store_stats": stats,
    }


# ----------------------------------------------------------------
# Price Endpoints
# ----------------------------------------------------------------

@router.get("/api/prices", response_model=List[PriceRecord], tags=["Prices"])
def get_all_prices(data: PriceDataProvider = Depends(get_provider)):
    """
    Get every price record in source order.
    """
    return data.list_all()


@router.get(
    "/api/prices/{year}",
    response_model=List[PriceRecord],
    responses={404: {"model": ErrorResponse}},
    tags=["Prices"],
)
def get_prices_for_year(year: str, data: PriceDataProvider = Depends(get_provider)):
    """
    Get all price records for a year.

    Args:
        year: Calendar year (e.g., 2023)

    Returns:
        Records for that year, in source order. 404 when there are none.
    """
    year_value = _parse_year(year, f"No data found for year {year}")
    return data.by_year(year_value)


@router.get(
    "/api/prices/{year}/{month}",
    response_model=PriceRecord,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Prices"],
)
def get_price_for_month(year: str, month: str, data: PriceDataProvider = Depends(get_provider)):
    """
    Get the price record for one month.

    Args:
        year: Calendar year (e.g., 2023)
        month: Month key, 'M01' through 'M12'

    Returns:
        A single record. 400 for a malformed month, 404 when missing.
    """
    if not is_valid_period(month):
        raise InvalidPeriodError(INVALID_PERIOD_MESSAGE)
    year_value = _parse_year(year, f"No data found for {month}/{year}")
    return data.by_year_and_month(year_value, month)


@router.get("/api/yearly-averages", response_model=List[YearlyAverage], tags=["Aggregates"])
def get_yearly_averages(data: PriceDataProvider = Depends(get_provider)):
    """
    Get average, minimum and maximum price for each year, oldest first.
    """
    return data.yearly_averages()


# ----------------------------------------------------------------
# Error Handlers
# ----------------------------------------------------------------

async def invalid_period_handler(request: Request, exc: InvalidPeriodError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def not_found_handler(request: Request, exc: DataNotFoundError):
    return JSONResponse(status_code=404, content={"error": str(exc)})


# ----------------------------------------------------------------
# Application
# ----------------------------------------------------------------

def create_app(store: Optional[PriceStore] = None, data_path: Optional[str] = settings.DATA_PATH) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        store: PriceStore to serve (a new empty one by default)
        data_path: CSV to load at startup; None skips loading

    Returns:
        Configured FastAPI app
    """
    store = store if store is not None else PriceStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if data_path and not store.is_ready():
            if not Path(data_path).exists():
                logger.error(f"Price data file not found: {data_path}")
                raise FileNotFoundError(f"Price data not found: {data_path}")
            start_background_load(store, data_path)
        yield
        logger.info("Egg Price API shutting down")

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Enable CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store
    app.state.data_path = data_path
    app.state.provider = PriceDataProvider(store)

    app.add_exception_handler(InvalidPeriodError, invalid_period_handler)
    app.add_exception_handler(DataNotFoundError, not_found_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Server is running on port {settings.PORT}")
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
