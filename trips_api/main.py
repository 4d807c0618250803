"""
Trip Booking API - FastAPI Application
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from fastapi import FastAPI, Request, HTTPException, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from trips_api.core.config import get_global_settings
from trips_api.core.error_handler import ErrorCode, error_handler
from trips_api.models.domain import Reservation, Trip
from trips_api.models.requests import ReservationCheckRequest, ReservationCreateRequest
from trips_api.models.responses import (
    ErrorResponse,
    ReservationCheckResponse,
    ReservationCreatedResponse,
)
from trips_api.services.reservation_validator import ReservationValidator
from trips_api.services.trip_store import (
    InMemoryTripStore,
    ReservationConflictError,
    TripStore,
    load_seed_file,
    new_reservation_id,
)

settings = get_global_settings()
environment_config = settings.get_environment_config()
reservation_config = settings.get_reservation_config()

# Configure logging
logging.basicConfig(level=environment_config['log_level'])
logger = logging.getLogger(__name__)

# Process-wide store; replaced through dependency overrides in tests
trip_store = InMemoryTripStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load seed data into the trip store on startup."""
    if settings.SEED_DATA_PATH:
        counts = await load_seed_file(trip_store, settings.SEED_DATA_PATH)
        logger.info(f"Trip store seeded: {counts}")
    yield


# Create FastAPI application instance
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="API for searching trips and checking and booking reservations",
    docs_url="/docs" if environment_config['enable_docs'] else None,
    redoc_url="/redoc" if environment_config['enable_redoc'] else None,
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid start date or guest count"},
    404: {"model": ErrorResponse, "description": "Trip not found"},
    409: {"model": ErrorResponse, "description": "Dates already reserved"},
    422: {"model": ErrorResponse, "description": "Malformed request"},
    504: {"model": ErrorResponse, "description": "Storage timeout"},
}


# Dependency injection for the storage collaborator and the validator
async def get_trip_store() -> TripStore:
    """Dependency to provide the TripStore instance."""
    return trip_store


async def get_reservation_validator(
    store: TripStore = Depends(get_trip_store)
) -> ReservationValidator:
    """Dependency to provide a ReservationValidator bound to the store."""
    return ReservationValidator(store, overlap_mode=reservation_config['overlap_mode'])


def _http_error_code(status_code: int) -> ErrorCode:
    try:
        return ErrorCode(f"HTTP_{status_code}")
    except ValueError:
        return ErrorCode.HTTP_500 if status_code >= 500 else ErrorCode.HTTP_400


# Global exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent error response format."""
    error_code = _http_error_code(exc.status_code)
    error_handler.log_error(error_code, str(exc.detail), request=request)
    return error_handler.create_json_response(error_code, str(exc.detail), status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle Starlette HTTP exceptions with consistent error response format."""
    error_code = _http_error_code(exc.status_code)
    error_handler.log_error(error_code, str(exc.detail), request=request)
    return error_handler.create_json_response(error_code, str(exc.detail), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors with consistent error response format."""
    message = f"Request validation failed: {exc.errors()}"
    error_handler.log_error(ErrorCode.VALIDATION_ERROR, message, request=request)
    return error_handler.create_json_response(ErrorCode.VALIDATION_ERROR, message)


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors with consistent error response format."""
    return error_handler.handle_validation_error(exc, request=request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions with consistent error response format."""
    error_handler.log_error(
        ErrorCode.INTERNAL_SERVER_ERROR,
        f"Unhandled Exception: {type(exc).__name__}: {exc}",
        request=request,
        exception=exc
    )
    return error_handler.create_json_response(ErrorCode.INTERNAL_SERVER_ERROR)


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check(store: TripStore = Depends(get_trip_store)):
    """Health check endpoint with trip store counts"""
    return {"status": "healthy", "service": "trip-booking", "store": store.get_stats()}


@app.post(
    "/api/trips/check",
    response_model=ReservationCheckResponse,
    responses=ERROR_RESPONSES,
)
async def check_trip_reservation(
    request: ReservationCheckRequest,
    http_request: Request,
    validator: ReservationValidator = Depends(get_reservation_validator)
):
    """
    Check that a stay can be booked and price it.

    Args:
        request: Trip id and proposed date range
        http_request: Incoming request, used for error context
        validator: Reservation validator (injected dependency)

    Returns:
        ReservationCheckResponse with the trip and total price, or an
        error response with TRIP_NOT_FOUND, INVALID_END_DATE or
        TRIP_ALREADY_RESERVED
    """
    logger.info(
        f"Processing reservation check for trip {request.trip_id} "
        f"({request.start_date} to {request.end_date})"
    )

    try:
        result = await asyncio.wait_for(
            validator.validate(request.trip_id, request.start_date, request.end_date),
            timeout=reservation_config['timeout']
        )
    except asyncio.TimeoutError:
        error_handler.log_error(
            ErrorCode.TIMEOUT,
            f"Reservation check exceeded {reservation_config['timeout']}s",
            request=http_request,
            trip_id=request.trip_id
        )
        return error_handler.create_json_response(ErrorCode.TIMEOUT)
    except Exception as e:
        error_handler.log_error(
            ErrorCode.INTERNAL_SERVER_ERROR,
            f"Reservation check failed: {e}",
            request=http_request,
            exception=e,
            trip_id=request.trip_id
        )
        return error_handler.create_json_response(ErrorCode.INTERNAL_SERVER_ERROR)

    if not result.ok:
        return error_handler.handle_reservation_error(
            result.error, request=http_request, trip_id=request.trip_id
        )

    return ReservationCheckResponse(trip=result.trip, total_price=result.total_price)


def _optional_query_value(value: Optional[str]) -> Optional[str]:
    # Browser clients send unset search fields as "null" or "undefined"
    if value is None:
        return None
    value = value.strip()
    if not value or value in ("null", "undefined"):
        return None
    return value


@app.get(
    "/api/trips/search",
    response_model=List[Trip],
    responses={422: ERROR_RESPONSES[422], 504: ERROR_RESPONSES[504]},
)
async def search_trips(
    http_request: Request,
    text: Optional[str] = Query(default=None, description="Matches name, location or description"),
    start_date: Optional[str] = Query(default=None, alias="startDate", description="Earliest trip start (YYYY-MM-DD)"),
    budget: Optional[str] = Query(default=None, description="Maximum price per day"),
    store: TripStore = Depends(get_trip_store)
):
    """Search trips by free text, earliest start date and daily budget."""
    text = _optional_query_value(text)
    start_date = _optional_query_value(start_date)
    budget = _optional_query_value(budget)

    try:
        parsed_start = date.fromisoformat(start_date) if start_date else None
        parsed_budget = Decimal(budget) if budget else None
        if parsed_budget is not None and not parsed_budget.is_finite():
            raise InvalidOperation(budget)
    except (ValueError, InvalidOperation):
        message = f"Invalid search parameters: startDate={start_date!r}, budget={budget!r}"
        error_handler.log_error(ErrorCode.VALIDATION_ERROR, message, request=http_request)
        return error_handler.create_json_response(ErrorCode.VALIDATION_ERROR, message)

    logger.info(f"Searching trips: text={text!r} startDate={parsed_start} budget={parsed_budget}")

    try:
        return await asyncio.wait_for(
            store.search_trips(text=text, start_date=parsed_start, budget=parsed_budget),
            timeout=reservation_config['timeout']
        )
    except asyncio.TimeoutError:
        error_handler.log_error(ErrorCode.TIMEOUT, "Trip search timed out", request=http_request)
        return error_handler.create_json_response(ErrorCode.TIMEOUT)


@app.get(
    "/api/trips/{trip_id}",
    response_model=Trip,
    responses={404: ERROR_RESPONSES[404], 504: ERROR_RESPONSES[504]},
)
async def get_trip(
    trip_id: str,
    http_request: Request,
    store: TripStore = Depends(get_trip_store)
):
    """Return a single trip."""
    try:
        trip = await asyncio.wait_for(store.get_trip(trip_id), timeout=reservation_config['timeout'])
    except asyncio.TimeoutError:
        error_handler.log_error(ErrorCode.TIMEOUT, "Trip lookup timed out", request=http_request, trip_id=trip_id)
        return error_handler.create_json_response(ErrorCode.TIMEOUT)

    if trip is None:
        return error_handler.handle_reservation_error(
            ErrorCode.TRIP_NOT_FOUND, request=http_request, trip_id=trip_id
        )
    return trip


@app.post(
    "/api/trips/reservation",
    status_code=201,
    response_model=ReservationCreatedResponse,
    responses=ERROR_RESPONSES,
)
async def create_trip_reservation(
    request: ReservationCreateRequest,
    http_request: Request,
    validator: ReservationValidator = Depends(get_reservation_validator),
    store: TripStore = Depends(get_trip_store)
):
    """
    Book a stay.

    Runs the same check as /api/trips/check, verifies the guest count and
    stores the reservation. The store rejects the write if another
    reservation for the trip was stored in the meantime.
    """
    logger.info(
        f"Processing reservation for trip {request.trip_id} "
        f"({request.start_date} to {request.end_date}, {request.guests} guests)"
    )

    try:
        result = await asyncio.wait_for(
            validator.validate(request.trip_id, request.start_date, request.end_date),
            timeout=reservation_config['timeout']
        )
        if not result.ok:
            return error_handler.handle_reservation_error(
                result.error, request=http_request, trip_id=request.trip_id
            )

        if request.guests > result.trip.max_guests:
            return error_handler.handle_reservation_error(
                ErrorCode.INVALID_GUESTS,
                request=http_request,
                trip_id=request.trip_id,
                message=f"Trip {request.trip_id} accepts at most {result.trip.max_guests} guests"
            )

        reservation = Reservation(
            id=new_reservation_id(),
            trip_id=request.trip_id,
            user_id=request.user_id,
            start_date=request.start_date,
            end_date=request.end_date,
            guests=request.guests,
            total_paid=result.total_price,
        )
        stored = await asyncio.wait_for(
            store.create_reservation(reservation),
            timeout=reservation_config['timeout']
        )

    except ReservationConflictError as e:
        return error_handler.handle_reservation_error(
            ErrorCode.TRIP_ALREADY_RESERVED,
            request=http_request,
            trip_id=request.trip_id,
            message=str(e)
        )
    except asyncio.TimeoutError:
        error_handler.log_error(
            ErrorCode.TIMEOUT,
            f"Reservation exceeded {reservation_config['timeout']}s",
            request=http_request,
            trip_id=request.trip_id
        )
        return error_handler.create_json_response(ErrorCode.TIMEOUT)
    except Exception as e:
        error_handler.log_error(
            ErrorCode.INTERNAL_SERVER_ERROR,
            f"Reservation failed: {e}",
            request=http_request,
            exception=e,
            trip_id=request.trip_id
        )
        return error_handler.create_json_response(ErrorCode.INTERNAL_SERVER_ERROR)

    logger.info(f"Reservation {stored.id} created for trip {stored.trip_id}")
    return ReservationCreatedResponse(reservation=stored)
