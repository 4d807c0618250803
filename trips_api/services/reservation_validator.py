"""
Reservation check: availability validation and pricing for a proposed stay.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from trips_api.core.config import OverlapMode
from trips_api.core.error_handler import ErrorCode
from trips_api.models.domain import Trip
from trips_api.services.trip_store import TripStore


class ValidationResult(BaseModel):
    """Outcome of a reservation check: a priced trip or an error code."""

    model_config = ConfigDict(frozen=True)

    trip: Optional[Trip] = None
    total_price: Optional[Decimal] = None
    error: Optional[ErrorCode] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, trip: Trip, total_price: Decimal) -> "ValidationResult":
        return cls(trip=trip, total_price=total_price)

    @classmethod
    def failure(cls, error: ErrorCode) -> "ValidationResult":
        return cls(error=error)


def calculate_total_price(trip: Trip, start_date: date, end_date: date) -> Decimal:
    """Whole days between the two dates multiplied by the trip's daily price."""
    nights = (end_date - start_date).days
    return nights * trip.price_per_day


class ReservationValidator:
    """
    Checks a proposed stay against a trip and its existing reservations.

    The check only reads from the store. Business failures are returned as
    ValidationResult values; storage exceptions propagate to the caller.
    """

    def __init__(self, store: TripStore, overlap_mode: OverlapMode = OverlapMode.CONTAINMENT):
        """
        Initialize the validator.

        Args:
            store: Storage collaborator providing trips and reservations
            overlap_mode: CONTAINMENT flags only stays that fall entirely inside
                an existing reservation; INTERSECTION flags any shared night
        """
        self.store = store
        self.overlap_mode = OverlapMode(overlap_mode)
        self.logger = logging.getLogger(__name__)

    async def validate(self, trip_id: str, start_date: date, end_date: date) -> ValidationResult:
        """
        Validate and price a stay.

        Args:
            trip_id: Trip to book
            start_date: Proposed check-in date
            end_date: Proposed check-out date

        Returns:
            ValidationResult with the trip and total price, or with one of
            TRIP_NOT_FOUND, INVALID_END_DATE or TRIP_ALREADY_RESERVED
        """
        trip = await self.store.get_trip(trip_id)
        if trip is None:
            self.logger.info(f"Reservation check for unknown trip {trip_id}")
            return ValidationResult.failure(ErrorCode.TRIP_NOT_FOUND)

        if start_date < trip.start_date:
            self.logger.info(
                f"Reservation check for trip {trip_id} starts {start_date}, "
                f"before availability opens on {trip.start_date}"
            )
            return ValidationResult.failure(ErrorCode.INVALID_END_DATE)

        if self.overlap_mode == OverlapMode.INTERSECTION:
            conflicts = await self.store.find_overlapping_reservations(trip_id, start_date, end_date)
        else:
            conflicts = await self.store.find_containing_reservations(trip_id, start_date, end_date)

        if conflicts:
            self.logger.info(
                f"Reservation check for trip {trip_id} ({start_date} to {end_date}) "
                f"conflicts with {len(conflicts)} reservation(s)"
            )
            return ValidationResult.failure(ErrorCode.TRIP_ALREADY_RESERVED)

        total_price = calculate_total_price(trip, start_date, end_date)
        self.logger.info(
            f"Reservation check for trip {trip_id} ({start_date} to {end_date}) ok, total {total_price}"
        )
        return ValidationResult.success(trip, total_price)
