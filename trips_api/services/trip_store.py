"""
Trip store: the storage collaborator behind the booking endpoints.

TripStore is the abstract interface the reservation validator and the HTTP
layer depend on. InMemoryTripStore is the bundled implementation; it keeps
trips and reservations in dictionaries guarded by a single asyncio.Lock.
"""

import asyncio
import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Union

from trips_api.models.domain import Reservation, Trip


class ReservationConflictError(Exception):
    """Raised when a new reservation intersects a stored one."""

    def __init__(self, trip_id: str, conflicting: List[Reservation]):
        self.trip_id = trip_id
        self.conflicting = conflicting
        ids = ", ".join(r.id for r in conflicting)
        super().__init__(f"Reservation for trip {trip_id} conflicts with: {ids}")


def contains(outer_start: date, outer_end: date, start: date, end: date) -> bool:
    """True when [start, end] lies entirely inside [outer_start, outer_end]."""
    return outer_start <= start and outer_end >= end


def intersects(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """True when two stays share at least one night; touching ranges do not."""
    return a_start < b_end and a_end > b_start


class TripStore(ABC):
    """Async read/write access to trips and reservations."""

    @abstractmethod
    async def get_trip(self, trip_id: str) -> Optional[Trip]:
        """Return the trip with this id, or None."""

    @abstractmethod
    async def find_containing_reservations(
        self, trip_id: str, start_date: date, end_date: date
    ) -> List[Reservation]:
        """Reservations of the trip whose range fully contains [start_date, end_date]."""

    @abstractmethod
    async def find_overlapping_reservations(
        self, trip_id: str, start_date: date, end_date: date
    ) -> List[Reservation]:
        """Reservations of the trip sharing at least one night with [start_date, end_date]."""

    @abstractmethod
    async def search_trips(
        self,
        text: Optional[str] = None,
        start_date: Optional[date] = None,
        budget: Optional[Decimal] = None,
    ) -> List[Trip]:
        """Trips matching the free text, starting on or after start_date and within budget."""

    @abstractmethod
    async def add_trip(self, trip: Trip) -> Trip:
        """Insert or replace a trip."""

    @abstractmethod
    async def create_reservation(self, reservation: Reservation) -> Reservation:
        """
        Persist a reservation if no stored reservation of the same trip intersects it.

        The overlap check and the insert happen atomically.

        Raises:
            ReservationConflictError: if the range intersects a stored reservation
        """

    @abstractmethod
    def get_stats(self) -> Dict[str, int]:
        """Counts of stored trips and reservations, reported by /health."""


class InMemoryTripStore(TripStore):
    """
    Process-local TripStore.

    All reads and writes take the same lock, so create_reservation cannot
    interleave with another write for the same trip.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._trips: Dict[str, Trip] = {}
        self._reservations: Dict[str, List[Reservation]] = {}
        self._lock = asyncio.Lock()

    async def get_trip(self, trip_id: str) -> Optional[Trip]:
        async with self._lock:
            return self._trips.get(trip_id)

    async def find_containing_reservations(
        self, trip_id: str, start_date: date, end_date: date
    ) -> List[Reservation]:
        async with self._lock:
            return [
                r for r in self._reservations.get(trip_id, [])
                if contains(r.start_date, r.end_date, start_date, end_date)
            ]

    async def find_overlapping_reservations(
        self, trip_id: str, start_date: date, end_date: date
    ) -> List[Reservation]:
        async with self._lock:
            return self._overlapping(trip_id, start_date, end_date)

    async def search_trips(
        self,
        text: Optional[str] = None,
        start_date: Optional[date] = None,
        budget: Optional[Decimal] = None,
    ) -> List[Trip]:
        needle = (text or "").strip().lower()

        async with self._lock:
            trips = list(self._trips.values())

        results = []
        for trip in trips:
            if needle and not any(
                needle in field.lower()
                for field in (trip.name, trip.location, trip.description)
            ):
                continue
            if start_date is not None and trip.start_date < start_date:
                continue
            if budget is not None and trip.price_per_day > budget:
                continue
            results.append(trip)

        self.logger.debug(f"Trip search text={needle!r} start_date={start_date} budget={budget}: {len(results)} hits")
        return results

    async def add_trip(self, trip: Trip) -> Trip:
        async with self._lock:
            self._trips[trip.id] = trip
        return trip

    async def create_reservation(self, reservation: Reservation) -> Reservation:
        async with self._lock:
            conflicting = self._overlapping(
                reservation.trip_id, reservation.start_date, reservation.end_date
            )
            if conflicting:
                raise ReservationConflictError(reservation.trip_id, conflicting)

            self._reservations.setdefault(reservation.trip_id, []).append(reservation)

        self.logger.info(
            f"Stored reservation {reservation.id} for trip {reservation.trip_id} "
            f"({reservation.start_date} to {reservation.end_date})"
        )
        return reservation

    def _overlapping(self, trip_id: str, start_date: date, end_date: date) -> List[Reservation]:
        # Caller must hold self._lock
        return [
            r for r in self._reservations.get(trip_id, [])
            if intersects(r.start_date, r.end_date, start_date, end_date)
        ]

    def get_stats(self) -> Dict[str, int]:
        """Counts of stored trips and reservations."""
        return {
            'trips': len(self._trips),
            'reservations': sum(len(rs) for rs in self._reservations.values()),
        }


def new_reservation_id() -> str:
    """Generate an identifier for a reservation."""
    return uuid.uuid4().hex


async def load_seed_file(store: TripStore, path: Union[str, Path]) -> Dict[str, int]:
    """
    Load trips and reservations from a JSON file into a store.

    The file holds {"trips": [...], "reservations": [...]} using the same
    camelCase field names as the API. Reservations are inserted through
    create_reservation, so overlapping seed entries are rejected.

    Returns:
        Number of trips and reservations loaded
    """
    logger = logging.getLogger(__name__)
    payload = json.loads(Path(path).read_text(encoding="utf-8"))

    trips = [Trip.model_validate(item) for item in payload.get("trips", [])]
    reservations = [Reservation.model_validate(item) for item in payload.get("reservations", [])]

    for trip in trips:
        await store.add_trip(trip)

    for reservation in reservations:
        if await store.get_trip(reservation.trip_id) is None:
            raise ValueError(f"Seed reservation {reservation.id} references unknown trip {reservation.trip_id}")
        await store.create_reservation(reservation)

    logger.info(f"Loaded {len(trips)} trips and {len(reservations)} reservations from {path}")
    return {'trips': len(trips), 'reservations': len(reservations)}
