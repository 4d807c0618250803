"""
Test fixtures with sample trips and reservations.
Provides realistic test data for the reservation and search scenarios.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Dict, List, Any, Optional

from trips_api.models.domain import Reservation, Trip
from trips_api.services.trip_store import InMemoryTripStore


class TripFixtures:
    """Sample trips covering the search and pricing scenarios."""

    # Availability 2024-01-01 to 2024-01-31 at 100 per night
    JANUARY_HOTEL = Trip(
        id="t1",
        name="Hotel Maravista",
        location="Ilhabela, Brazil",
        location_description="Seaside town on the north coast",
        description="Rooms facing the channel with breakfast included",
        cover_image="https://example.com/maravista.jpg",
        images_url=["https://example.com/maravista-1.jpg", "https://example.com/maravista-2.jpg"],
        highlights=["Breakfast included", "Pool"],
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
        price_per_day=Decimal("100"),
        max_guests=4,
        recommended=True,
    )

    FARM_STAY = Trip(
        id="t2",
        name="Fazenda Boa Vista",
        location="Minas Gerais, Brazil",
        description="Working farm with horse riding and cheese tasting",
        start_date=date(2024, 3, 1),
        end_date=date(2024, 6, 30),
        price_per_day=Decimal("250.50"),
        max_guests=8,
    )

    MOUNTAIN_CHALET = Trip(
        id="t3",
        name="Chalet Serra Azul",
        location="Campos do Jordao, Brazil",
        description="Wooden chalet with fireplace",
        start_date=date(2024, 6, 1),
        end_date=date(2024, 8, 31),
        price_per_day=Decimal("480"),
        max_guests=2,
    )

    ALL = [JANUARY_HOTEL, FARM_STAY, MOUNTAIN_CHALET]


class ReservationFixtures:
    """Sample reservations against the fixture trips."""

    # Covers 2024-01-05 to 2024-01-20 on t1
    MID_JANUARY = Reservation(
        id="r1",
        trip_id="t1",
        user_id="u1",
        start_date=date(2024, 1, 5),
        end_date=date(2024, 1, 20),
        guests=2,
        total_paid=Decimal("1500"),
    )

    FARM_APRIL = Reservation(
        id="r2",
        trip_id="t2",
        start_date=date(2024, 4, 10),
        end_date=date(2024, 4, 15),
        guests=5,
        total_paid=Decimal("1252.50"),
    )


class TestDataGenerator:
    """Utility class for generating stores and request payloads."""

    @staticmethod
    def build_store(
        trips: Optional[List[Trip]] = None,
        reservations: Optional[List[Reservation]] = None
    ) -> InMemoryTripStore:
        """Create an in-memory store holding the given records (sync tests only)."""
        store = InMemoryTripStore()

        async def _populate():
            for trip in trips or []:
                await store.add_trip(trip)
            for reservation in reservations or []:
                await store.create_reservation(reservation)

        asyncio.run(_populate())
        return store

    @staticmethod
    def check_payload(trip_id: str, start: str, end: str, **extra: Any) -> Dict[str, Any]:
        """JSON body for the reservation check endpoint."""
        payload = {"tripId": trip_id, "startDate": start, "endDate": end}
        payload.update(extra)
        return payload

    @staticmethod
    def seed_document() -> Dict[str, Any]:
        """Seed file contents holding every fixture trip and reservation."""
        return {
            "trips": [trip.model_dump(mode="json", by_alias=True) for trip in TripFixtures.ALL],
            "reservations": [
                ReservationFixtures.MID_JANUARY.model_dump(mode="json", by_alias=True),
                ReservationFixtures.FARM_APRIL.model_dump(mode="json", by_alias=True),
            ],
        }
