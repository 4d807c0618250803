"""
Unit tests for the in-memory trip store and seed loading.
"""

import asyncio
import json
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from pydantic import ValidationError

from trips_api.models.domain import Reservation
from trips_api.services.trip_store import (
    InMemoryTripStore,
    ReservationConflictError,
    contains,
    intersects,
    load_seed_file,
    new_reservation_id,
)
from tests.fixtures import ReservationFixtures, TripFixtures, TestDataGenerator


@pytest_asyncio.fixture
async def store():
    """Store holding every fixture trip and reservation."""
    store = InMemoryTripStore()
    for trip in TripFixtures.ALL:
        await store.add_trip(trip)
    await store.create_reservation(ReservationFixtures.MID_JANUARY)
    await store.create_reservation(ReservationFixtures.FARM_APRIL)
    return store


def _reservation(trip_id: str, start: date, end: date, reservation_id: str = None) -> Reservation:
    return Reservation(
        id=reservation_id or new_reservation_id(),
        trip_id=trip_id,
        start_date=start,
        end_date=end,
        guests=1,
    )


class TestRangeHelpers:
    """Test cases for the containment and intersection predicates."""

    def test_contains(self):
        assert contains(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 10), date(2024, 1, 15))
        assert contains(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 5), date(2024, 1, 20))
        assert not contains(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 4), date(2024, 1, 15))
        assert not contains(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 10), date(2024, 1, 21))

    def test_intersects(self):
        assert intersects(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 2), date(2024, 1, 8))
        assert intersects(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 19), date(2024, 1, 25))
        assert intersects(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 1), date(2024, 1, 31))
        assert not intersects(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 20), date(2024, 1, 25))
        assert not intersects(date(2024, 1, 5), date(2024, 1, 20), date(2024, 1, 1), date(2024, 1, 5))


class TestReservationQueries:
    """Test cases for trip lookup and reservation range queries."""

    @pytest.mark.asyncio
    async def test_get_trip(self, store):
        assert await store.get_trip("t1") == TripFixtures.JANUARY_HOTEL
        assert await store.get_trip("nope") is None

    @pytest.mark.asyncio
    async def test_find_containing_reservations(self, store):
        found = await store.find_containing_reservations("t1", date(2024, 1, 10), date(2024, 1, 15))
        assert [r.id for r in found] == ["r1"]

        partial = await store.find_containing_reservations("t1", date(2024, 1, 2), date(2024, 1, 8))
        assert partial == []

    @pytest.mark.asyncio
    async def test_find_overlapping_reservations(self, store):
        found = await store.find_overlapping_reservations("t1", date(2024, 1, 2), date(2024, 1, 8))
        assert [r.id for r in found] == ["r1"]

        other_trip = await store.find_overlapping_reservations("t3", date(2024, 1, 2), date(2024, 1, 8))
        assert other_trip == []


class TestCreateReservation:
    """Test cases for the atomic reservation write."""

    @pytest.mark.asyncio
    async def test_non_overlapping_reservation_is_stored(self, store):
        stored = await store.create_reservation(_reservation("t1", date(2024, 1, 20), date(2024, 1, 25)))

        found = await store.find_overlapping_reservations("t1", date(2024, 1, 21), date(2024, 1, 22))
        assert found == [stored]
        assert store.get_stats() == {'trips': 3, 'reservations': 3}

    @pytest.mark.asyncio
    async def test_partially_overlapping_reservation_is_rejected(self, store):
        with pytest.raises(ReservationConflictError) as exc_info:
            await store.create_reservation(_reservation("t1", date(2024, 1, 2), date(2024, 1, 8)))

        assert exc_info.value.trip_id == "t1"
        assert [r.id for r in exc_info.value.conflicting] == ["r1"]
        assert store.get_stats()['reservations'] == 2

    @pytest.mark.asyncio
    async def test_concurrent_overlapping_writes_admit_only_one(self):
        store = InMemoryTripStore()
        await store.add_trip(TripFixtures.JANUARY_HOTEL)

        attempts = [
            store.create_reservation(_reservation("t1", date(2024, 1, 10), date(2024, 1, 15)))
            for _ in range(5)
        ]
        results = await asyncio.gather(*attempts, return_exceptions=True)

        stored = [r for r in results if isinstance(r, Reservation)]
        rejected = [r for r in results if isinstance(r, ReservationConflictError)]
        assert len(stored) == 1
        assert len(rejected) == 4


class TestSearchTrips:
    """Test cases for trip search filters."""

    @pytest.mark.asyncio
    async def test_no_filters_returns_everything(self, store):
        results = await store.search_trips()
        assert {t.id for t in results} == {"t1", "t2", "t3"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text,expected", [
        ("hotel", {"t1"}),
        ("FAZENDA", {"t2"}),
        ("brazil", {"t1", "t2", "t3"}),
        ("fireplace", {"t3"}),
        ("   ", {"t1", "t2", "t3"}),
        ("igloo", set()),
    ])
    async def test_text_filter(self, store, text, expected):
        results = await store.search_trips(text=text)
        assert {t.id for t in results} == expected

    @pytest.mark.asyncio
    async def test_start_date_filter(self, store):
        results = await store.search_trips(start_date=date(2024, 3, 1))
        assert {t.id for t in results} == {"t2", "t3"}

    @pytest.mark.asyncio
    async def test_budget_filter(self, store):
        results = await store.search_trips(budget=Decimal("250.50"))
        assert {t.id for t in results} == {"t1", "t2"}

    @pytest.mark.asyncio
    async def test_filters_combine(self, store):
        results = await store.search_trips(text="brazil", start_date=date(2024, 2, 1), budget=Decimal("300"))
        assert [t.id for t in results] == ["t2"]


class TestSeedLoading:
    """Test cases for loading a store from a JSON file."""

    @pytest.mark.asyncio
    async def test_load_seed_file(self, tmp_path):
        seed_path = tmp_path / "trips.json"
        seed_path.write_text(json.dumps(TestDataGenerator.seed_document()), encoding="utf-8")
        store = InMemoryTripStore()

        counts = await load_seed_file(store, seed_path)

        assert counts == {'trips': 3, 'reservations': 2}
        trip = await store.get_trip("t2")
        assert trip.price_per_day == Decimal("250.50")
        assert await store.find_containing_reservations("t1", date(2024, 1, 10), date(2024, 1, 15))

    @pytest.mark.asyncio
    async def test_seed_reservation_for_unknown_trip_fails(self, tmp_path):
        document = {"trips": [], "reservations": [TestDataGenerator.seed_document()["reservations"][0]]}
        seed_path = tmp_path / "trips.json"
        seed_path.write_text(json.dumps(document), encoding="utf-8")

        with pytest.raises(ValueError, match="unknown trip"):
            await load_seed_file(InMemoryTripStore(), seed_path)

    @pytest.mark.asyncio
    async def test_seed_with_overlapping_reservations_fails(self, tmp_path):
        document = TestDataGenerator.seed_document()
        clash = dict(document["reservations"][0], id="r9", startDate="2024-01-18", endDate="2024-01-22")
        document["reservations"].append(clash)
        seed_path = tmp_path / "trips.json"
        seed_path.write_text(json.dumps(document), encoding="utf-8")

        with pytest.raises(ReservationConflictError):
            await load_seed_file(InMemoryTripStore(), seed_path)

    @pytest.mark.asyncio
    async def test_seed_with_invalid_trip_fails(self, tmp_path):
        seed_path = tmp_path / "trips.json"
        seed_path.write_text(json.dumps({"trips": [{"id": "bad", "name": "No dates"}]}), encoding="utf-8")

        with pytest.raises(ValidationError):
            await load_seed_file(InMemoryTripStore(), seed_path)
