"""Domain records for trips and their reservations."""

from datetime import date
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel


# Decimals are kept exact in memory and rendered as JSON numbers on the wire
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used="json"),
]


class CamelModel(BaseModel):
    """Base model exposing camelCase field names in JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Trip(CamelModel):
    """A bookable listing with an availability window and a daily price."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "t1",
                "name": "Hotel Maravista",
                "location": "Ilhabela, Brazil",
                "locationDescription": "Seaside town on the north coast",
                "description": "Rooms facing the channel with breakfast included",
                "coverImage": "https://example.com/maravista.jpg",
                "imagesUrl": ["https://example.com/maravista-1.jpg"],
                "highlights": ["Breakfast included", "Pool"],
                "startDate": "2024-01-01",
                "endDate": "2024-01-31",
                "pricePerDay": 100,
                "maxGuests": 4,
                "recommended": True
            }
        }
    )

    id: str = Field(..., min_length=1, description="Trip identifier")
    name: str = Field(..., description="Listing name")
    location: str = Field(default="", description="City, region or country")
    location_description: str = Field(default="", description="Free text about the area")
    description: str = Field(default="", description="Free text about the listing")
    cover_image: Optional[str] = Field(default=None, description="Cover image URL")
    images_url: List[str] = Field(default_factory=list, description="Gallery image URLs")
    highlights: List[str] = Field(default_factory=list, description="Short selling points")
    start_date: date = Field(..., description="First bookable day")
    end_date: date = Field(..., description="Last bookable day")
    price_per_day: Money = Field(..., ge=0, description="Price of one night")
    max_guests: int = Field(default=1, ge=1, description="Maximum number of guests")
    recommended: bool = Field(default=False, description="Featured on the home page")

    @model_validator(mode="after")
    def check_availability_window(self) -> "Trip":
        if self.end_date < self.start_date:
            raise ValueError("Trip endDate must not be before startDate")
        return self


class Reservation(CamelModel):
    """A booked date interval against a trip."""

    id: str = Field(..., min_length=1, description="Reservation identifier")
    trip_id: str = Field(..., min_length=1, description="Reserved trip")
    user_id: Optional[str] = Field(default=None, description="Guest account, if known")
    start_date: date = Field(..., description="Check-in date")
    end_date: date = Field(..., description="Check-out date")
    guests: int = Field(default=1, ge=1, description="Number of guests")
    total_paid: Money = Field(default=Decimal("0"), ge=0, description="Amount charged")
