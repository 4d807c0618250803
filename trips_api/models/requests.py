"""Request models for the Trip Booking API."""

from datetime import date
from typing import Optional

from pydantic import Field, ConfigDict, model_validator

from .domain import CamelModel


class ReservationCheckRequest(CamelModel):
    """Request model for the reservation check endpoint."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tripId": "t1",
                "startDate": "2024-01-10",
                "endDate": "2024-01-15"
            }
        }
    )

    trip_id: str = Field(..., min_length=1, description="Trip to check")
    start_date: date = Field(..., description="Proposed check-in date")
    end_date: date = Field(..., description="Proposed check-out date")
    guests: Optional[int] = Field(default=None, description="Number of guests (not checked)")

    @model_validator(mode="after")
    def check_date_order(self) -> "ReservationCheckRequest":
        if self.end_date <= self.start_date:
            raise ValueError("endDate must be after startDate")
        return self


class ReservationCreateRequest(ReservationCheckRequest):
    """Request model for the reservation creation endpoint."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tripId": "t1",
                "startDate": "2024-01-10",
                "endDate": "2024-01-15",
                "guests": 2,
                "userId": "u42"
            }
        }
    )

    guests: int = Field(..., ge=1, description="Number of guests")
    user_id: Optional[str] = Field(default=None, description="Guest account, if known")
