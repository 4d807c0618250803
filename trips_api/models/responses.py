"""Response models for the Trip Booking API."""

from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict

from .domain import CamelModel, Money, Reservation, Trip


class ReservationCheckResponse(CamelModel):
    """Response model for a successful reservation check."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "trip": Trip.model_config["json_schema_extra"]["example"],
                "totalPrice": 500
            }
        }
    )

    success: bool = Field(default=True, description="Always true on success")
    trip: Trip = Field(..., description="Snapshot of the checked trip")
    total_price: Money = Field(..., description="Nights multiplied by the daily price")


class ReservationCreatedResponse(CamelModel):
    """Response model for a persisted reservation."""

    success: bool = Field(default=True, description="Always true on success")
    reservation: Reservation = Field(..., description="The stored reservation")


class ErrorDetail(BaseModel):
    """Error code, message and time of a failed request."""

    code: str = Field(..., description="Error code or type")
    message: str = Field(..., description="Human-readable error message")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Error timestamp"
    )


class ErrorResponse(BaseModel):
    """Error response model for consistent error handling."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "TRIP_ALREADY_RESERVED",
                    "message": "The requested dates are already reserved",
                    "timestamp": "2024-01-15T10:30:00Z"
                }
            }
        }
    )

    error: ErrorDetail
