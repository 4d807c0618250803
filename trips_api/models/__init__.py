# Pydantic models for domain records and request/response validation

from .domain import Trip, Reservation
from .requests import ReservationCheckRequest, ReservationCreateRequest
from .responses import (
    ReservationCheckResponse,
    ReservationCreatedResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "Trip",
    "Reservation",
    "ReservationCheckRequest",
    "ReservationCreateRequest",
    "ReservationCheckResponse",
    "ReservationCreatedResponse",
    "ErrorDetail",
    "ErrorResponse"
]
