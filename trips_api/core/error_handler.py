"""
Centralized error handling for the Trip Booking API.

This module provides error handling with consistent error response formatting,
specific error codes for reservation failures, and contextual logging.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from enum import Enum

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from trips_api.models.responses import ErrorDetail, ErrorResponse


class ErrorCode(str, Enum):
    """Enumeration of error codes for different failure scenarios."""

    # HTTP status code specific errors
    HTTP_400 = "HTTP_400"
    HTTP_404 = "HTTP_404"
    HTTP_405 = "HTTP_405"
    HTTP_500 = "HTTP_500"

    # Reservation errors
    TRIP_NOT_FOUND = "TRIP_NOT_FOUND"
    # Guards the proposed start date; the code name is kept for existing clients
    INVALID_END_DATE = "INVALID_END_DATE"
    TRIP_ALREADY_RESERVED = "TRIP_ALREADY_RESERVED"
    INVALID_GUESTS = "INVALID_GUESTS"

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Server errors (5xx)
    TIMEOUT = "TIMEOUT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ErrorHandler:
    """
    Centralized error handling class with consistent error response formatting.

    Maps error codes to HTTP status codes and default messages, builds
    ErrorResponse bodies and logs every failure with its request context.
    """

    # Error code to HTTP status code mapping
    ERROR_STATUS_MAPPING: Dict[ErrorCode, int] = {
        # HTTP status code specific errors
        ErrorCode.HTTP_400: 400,
        ErrorCode.HTTP_404: 404,
        ErrorCode.HTTP_405: 405,
        ErrorCode.HTTP_500: 500,

        # Reservation errors
        ErrorCode.TRIP_NOT_FOUND: 404,
        ErrorCode.INVALID_END_DATE: 400,
        ErrorCode.TRIP_ALREADY_RESERVED: 409,
        ErrorCode.INVALID_GUESTS: 400,

        # Client errors (4xx)
        ErrorCode.VALIDATION_ERROR: 422,

        # Server errors (5xx)
        ErrorCode.TIMEOUT: 504,
        ErrorCode.INTERNAL_SERVER_ERROR: 500,
    }

    # Error code to default message mapping
    ERROR_MESSAGES: Dict[ErrorCode, str] = {
        ErrorCode.HTTP_400: "Bad Request",
        ErrorCode.HTTP_404: "Not Found",
        ErrorCode.HTTP_405: "Method Not Allowed",
        ErrorCode.HTTP_500: "Internal Server Error",
        ErrorCode.TRIP_NOT_FOUND: "Trip not found",
        ErrorCode.INVALID_END_DATE: "The start date is before the trip is available",
        ErrorCode.TRIP_ALREADY_RESERVED: "The requested dates are already reserved",
        ErrorCode.INVALID_GUESTS: "Number of guests exceeds the trip maximum",
        ErrorCode.VALIDATION_ERROR: "Request validation failed",
        ErrorCode.TIMEOUT: "Storage request timeout exceeded",
        ErrorCode.INTERNAL_SERVER_ERROR: "An unexpected error occurred",
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the ErrorHandler.

        Args:
            logger: Optional logger instance. If not provided, creates a new logger.
        """
        self.logger = logger or logging.getLogger(__name__)

    def status_for(self, error_code: ErrorCode) -> int:
        """HTTP status code for an error code, 500 when unmapped."""
        return self.ERROR_STATUS_MAPPING.get(error_code, 500)

    def create_error_response(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> ErrorResponse:
        """
        Create a standardized error response.

        Args:
            error_code: The error code enum value
            message: Optional custom error message. If not provided, uses default message.
            details: Optional additional error details

        Returns:
            ErrorResponse: Standardized error response object
        """
        final_message = message or self.ERROR_MESSAGES.get(error_code, "Unknown error")

        if details:
            final_message = f"{final_message}. Details: {details}"

        return ErrorResponse(
            error=ErrorDetail(
                code=error_code.value,
                message=final_message,
                timestamp=datetime.now(timezone.utc)
            )
        )

    def log_error(
        self,
        error_code: ErrorCode,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        trip_id: Optional[str] = None,
        additional_context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log error with context information.

        Args:
            error_code: The error code enum value
            message: Error message
            request: Optional FastAPI request object
            exception: Optional exception that caused the error
            trip_id: Optional trip being processed
            additional_context: Optional additional context information
        """
        context = {
            "error_code": error_code.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if request:
            context.update({
                "method": request.method,
                "url": str(request.url),
                "client_ip": getattr(request.client, 'host', 'unknown') if request.client else 'unknown',
                "user_agent": request.headers.get("user-agent", "unknown"),
            })

        if trip_id:
            context["trip_id"] = trip_id

        if additional_context:
            context.update(additional_context)

        log_message = f"{error_code.value}: {message}"

        if exception:
            self.logger.error(
                log_message,
                extra={"context": context},
                exc_info=exception
            )
        else:
            self.logger.error(
                log_message,
                extra={"context": context}
            )

    def create_json_response(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ) -> JSONResponse:
        """
        Create a JSON response for an error.

        Args:
            error_code: The error code enum value
            message: Optional custom error message
            details: Optional additional error details
            status_code: Optional status overriding the error code mapping

        Returns:
            JSONResponse: FastAPI JSON response with appropriate status code
        """
        error_response = self.create_error_response(error_code, message, details)

        return JSONResponse(
            status_code=status_code or self.status_for(error_code),
            content=error_response.model_dump(mode='json')
        )

    def handle_reservation_error(
        self,
        error_code: ErrorCode,
        request: Optional[Request] = None,
        trip_id: Optional[str] = None,
        message: Optional[str] = None
    ) -> JSONResponse:
        """
        Log a rejected reservation and build its JSON response.

        Logged at warning level; log_error is kept for server-side failures.
        """
        final_message = message or self.ERROR_MESSAGES[error_code]
        context = {"trip_id": trip_id, "error_code": error_code.value}
        if request:
            context["url"] = str(request.url)

        self.logger.warning(
            f"{error_code.value}: {final_message}",
            extra={"context": context}
        )
        return self.create_json_response(error_code, final_message)

    def handle_validation_error(
        self,
        error: ValidationError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle Pydantic validation errors.

        Args:
            error: The validation error
            request: Optional FastAPI request object

        Returns:
            JSONResponse: Error response for validation failure
        """
        error_details = error.errors(include_url=False)
        message = f"Validation failed: {error_details}"

        self.log_error(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            request=request,
            additional_context={"validation_errors": error_details}
        )

        return self.create_json_response(ErrorCode.VALIDATION_ERROR, message)


# Global error handler instance
error_handler = ErrorHandler()
