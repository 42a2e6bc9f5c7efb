"""
Standardized error handling for the journey service.

This module holds the domain exceptions raised by the journey engine and the
helpers that convert them into safe FastAPI HTTP errors. Internal details
(database errors, timeouts, connection strings) are logged with loguru and
never exposed to API clients.

Error Taxonomy:
    - RecordStoreError: a read against the record store failed or timed out.
      Aborts the whole aggregation; there are no partial results.
    - NothingToExportError: export was requested for an empty journey list.
    - Empty results are not errors and are returned as normal responses.

Example:
    ```python
    from common.exceptions import RecordStoreError, handle_external_service_error

    try:
        result = await aggregator.run_query(query)
    except RecordStoreError as e:
        raise handle_external_service_error("fetching journeys", "record store", e)
    ```
"""

from fastapi import HTTPException
from loguru import logger

# HTTP Status Code Constants
HTTP_400_BAD_REQUEST = 400
HTTP_404_NOT_FOUND = 404
HTTP_409_CONFLICT = 409
HTTP_422_UNPROCESSABLE_ENTITY = 422
HTTP_500_INTERNAL_SERVER_ERROR = 500
HTTP_503_SERVICE_UNAVAILABLE = 503


class RecordStoreError(Exception):
    """
    A query against the record store failed.

    Raised by every record store client for network failures, permission
    errors, malformed filters and timeouts alike. The original exception is
    kept on ``internal_error`` (and chained with ``raise ... from``) for
    logging but must not be shown to clients.

    Attributes:
        operation (str): Description of the query that failed, e.g.
            "loading events for visitor v-1".
        internal_error (Exception | None): The underlying exception.
    """

    def __init__(self, operation: str, internal_error: Exception | None = None) -> None:
        self.operation = operation
        self.internal_error = internal_error
        detail = f": {internal_error}" if internal_error else ""
        super().__init__(f"Record store query failed while {operation}{detail}")


class NothingToExportError(Exception):
    """Export was requested for an empty journey list; nothing was written."""

    def __init__(self, message: str = "No journeys to export") -> None:
        self.message = message
        super().__init__(message)


def create_api_error(
    operation: str,
    status_code: int = 500,
    internal_error: Exception | None = None,
    user_message: str | None = None,
) -> HTTPException:
    """
    Create a standardized API error response with a safe error message.

    Args:
        operation: Description of the operation that failed (e.g., "fetching journeys").
            Used for logging context.
        status_code: HTTP status code to return. Defaults to 500.
        internal_error: Optional original exception. Logged with its stack trace,
            never included in the response.
        user_message: Optional custom user-friendly message. If None, a generic
            message appropriate for the status code is used.

    Returns:
        HTTPException ready to be raised from a route handler.
    """
    # Log the full error internally for debugging
    if internal_error:
        logger.exception(f"API error in {operation}: {internal_error}")

    # Determine user-facing message
    if user_message:
        message = user_message
    elif status_code == HTTP_400_BAD_REQUEST:
        message = "Invalid request. Please check your input and try again."
    elif status_code == HTTP_404_NOT_FOUND:
        message = "Resource not found."
    elif status_code == HTTP_409_CONFLICT:
        message = "Request was superseded by a newer request."
    elif status_code == HTTP_422_UNPROCESSABLE_ENTITY:
        message = "Validation error. Please check your request parameters."
    elif status_code == HTTP_503_SERVICE_UNAVAILABLE:
        message = "Service temporarily unavailable. Please try again later."
    else:
        message = (
            "An error occurred while processing your request. Please try again later."
        )

    return HTTPException(status_code=status_code, detail=message)


def handle_external_service_error(
    operation: str, service_name: str, error: Exception
) -> HTTPException:
    """
    Handle errors from the record store or other external services.

    Returns a 503 Service Unavailable error and logs the full error.

    Args:
        operation: Description of the operation that failed (e.g., "fetching journeys").
        service_name: Name of the external service that failed (e.g., "record store").
            Included in the user-facing message.
        error: The exception that occurred.

    Returns:
        HTTPException with status code 503.

    Example:
        ```python
        try:
            result = await aggregator.run_query(query)
        except RecordStoreError as e:
            raise handle_external_service_error("fetching journeys", "record store", e)
        ```
    """
    logger.error(
        f"External service error in {operation} ({service_name}): {error}"
    )
    return create_api_error(
        operation=operation,
        status_code=HTTP_503_SERVICE_UNAVAILABLE,
        internal_error=error,
        user_message=f"Unable to connect to {service_name}. Please try again later.",
    )
