from fastapi import HTTPException, status


class BookingError(HTTPException):
    """Base class for domain errors returned to the caller as-is."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "BookingError"

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class NotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "NotFound"


class InvalidArgument(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "InvalidArgument"


class Conflict(BookingError):
    status_code = status.HTTP_409_CONFLICT
    kind = "Conflict"


class InvalidState(BookingError):
    status_code = status.HTTP_409_CONFLICT
    kind = "InvalidState"


class Forbidden(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "Forbidden"
