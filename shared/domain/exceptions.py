"""
Reservation error taxonomy

Every rule violation of the reservation authority is one of these. They are
recoverable by the caller: the operation that raised leaves state unchanged
and the API layer renders ``code`` and ``message`` to the client.
"""


class ReservationError(Exception):
    """Base class for domain rule violations"""

    code = 'reservation_error'
    default_message = 'The request violates a reservation rule.'

    def __init__(self, message: str | None = None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {'code': self.code, 'message': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class InvalidDateRange(ReservationError):
    code = 'invalid_date_range'
    default_message = 'Check-out must be after check-in and check-in cannot be in the past.'


class CapacityExceeded(ReservationError):
    code = 'capacity_exceeded'
    default_message = 'The number of guests exceeds the capacity of the selection.'


class Overlap(ReservationError):
    """The target is already taken (or under maintenance) for part of the period"""
    code = 'overlap'
    default_message = 'The selected dates are not available.'


class InvalidTransition(ReservationError):
    code = 'invalid_transition'
    default_message = 'This status change is not allowed.'


class InvalidRate(ReservationError):
    code = 'invalid_rate'
    default_message = 'Commission rate must be between 0 and 100.'


class InvalidSelection(ReservationError):
    """A room and a room-type tier were both selected, or they belong elsewhere"""
    code = 'invalid_selection'
    default_message = 'Select either a room or a room type, not both.'


class NotFound(ReservationError):
    code = 'not_found'
    default_message = 'The requested object does not exist.'
