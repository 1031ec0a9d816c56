"""
Engine Errors

Every recoverable failure of the booking and revenue engine is one of the
classes below. Each carries a machine readable ``code``, a human readable
``message`` and the HTTP status the API layer answers with.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for all typed engine failures"""

    kind = 'engine_error'
    default_code = 'engine_error'
    default_message = 'Request could not be completed.'
    status_code = 400

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {'error': self.kind, 'code': self.code, 'message': self.message}


class ValidationError(EngineError):
    """Malformed input: bad date range, missing guest fields"""

    kind = 'validation_error'
    default_code = 'invalid'
    default_message = 'Invalid input.'
    status_code = 400


class NotFoundError(EngineError):
    """Unknown hotel, room type, room, booking, session or coupon"""

    kind = 'not_found'
    default_code = 'not_found'
    default_message = 'Resource not found.'
    status_code = 404


class InvalidStateError(EngineError):
    """Lifecycle transition attempted from a disallowed state"""

    kind = 'invalid_state'
    default_code = 'invalid_state'
    default_message = 'Operation not allowed in the current state.'
    status_code = 409


class CapacityError(EngineError):
    """No inventory left for the requested room type and dates"""

    kind = 'capacity'
    default_code = 'no_availability'
    default_message = 'No rooms available for the selected dates.'
    status_code = 409


class CouponError(EngineError):
    """A coupon failed validation; ``code`` is the rejection reason"""

    kind = 'coupon_error'
    default_code = 'INVALID_CODE'
    status_code = 400

    MESSAGES = {
        'INVALID_CODE': 'Invalid coupon code.',
        'EXPIRED_OR_NOT_YET_VALID': 'Coupon is expired or not yet valid.',
        'WRONG_HOTEL': 'Coupon is not valid for this hotel.',
        'LIMIT_REACHED': 'Coupon usage limit reached.',
        'BELOW_MINIMUM': 'Booking amount is below the coupon minimum.',
        'ALREADY_USED': 'You have already used this coupon.',
    }

    def __init__(self, reason: str, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or self.MESSAGES.get(reason, 'Invalid coupon.'), code=reason)


class SessionExpiredError(EngineError):
    kind = 'session_expired'
    default_code = 'session_expired'
    default_message = 'Payment session has expired.'
    status_code = 410


class AlreadyVerifiedError(EngineError):
    kind = 'already_verified'
    default_code = 'already_verified'
    default_message = 'Payment has already been verified.'
    status_code = 409


class PermissionDeniedError(EngineError):
    """Caller's role does not allow the operation on this hotel or booking"""

    kind = 'permission_denied'
    default_code = 'forbidden'
    default_message = 'You do not have permission to perform this action.'
    status_code = 403
