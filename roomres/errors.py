"""
Error taxonomy for the reservation core.

Every rejected operation carries a machine-readable ``kind`` and a
human message. Routes turn these into ``{'error': ..., 'kind': ...}``
responses with the matching HTTP status.
"""


class ReservationError(Exception):
    kind = 'error'
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class ValidationError(ReservationError):
    kind = 'validation_error'
    status_code = 400


class SlotExpired(ReservationError):
    kind = 'slot_expired'
    status_code = 400


class DailyLimitExceeded(ReservationError):
    kind = 'daily_limit_exceeded'
    status_code = 400


class SlotUnavailable(ReservationError):
    kind = 'slot_unavailable'
    status_code = 409

    def __init__(self, message, reason=None):
        super().__init__(message)
        self.reason = reason

    def to_dict(self):
        data = super().to_dict()
        if self.reason:
            data['reason'] = self.reason
        return data


class NotFound(ReservationError):
    kind = 'not_found'
    status_code = 404


class Conflict(ReservationError):
    kind = 'conflict'
    status_code = 409


class StorageError(ReservationError):
    """Transient store failure; the caller may retry."""
    kind = 'storage_error'
    status_code = 503


class CompensationFailure(Exception):
    """Raised internally when undoing a partial write fails. Logged, never returned."""
