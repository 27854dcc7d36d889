class SchedulingError(Exception):
    """Base for every typed failure the scheduling core returns to a caller."""

    code = "scheduling_error"
    status_code = 400
    retryable = False

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.detail, "retryable": self.retryable}


class ValidationError(SchedulingError):
    code = "validation_error"
    status_code = 422


class InvalidDateError(SchedulingError):
    code = "invalid_date"
    status_code = 422


class ConflictError(SchedulingError):
    code = "conflict"
    status_code = 409


class NotFoundError(SchedulingError):
    code = "not_found"
    status_code = 404


class ForbiddenError(SchedulingError):
    code = "access_denied"
    status_code = 403


class TransientStoreError(SchedulingError):
    """The store was unreachable or timed out. Safe to retry."""

    code = "transient_store_error"
    status_code = 503
    retryable = True
