"""Error taxonomy for the claim engine.

Every error carries the ``operation`` that failed and, where one applies, the
``claim_id``, so callers can decide between retrying and reporting.
"""


class FactStreamError(Exception):
    status_code = 500

    def __init__(self, message, operation=None, claim_id=None):
        self.message = message
        self.operation = operation
        self.claim_id = claim_id
        super().__init__(message)

    def to_dict(self):
        payload = {'error': self.message, 'type': type(self).__name__}
        if self.operation:
            payload['operation'] = self.operation
        if self.claim_id:
            payload['claim_id'] = self.claim_id
        return payload


class ValidationError(FactStreamError, ValueError):
    """Input rejected before anything was persisted."""
    status_code = 400


class InvalidTransitionError(ValidationError):
    """A verification status change outside the allowed edges."""

    def __init__(self, from_status, to_status, operation=None, claim_id=None):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Illegal verification transition {from_status} -> {to_status}",
            operation=operation,
            claim_id=claim_id,
        )


class NotFoundError(FactStreamError, LookupError):
    status_code = 404


class ConflictError(FactStreamError):
    """A conditional write lost a race and could not be retried to completion."""
    status_code = 409


class OracleUnavailableError(FactStreamError):
    """The verification oracle could not produce a verdict. Nothing was persisted."""
    status_code = 503
