"""Error taxonomy shared by the approval engine and the coordinator reconciler.

Every error carries a stable machine-readable ``kind``, a human readable
message and the HTTP status the JSON views answer with. ``retryable`` marks
transient failures where a caller-driven retry from a fresh read is reasonable.
"""


class WorkflowError(Exception):
    kind = "WorkflowError"
    http_status = 400
    retryable = False
    default_message = "The request could not be completed."

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_dict(self):
        payload = {"ok": False, "error_kind": self.kind, "error": self.message}
        payload.update(self.details)
        if self.retryable:
            payload["retryable"] = True
        return payload


# Authorization failures: deterministic, the caller must change something.

class Unauthenticated(WorkflowError):
    kind = "Unauthenticated"
    http_status = 401
    default_message = "User not authenticated."


class RoleNotPermitted(WorkflowError):
    kind = "RoleNotPermitted"
    http_status = 403
    default_message = "Your role is not permitted to perform this action."


class InvalidState(WorkflowError):
    kind = "InvalidState"
    http_status = 409
    default_message = "This action is not valid for the event's current status."


class NotOwner(WorkflowError):
    kind = "NotOwner"
    http_status = 403
    default_message = "Event does not belong to this coordinator."


class ReasonTooShort(WorkflowError):
    kind = "ReasonTooShort"
    http_status = 400
    default_message = "Cancellation reason is too short."


class RevocationWindowClosed(WorkflowError):
    kind = "RevocationWindowClosed"
    http_status = 409
    default_message = "Approval can only be revoked before the event date."


class UnknownAction(WorkflowError):
    kind = "UnknownAction"
    http_status = 400
    default_message = "Unknown action."


class InvalidRequest(WorkflowError):
    kind = "InvalidRequest"
    http_status = 400
    default_message = "The request payload is not valid."


class InvalidAssignment(WorkflowError):
    kind = "InvalidAssignment"
    http_status = 400
    default_message = "The requested assignment is not valid."


class NotFound(WorkflowError):
    kind = "NotFound"
    http_status = 404
    default_message = "Not found."


# Transient failures.

class ConcurrentModification(WorkflowError):
    kind = "ConcurrentModification"
    http_status = 409
    retryable = True
    default_message = "The event was modified concurrently. Reload it and try again."


class StoreUnavailable(WorkflowError):
    kind = "StoreUnavailable"
    http_status = 503
    retryable = True
    default_message = "The data store is unavailable."


class PartialReconciliationFailure(WorkflowError):
    """Raised when at least one profile mutation failed.

    The whole batch is rolled back, so ``rolled_back`` lists the ids whose
    mutation had succeeded before the rollback and ``failed`` maps each failed
    id to its cause. Re-invoking with the same desired set is safe.
    """

    kind = "PartialReconciliationFailure"
    http_status = 500
    retryable = True
    default_message = "Some coordinator assignments could not be applied."

    def __init__(self, message=None, *, failed, rolled_back):
        super().__init__(
            message,
            failed={str(pid): cause for pid, cause in failed.items()},
            rolled_back=sorted(rolled_back),
        )
        self.failed = failed
        self.rolled_back = rolled_back


class ReportUnavailable(WorkflowError):
    kind = "ReportUnavailable"
    http_status = 502
    retryable = True
    default_message = "The report service is unavailable."
