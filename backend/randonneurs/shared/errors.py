"""
Domain errors.

Every error carries a stable `code` and a `message` that is safe to show
to riders. Submission paths convert these into `ActionResult` failures;
API routes map them to HTTP status codes.
"""


class DomainError(Exception):
    """Base domain error."""

    code = "domain_error"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidDistance(DomainError):
    """Non-positive or unparseable distance."""

    code = "invalid_distance"
    default_message = "Distance must be a positive number of kilometres"


class NotFound(DomainError):
    """Unknown token, event, chapter or route."""

    code = "not_found"
    default_message = "Result not found or invalid token"


class InvalidStatus(DomainError):
    code = "invalid_status"
    default_message = "Invalid status"


class InvalidFinishTimeFormat(DomainError):
    code = "invalid_finish_time_format"
    default_message = "Invalid finish time format. Use HH:MM (e.g., 13:30 or 105:45)"


class AlreadySubmittedToACP(DomainError):
    """Mutation attempted after the event's results went to ACP."""

    code = "already_submitted_to_acp"
    default_message = (
        "Results have already been submitted to ACP. "
        "Contact your chapter VP for changes."
    )


class UploadRejected(DomainError):
    """Bad MIME type, size, or unreadable file."""

    code = "upload_rejected"
    default_message = "File rejected"


class InvalidTransition(DomainError):
    code = "invalid_transition"
    default_message = "Event status change not allowed"


class LifecycleCheckInProgress(DomainError):
    code = "lifecycle_check_in_progress"
    default_message = "A lifecycle check is already running"


class EmailDeliveryError(DomainError):
    code = "email_delivery_failed"
    default_message = "Failed to send email"


class PartialBatchFailure(DomainError):
    """Aggregate, non-fatal failure of some items in a batch."""

    code = "partial_batch_failure"

    def __init__(self, errors: list[str], message: str | None = None):
        self.errors = list(errors)
        super().__init__(message or f"{len(self.errors)} item(s) failed")


class InvalidEventData(DomainError):
    """Stored event row that cannot be scheduled (bad distance, start time)."""

    code = "invalid_event_data"
    default_message = "Event data is invalid"


class ResultSaveFailed(DomainError):
    """The store refused a rider's change; nothing was saved."""

    code = "result_save_failed"
    default_message = "Failed to submit result"
