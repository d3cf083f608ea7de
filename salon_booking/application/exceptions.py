class SalonApiError(RuntimeError):
    """Raised when a call to the salon backend does not yield a usable result."""
    pass


class AuthenticationRequiredError(SalonApiError):
    """Raised before any request is sent when no bearer token is available."""
    pass


class ApiTransportError(SalonApiError):
    """Raised when the backend cannot be reached (connection errors, timeouts)."""
    pass


class ApiStatusError(SalonApiError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Backend returned {status_code}" + (f": {detail}" if detail else ""))


class MalformedResponseError(SalonApiError):
    """Raised when a response body is not valid JSON or misses required fields."""
    pass


class BookingIntentMissingError(LookupError):
    """Raised when a wizard is mounted without a stored booking intent."""
    pass


class MalformedBookingIntentError(ValueError):
    """Raised when the stored booking intent cannot be parsed."""
    pass


class WizardTransitionError(ValueError):
    """Raised when a wizard action is not allowed in the current step."""
    pass


class InvalidSelectionError(ValueError):
    """Raised when a date, time or stylist choice is not one the wizard offers."""
    pass


class SubmissionInProgressError(RuntimeError):
    """Raised when a submission is requested while another one is running."""
    pass


class AdminRequiredError(PermissionError):
    """Raised when a non-admin client calls a time slot administration operation."""
    pass
