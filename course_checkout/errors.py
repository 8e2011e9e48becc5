class CheckoutError(Exception):
    """Base class for failures surfaced to API callers.

    ``message`` is the only text that reaches the client. Whatever is passed
    to the constructor is kept for server-side logs.
    """

    status_code = 500
    message = "Server error"

    def __init__(self, detail=None, message=None):
        super().__init__(detail or message or self.message)
        self.detail = detail
        if message is not None:
            self.message = message


class ValidationError(CheckoutError):
    status_code = 400
    message = "Invalid request"


class SignatureMismatch(CheckoutError):
    status_code = 400
    message = "Invalid signature"


class MetadataMissing(CheckoutError):
    message = "Missing metadata"


class CourseNotFound(CheckoutError):
    message = "Course not found"


class UpstreamError(CheckoutError):
    message = "Unable to reach payment gateway"


class UpstreamTimeout(UpstreamError):
    message = "Payment gateway timed out"


class GrantStoreError(CheckoutError):
    message = "Could not grant access"


class ConfigurationError(CheckoutError):
    message = "Payment verification is not configured"
