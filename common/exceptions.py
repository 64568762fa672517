"""Domain error taxonomy shared by the cart, coupon and order services.

Views translate these into HTTP responses: validation problems become 400s,
missing entities 404s and lost races 409s.
"""


class DomainError(Exception):
    """Base class for all storefront domain errors."""

    default_detail = "Request could not be processed."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(DomainError):
    """Missing or malformed input.

    `errors` maps offending field names to messages so callers can point at
    the exact field.
    """

    default_detail = "Invalid input."

    def __init__(self, detail: str | None = None, errors: dict | None = None):
        super().__init__(detail)
        self.errors = dict(errors or {})

    def as_response(self) -> dict:
        body = {"detail": self.detail}
        if self.errors:
            body["errors"] = self.errors
        return body


class InvalidTransition(ValidationError):
    """Raised when a named lifecycle operation is not allowed from the current status."""

    default_detail = "Status transition not allowed."


class NotFoundError(DomainError):
    default_detail = "Not found."


class CouponRejected(DomainError):
    """A coupon exists but cannot be applied to the given amount."""

    default_detail = "Coupon cannot be applied."

    def __init__(self, reason: str | None = None):
        super().__init__(reason)
        self.reason = self.detail


class ConflictError(DomainError):
    """A concurrent writer won a race; the caller may retry."""

    default_detail = "Conflicting update, please retry."


class AuthenticationError(DomainError):
    """Credentials did not match an active account."""

    default_detail = "Invalid email or password."
