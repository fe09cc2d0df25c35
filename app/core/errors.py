"""
Error taxonomy for the payment flow.

Services raise these; routers translate them into HTTP responses.
"""


class VisaCircleError(Exception):
    """Base class for all application errors."""


class ConfigurationError(VisaCircleError):
    """Required credentials or URLs are missing. Never retried."""


class SignatureError(VisaCircleError):
    """Webhook signature missing or invalid."""


class NotFoundError(VisaCircleError):
    """Referenced account or record does not exist."""


class UpstreamError(VisaCircleError):
    """The payment processor rejected or failed a call."""


class TransientReadError(VisaCircleError):
    """A payment status read failed; safe to retry."""


class ConfirmationError(VisaCircleError):
    """The confirmation page URL is missing required parameters."""


class InvalidTransition(VisaCircleError):
    """A poller event is not allowed in the current state."""
