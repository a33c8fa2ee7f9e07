"""
Errors — Typed exceptions raised by the HubSpot connector.

Every failure that leaves the API client is one of three kinds:

  IntegrationProviderAuthenticationError
      The authentication probe failed (bad token, revoked app, empty body).

  IntegrationProviderAPIError
      Any other HubSpot request or iteration failed. Raised by the query
      primitive with the fully resolved URL, and re-raised by every client
      method with the literal resource path it documents.

  IntegrationValidationError
      Required configuration is missing. Raised before any HTTP call.

Provider errors carry endpoint, status and status_text, plus the original
exception as `cause` (also chained through `raise ... from`).
"""

from typing import Optional


class IntegrationError(Exception):
    """Base class for all connector errors."""


class IntegrationValidationError(IntegrationError):
    """Raised when the integration configuration is incomplete."""


class IntegrationProviderError(IntegrationError):
    """A failed interaction with the provider API.

    Attributes:
        endpoint: The resource path (or full URL) that failed.
        status: HTTP status code, or None when no response was received.
        status_text: HTTP reason phrase, or None.
        cause: The underlying exception, if this error wraps one.
    """

    kind = "Provider API failed"

    def __init__(
        self,
        endpoint: str,
        status: Optional[int] = None,
        status_text: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.endpoint = endpoint
        self.status = status
        self.status_text = status_text
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        message = f"{self.kind} at {self.endpoint}: {self.status} {self.status_text}"
        if self.cause is not None:
            message += f" (cause: {self.cause})"
        return message


class IntegrationProviderAPIError(IntegrationProviderError):
    """Raised when a HubSpot API request or paginated iteration fails."""


class IntegrationProviderAuthenticationError(IntegrationProviderError):
    """Raised when HubSpot rejects the configured credentials."""

    kind = "Provider authentication failed"


def wrap_provider_error(error_class, err: BaseException, endpoint: str) -> IntegrationProviderError:
    """Map any failure onto a provider error scoped to `endpoint`.

    Status fields are copied from `err` when it is itself a provider error;
    anything else (transport errors, payload validation, callback failures)
    is wrapped with no status.
    """
    return error_class(
        endpoint=endpoint,
        status=getattr(err, "status", None),
        status_text=getattr(err, "status_text", None),
        cause=err,
    )
