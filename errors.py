"""
Error types shared by the connectors, the aggregator and the CLI.
"""
from typing import Optional


class WorkPulseError(Exception):
    """Base class for every error raised on purpose by workpulse."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(WorkPulseError):
    """Raised when a required setting (host, credential, alias table) is missing or invalid."""


class IdentityNotFound(WorkPulseError):
    """Raised when no known alias appears in the given text."""


class UpstreamError(WorkPulseError):
    """An upstream service (GitHub, Jira) rejected or failed a request."""

    def __init__(self, message: str, service: Optional[str] = None, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.service = service
        self.status = status


class UpstreamAuthError(UpstreamError):
    """401/403 from an upstream service."""


class UpstreamNotFound(UpstreamError):
    """404 from an upstream service, e.g. a deleted or private repository."""


class RateLimited(UpstreamError):
    """The upstream service asked us to slow down."""


class SummarizerError(WorkPulseError):
    """The language model call failed or returned nothing usable."""


_SERVICE_LABELS = {'github': 'GitHub', 'jira': 'JIRA'}


def _credential_hint(service: Optional[str]) -> str:
    label = _SERVICE_LABELS.get(service or '', '')
    return f"{label} credentials" if label else "API credentials"


def _not_found_message(service: Optional[str]) -> str:
    if service == 'jira':
        return "Sorry, JIRA couldn't find what was asked for. Check the user name and the JIRA host."
    return "Sorry, I couldn't find one or more repositories. The user might not have access to some repos."


def describe_failure(exc: Exception) -> str:
    """Turn an error into the one-line message shown to the person asking.

    Typed errors are mapped by class; anything else falls back to status codes and
    well-known substrings of the message.
    """
    if isinstance(exc, ConfigurationError):
        return f"Configuration error: {exc}"
    if isinstance(exc, IdentityNotFound):
        return f"Unknown user: {exc}. Add them to the users file or pass a login with --user."
    if isinstance(exc, UpstreamAuthError):
        return f"Authentication error: please check your {_credential_hint(exc.service)} (status {exc.status})."
    if isinstance(exc, UpstreamNotFound):
        return _not_found_message(exc.service)
    if isinstance(exc, RateLimited):
        return "API rate limit exceeded. Please try again in a few minutes."

    text = str(exc)
    status = getattr(exc, 'status', None)
    service = getattr(exc, 'service', None)
    if status in (401, 403) or '401' in text or '403' in text:
        return f"Authentication error: please check your {_credential_hint(service)}."
    if status == 404 or '404' in text:
        return _not_found_message(service)
    if status == 429 or 'rate limit' in text.lower():
        return "API rate limit exceeded. Please try again in a few minutes."
    return f"An error occurred while fetching data: {text}"


__all__ = [
    "WorkPulseError",
    "ConfigurationError",
    "IdentityNotFound",
    "UpstreamError",
    "UpstreamAuthError",
    "UpstreamNotFound",
    "RateLimited",
    "SummarizerError",
    "describe_failure",
]
