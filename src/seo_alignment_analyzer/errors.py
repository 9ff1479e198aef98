"""
Error taxonomy for the alignment analyzer.

Every failure of an analysis run surfaces as one of these exceptions. The
core never retries and never degrades to partial results; the calling layer
(CLI, HTTP API) translates the exception into a user-facing message.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Base class for all analysis failures."""

    user_message = "Analysis failed. Please try again or contact support."

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        if user_message:
            self.user_message = user_message


class InvalidInputError(AnalysisError):
    """Raised when the request is rejected before any provider call."""

    user_message = "Invalid input data. Please check your inputs and try again."


class DegenerateMathError(AnalysisError):
    """Raised when a zero-magnitude vector reaches normalization or cosine."""

    user_message = (
        "The embedding provider returned a degenerate vector. "
        "Check keyword weights and try again."
    )


class ProviderError(AnalysisError):
    """Base class for embedding/completion provider failures."""

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, user_message)
        self.status_code = status_code


class ProviderAuthError(ProviderError):
    """Provider rejected the credentials or their scopes."""

    user_message = "Invalid API key. Please check your key and try again."


class ProviderRateLimitedError(ProviderError):
    """Provider is throttling requests. Callers may back off and retry."""

    user_message = "Rate limit exceeded. Please wait a moment and try again."


class ProviderUnavailableError(ProviderError):
    """Any other provider-side failure (network, malformed response, parse)."""


# Alias kept for the completion client, which historically raised this name
LLMClientError = ProviderError


PERMISSIONS_HINT = (
    "Your API key doesn't have the required permissions. Please ensure the key "
    "has model request scope and proper organization/project access."
)


def _status_of(error: BaseException) -> Optional[int]:
    for attr in ("status_code", "status", "http_status"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def _code_of(error: BaseException) -> str:
    code = getattr(error, "code", None)
    if isinstance(code, str):
        return code
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and isinstance(inner.get("code"), str):
            return inner["code"]
    return ""


def classify_provider_error(error: BaseException, operation: str = "provider call") -> AnalysisError:
    """
    Map an arbitrary provider/SDK exception onto the error taxonomy.

    Already-classified errors pass through untouched. Classification uses
    duck typing on ``status_code``/``status``, ``code`` and the message, which
    both the OpenAI and Anthropic SDK exceptions expose.

    Args:
        error: The exception raised by the provider client.
        operation: Short description of what was being attempted (for logs).

    Returns:
        An AnalysisError subclass instance to be raised by the caller.
    """
    if isinstance(error, AnalysisError):
        return error

    status = _status_of(error)
    code = _code_of(error)
    message = str(error) or error.__class__.__name__
    lowered = message.lower()

    if status in (401, 403) or code in ("invalid_api_key", "authentication_error", "permission_error"):
        if "insufficient permissions" in lowered or status == 403:
            classified: AnalysisError = ProviderAuthError(
                f"{operation} failed: {message}", PERMISSIONS_HINT, status_code=status
            )
        else:
            classified = ProviderAuthError(f"{operation} failed: {message}", status_code=status)
    elif status == 429 or code in ("rate_limit_exceeded", "rate_limit_error"):
        classified = ProviderRateLimitedError(f"{operation} failed: {message}", status_code=status)
    elif code == "insufficient_quota":
        classified = ProviderRateLimitedError(
            f"{operation} failed: {message}",
            "Insufficient quota. Please check your provider account billing.",
            status_code=status,
        )
    else:
        classified = ProviderUnavailableError(f"{operation} failed: {message}", status_code=status)

    logger.error(f"{operation} failed ({classified.__class__.__name__}): {message}")
    return classified
