"""
Normalization of GitHub API errors into handler failures.

Every verb that touches the remote API funnels its failures through
handle_error(), so the failure kind and message are consistent whichever
verb triggered them.
"""

import logging
from typing import Optional

from plugins.base import HandlerErrorCode, ProgressEvent
from plugins.github.client import GitHubRequestError

logger = logging.getLogger(__name__)

_STATUS_ERROR_CODES = {
    400: HandlerErrorCode.INVALID_REQUEST,
    401: HandlerErrorCode.INVALID_CREDENTIALS,
    403: HandlerErrorCode.ACCESS_DENIED,
    404: HandlerErrorCode.NOT_FOUND,
    409: HandlerErrorCode.RESOURCE_CONFLICT,
    422: HandlerErrorCode.INVALID_REQUEST,
    429: HandlerErrorCode.THROTTLING,
}


def get_error_message(error: GitHubRequestError) -> str:
    """
    Build the message surfaced to the caller.

    Field-level errors, when GitHub returns any, are joined with newlines;
    otherwise the error's own message is used.
    """
    messages = []
    for item in error.errors:
        if isinstance(item, dict):
            message = item.get("message")
        else:
            message = str(item)
        if message:
            messages.append(message)
    return "\n".join(messages) or error.message


def _header(error: GitHubRequestError, name: str) -> Optional[str]:
    name = name.lower()
    for key, value in error.headers.items():
        if key.lower() == name:
            return value
    return None


def classify_error(error: GitHubRequestError) -> HandlerErrorCode:
    """Map a GitHub error onto a HandlerErrorCode by its HTTP status."""
    if error.status is None:
        return HandlerErrorCode.NETWORK_FAILURE

    # Primary rate limits come back as 403 with no remaining quota
    if error.status == 403 and _header(error, "X-RateLimit-Remaining") == "0":
        return HandlerErrorCode.THROTTLING

    if error.status in _STATUS_ERROR_CODES:
        return _STATUS_ERROR_CODES[error.status]
    if error.status >= 500:
        return HandlerErrorCode.SERVICE_INTERNAL_ERROR
    return HandlerErrorCode.GENERAL_SERVICE_EXCEPTION


def handle_error(error: GitHubRequestError, type_name: str) -> ProgressEvent:
    """
    Convert a failed GitHub call into a failed ProgressEvent.

    Args:
        error: The error raised by GitHubClient
        type_name: Resource type name, used for logging

    Returns:
        A FAILED ProgressEvent carrying the classified error code and the
        formatted message.
    """
    error_code = classify_error(error)
    message = get_error_message(error)
    logger.error(
        f"{type_name} GitHub request failed "
        f"(status={error.status}, error_code={error_code.value}): {message}"
    )
    return ProgressEvent.failed(error_code, message)
