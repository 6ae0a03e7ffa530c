"""
Failure taxonomy and classification for backend errors.

Only one distinction is surfaced to the user: the key is bad (reconnect) or
something else went wrong (try again).
"""

import re
from enum import Enum

import httpx


class ErrorKind(str, Enum):
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    TRANSIENT = "TRANSIENT"


class InvalidCampaignRequest(ValueError):
    """Generation was requested without both reference images."""


class ShotNotFound(LookupError):
    """No shot with the given id in the current plan."""


class PlanValidationError(Exception):
    """The backend's shot list broke the ten-shot contract."""


# ── Messages ─────────────────────────────────────────────────────────────────

PLAN_INVALID_CREDENTIAL_MESSAGE = "API Key invalid or expired. Please reconnect."
PLAN_TRANSIENT_MESSAGE = "Failed to generate shot list. Please check your internet connection."
PREVIEW_INVALID_CREDENTIAL_MESSAGE = "API Key invalid. Please reconnect."
PREVIEW_TRANSIENT_MESSAGE = "Generation failed. Retrying usually works!"

# ── Classification ───────────────────────────────────────────────────────────

CREDENTIAL_STATUS_CODES = {401, 403, 404}
_CREDENTIAL_STATUS_RE = re.compile(r"\b(401|403|404)\b")
_CREDENTIAL_MARKERS = (
    "requested entity was not found",
    "api key not valid",
    "permission_denied",
    "unauthenticated",
)


def _status_code(error: BaseException):
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return getattr(error, "status_code", None)


def classify(error: BaseException) -> ErrorKind:
    if isinstance(error, PlanValidationError):
        return ErrorKind.TRANSIENT

    if _status_code(error) in CREDENTIAL_STATUS_CODES:
        return ErrorKind.INVALID_CREDENTIAL

    message = str(error)
    if _CREDENTIAL_STATUS_RE.search(message):
        return ErrorKind.INVALID_CREDENTIAL

    lowered = message.lower()
    if any(marker in lowered for marker in _CREDENTIAL_MARKERS):
        return ErrorKind.INVALID_CREDENTIAL

    return ErrorKind.TRANSIENT


def plan_error_message(kind: ErrorKind) -> str:
    if kind is ErrorKind.INVALID_CREDENTIAL:
        return PLAN_INVALID_CREDENTIAL_MESSAGE
    return PLAN_TRANSIENT_MESSAGE


def preview_error_message(kind: ErrorKind) -> str:
    if kind is ErrorKind.INVALID_CREDENTIAL:
        return PREVIEW_INVALID_CREDENTIAL_MESSAGE
    return PREVIEW_TRANSIENT_MESSAGE
