# error taxonomy for everything that crosses the provider boundary
# raw failures are reduced to a ClassifiedError before they reach a route or a stream event
# rules are case-insensitive substring matches, checked in priority order ("network timeout" is a network error)

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Tuple, Union

from pydantic import BaseModel


class ProviderError(Exception):
    pass


class ErrorCode(str, Enum):
    NETWORK_ERROR = "NETWORK_ERROR"
    API_KEY_ERROR = "API_KEY_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    QUOTA_ERROR = "QUOTA_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ClassifiedError(BaseModel):
    message: str
    code: ErrorCode
    status_code: int
    details: str


# (markers, code, status, user-facing message), first match wins
_RULES: Tuple[Tuple[Tuple[str, ...], ErrorCode, int, str], ...] = (
    (
        ("fetch failed", "network", "econnreset", "enotfound", "connection refused"),
        ErrorCode.NETWORK_ERROR,
        503,
        "Network connection failed. Please check your internet connection and try again.",
    ),
    (
        ("401", "403", "api key", "unauthorized", "invalid key"),
        ErrorCode.API_KEY_ERROR,
        401,
        "Invalid API key. Please check your Google API configuration.",
    ),
    (
        ("timeout", "aborted", "408"),
        ErrorCode.TIMEOUT_ERROR,
        408,
        "Request timed out. Please try again with a shorter transcript.",
    ),
    (
        ("quota", "429", "rate limit"),
        ErrorCode.QUOTA_ERROR,
        429,
        "API quota exceeded. Please try again later.",
    ),
    (
        ("400", "bad request", "invalid request"),
        ErrorCode.BAD_REQUEST,
        400,
        "Invalid request format. Please check your input.",
    ),
    (
        ("500", "502", "503", "504", "internal server error"),
        ErrorCode.SERVER_ERROR,
        503,
        "Server error. Please try again later.",
    ),
)

NON_RETRYABLE_CODES = frozenset({ErrorCode.API_KEY_ERROR, ErrorCode.BAD_REQUEST, ErrorCode.QUOTA_ERROR})


def _raw_message(error: Union[BaseException, str]) -> str:
    if isinstance(error, str):
        return error
    return str(error) or error.__class__.__name__


def classify(error: Union[BaseException, str]) -> ClassifiedError:
    raw = _raw_message(error)
    lowered = raw.lower()
    for markers, code, status, message in _RULES:
        if any(m in lowered for m in markers):
            return ClassifiedError(message=message, code=code, status_code=status, details=raw)
    return ClassifiedError(
        message=raw or "An unexpected error occurred",
        code=ErrorCode.UNKNOWN_ERROR,
        status_code=500,
        details=raw,
    )


def should_retry(error: Union[BaseException, str]) -> bool:
    return classify(error).code not in NON_RETRYABLE_CODES


def error_payload(classified: ClassifiedError) -> Dict[str, str]:
    return {
        "error": classified.message,
        "code": classified.code.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
