"""
Recognizes GitHub rate limit responses and decides whether to retry them.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

DEFAULT_RETRY_AFTER_S = 60
"""
Delay used when GitHub does not say how long to wait.
"""

RESET_BUFFER_S = 1
"""
Extra time to wait after `X-RateLimit-Reset` so that the retry lands in the new window.
"""


class RateLimitKind(Enum):
    PRIMARY = 'primary'
    """
    The hourly request quota is exhausted.
    """

    SECONDARY = 'secondary'
    """
    Too many requests in a short time or too many concurrent requests.
    """

    ABUSE = 'abuse'
    """
    GitHub's abuse detection mechanism was triggered.
    """


MAX_RETRIES: dict[RateLimitKind, Optional[int]] = {
    RateLimitKind.PRIMARY: 1,
    RateLimitKind.SECONDARY: 0,
    # No limit.
    RateLimitKind.ABUSE: None,
}
"""
How many times a single request may be retried when it hits each kind of rate limit.
"""


@dataclass(frozen=True)
class RateLimitEvent:
    kind: RateLimitKind
    retry_after_seconds: int
    attempt_count: int
    """
    The number of times the request has already been retried.
    """


def should_retry(event: RateLimitEvent) -> bool:
    max_retries = MAX_RETRIES[event.kind]
    return max_retries is None or event.attempt_count < max_retries


def get_error_message(response: requests.Response) -> str:
    """
    :returns: The `message` GitHub put in an error response or the raw body if it is not JSON.
    """
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and (message := data.get('message')):
        return str(message)
    return response.text or f"HTTP {response.status_code}"


def _get_int_header(response: requests.Response, name: str) -> Optional[int]:
    value = response.headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def get_rate_limit_kind(response: requests.Response) -> Optional[RateLimitKind]:
    """
    :returns: The kind of rate limit that the response signals or `None` if it is not rate limited.
    """
    if response.status_code not in (403, 429):
        return None

    message = get_error_message(response).lower()
    if 'abuse' in message:
        return RateLimitKind.ABUSE
    if 'secondary rate limit' in message:
        return RateLimitKind.SECONDARY
    if response.headers.get('X-RateLimit-Remaining') == '0':
        return RateLimitKind.PRIMARY
    if response.status_code == 429 and response.headers.get('Retry-After') is not None:
        return RateLimitKind.SECONDARY
    return None


def get_retry_after_seconds(response: requests.Response, kind: RateLimitKind, now: Optional[float] = None) -> int:
    retry_after = _get_int_header(response, 'Retry-After')
    if retry_after is not None:
        return max(0, retry_after)
    if kind == RateLimitKind.PRIMARY:
        reset_timestamp = _get_int_header(response, 'X-RateLimit-Reset')
        if reset_timestamp is not None:
            if now is None:
                now = time.time()
            return max(0, reset_timestamp - int(now)) + RESET_BUFFER_S
    return DEFAULT_RETRY_AFTER_S


def detect_rate_limit(response: requests.Response, attempt_count: int) -> Optional[RateLimitEvent]:
    kind = get_rate_limit_kind(response)
    if kind is None:
        return None
    return RateLimitEvent(kind, get_retry_after_seconds(response, kind), attempt_count)
