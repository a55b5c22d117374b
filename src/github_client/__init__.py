from .client import DEFAULT_API_URL, GitHubApiError, GitHubClient
from .client_module import GitHubClientModule
from .rate_limit import MAX_RETRIES, RateLimitEvent, RateLimitKind

__all__ = [
    'DEFAULT_API_URL',
    'GitHubApiError',
    'GitHubClient',
    'GitHubClientModule',
    'MAX_RETRIES',
    'RateLimitEvent',
    'RateLimitKind',
]
