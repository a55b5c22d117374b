import logging
import time
import urllib.parse
from dataclasses import dataclass, field
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config import DEFAULT_API_URL, DEFAULT_TIMEOUT_S

from .rate_limit import RateLimitEvent, RateLimitKind, detect_rate_limit, get_error_message, should_retry

PAGE_SIZE = 100
API_VERSION = '2022-11-28'

SERVER_ERROR_RETRIES = 3
"""
How many times a request is retried after a network failure or a 5xx response.
Rate limit responses are not retried here. See `rate_limit.MAX_RETRIES`.
"""
SERVER_ERROR_STATUSES = (500, 502, 503, 504)
SERVER_ERROR_BACKOFF_FACTOR = 1


def make_server_error_retry() -> Retry:
    return Retry(
        total=SERVER_ERROR_RETRIES,
        status_forcelist=SERVER_ERROR_STATUSES,
        # Retry every method, including the POST that cancels a run.
        allowed_methods=None,
        backoff_factor=SERVER_ERROR_BACKOFF_FACTOR,
        # 403 and 429 with `Retry-After` are handled by `rate_limit`.
        respect_retry_after_header=False,
        # Return the last 5xx response so that it becomes a `GitHubApiError`.
        raise_on_status=False,
    )


def quote_path_segment(value: object) -> str:
    return urllib.parse.quote(str(value), safe='')


class GitHubApiError(Exception):
    """
    GitHub answered a request with an error status.
    """

    def __init__(self, status_code: int, message: str, method: str, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.method = method
        self.url = url


@dataclass
class GitHubClient:
    """
    A small client for the GitHub REST API.
    Requests that hit a rate limit are retried according to `rate_limit.MAX_RETRIES`.
    Network failures and 5xx responses are retried by the session's adapter.
    """
    token: str
    logger: logging.Logger
    base_url: str = DEFAULT_API_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    session: requests.Session = field(default_factory=requests.Session)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip('/')
        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'Authorization': f'Bearer {self.token}',
            'X-GitHub-Api-Version': API_VERSION,
        })
        adapter = HTTPAdapter(max_retries=make_server_error_retry())
        self.session.mount('https://', adapter)
        self.session.mount('http://', adapter)

    def _get_url(self, path: str) -> str:
        if path.startswith('https://') or path.startswith('http://'):
            return path
        return f'{self.base_url}{path}'

    def request(self, method: str, path: str, params: Optional[dict[str, Any]] = None, body: Optional[Any] = None) -> requests.Response:
        """
        Send a request and return the successful response.

        :param path: A path relative to `base_url` or a full URL such as a `next` link.
        :raises GitHubApiError: If the response has an error status after any retries.
        """
        url = self._get_url(path)
        num_retries = 0
        while True:
            self.logger.debug("%s %s %s", method, url, params or '')
            response = self.session.request(method, url, params=params, json=body, timeout=self.timeout_s)
            event = detect_rate_limit(response, num_retries)
            if event is None or not self.handle_rate_limit(event, method, url):
                break
            time.sleep(event.retry_after_seconds)
            num_retries += 1

        if not response.ok:
            raise GitHubApiError(response.status_code, get_error_message(response), method, url)
        return response

    def handle_rate_limit(self, event: RateLimitEvent, method: str, url: str) -> bool:
        """
        Log the rate limit and decide if the request should be retried.

        :returns: `True` if the request should be sent again after `event.retry_after_seconds`.
        """
        match event.kind:
            case RateLimitKind.PRIMARY:
                self.logger.warning("Request quota exhausted for request %s %s", method, url)
            case RateLimitKind.SECONDARY:
                self.logger.warning("Secondary rate limit detected for request %s %s", method, url)
            case RateLimitKind.ABUSE:
                self.logger.warning("Abuse detected for request %s %s", method, url)

        result = should_retry(event)
        if result:
            self.logger.info("Retrying after %d seconds!", event.retry_after_seconds)
        return result

    def paginate(self, path: str, params: Optional[dict[str, Any]] = None, items_key: Optional[str] = None) -> list[dict[str, Any]]:
        """
        Get every page of a listing by following the `next` links.

        :param items_key: The key holding the items when the endpoint wraps them in an object,
            such as `workflow_runs`.
            When `None`, each page is expected to be a JSON list.
        """
        result: list[dict[str, Any]] = []
        url: Optional[str] = path
        page_params: Optional[dict[str, Any]] = {'per_page': PAGE_SIZE, **(params or {})}
        while url is not None:
            response = self.request('GET', url, params=page_params)
            data = response.json()
            items = data[items_key] if items_key is not None else data
            result.extend(items)
            url = response.links.get('next', {}).get('url')
            # The `next` link already has the query.
            page_params = None
        return result

    def _repo_path(self, owner: str, repo: str) -> str:
        return f'/repos/{quote_path_segment(owner)}/{quote_path_segment(repo)}'

    def list_pull_requests(self, owner: str, repo: str, state: str, base: str) -> list[dict[str, Any]]:
        return self.paginate(f'{self._repo_path(owner, repo)}/pulls', {'state': state, 'base': base})

    def list_check_suites_for_ref(self, owner: str, repo: str, ref: str) -> list[dict[str, Any]]:
        # Branch names can contain `/`, `#`, and `%`.
        return self.paginate(f'{self._repo_path(owner, repo)}/commits/{quote_path_segment(ref)}/check-suites', items_key='check_suites')

    def list_workflow_runs(self, owner: str, repo: str, check_suite_id: int) -> list[dict[str, Any]]:
        return self.paginate(f'{self._repo_path(owner, repo)}/actions/runs', {'check_suite_id': check_suite_id}, items_key='workflow_runs')

    def cancel_workflow_run(self, owner: str, repo: str, run_id: int) -> None:
        self.request('POST', f'{self._repo_path(owner, repo)}/actions/runs/{quote_path_segment(run_id)}/cancel')
