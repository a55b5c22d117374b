import logging
from dataclasses import dataclass

from injector import inject

from config import Config
from errors import FetchError
from github_client import GitHubClient
from models import CheckSuite


@inject
@dataclass
class CheckSuiteResolver:
    client: GitHubClient
    config: Config
    logger: logging.Logger

    def is_actions_check_suite(self, suite: CheckSuite) -> bool:
        """
        Either the name or the slug of the app is enough so that renaming the app does not break the match.
        """
        return suite.app_name == self.config['actions_app_name'] \
            or suite.app_slug == self.config['actions_app_slug']

    def list_actions_check_suites(self, owner: str, repo: str, ref: str) -> list[CheckSuite]:
        """
        Gets the check suites that GitHub Actions created for `ref`.

        :raises FetchError: If the check suites could not be listed.
        """
        self.logger.debug("Fetching check suites for ref: %s", ref)
        try:
            check_suites = [CheckSuite.from_json(suite) for suite in self.client.list_check_suites_for_ref(owner, repo, ref)]
        except Exception as e:
            raise FetchError(f"Failed to fetch check suites: {e}") from e

        result = [suite for suite in check_suites if self.is_actions_check_suite(suite)]
        self.logger.info("Found %d %s check suites for ref %s", len(result), self.config['actions_app_name'], ref)
        return result
