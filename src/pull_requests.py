import logging
from dataclasses import dataclass

from injector import inject

from errors import FetchError
from github_client import GitHubClient
from models import PullRequest


@inject
@dataclass
class PullRequestFinder:
    client: GitHubClient
    logger: logging.Logger

    def list_non_draft_open_prs(self, owner: str, repo: str, base_branch: str) -> list[PullRequest]:
        """
        Gets all open pull requests targeting `base_branch` that are not drafts.

        :raises FetchError: If the pull requests could not be listed.
        """
        self.logger.info("Fetching open PRs targeting branch: %s", base_branch)
        try:
            pull_requests = [PullRequest.from_json(pr) for pr in self.client.list_pull_requests(owner, repo, state='open', base=base_branch)]
        except Exception as e:
            raise FetchError(f"Failed to fetch pull requests: {e}") from e

        result = [pr for pr in pull_requests if not pr.is_draft]
        self.logger.info("Found %d non-draft open PRs targeting branch %s", len(result), base_branch)
        return result
