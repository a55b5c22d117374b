import logging
from dataclasses import dataclass

from injector import inject

from config import Config
from errors import CancelError, FetchError
from github_client import GitHubClient
from models import WorkflowRun


@inject
@dataclass
class RunCanceller:
    """
    Finds workflow runs that are still running and cancels them.
    """
    client: GitHubClient
    config: Config
    logger: logging.Logger

    def list_running_runs(self, owner: str, repo: str, check_suite_id: int) -> list[WorkflowRun]:
        """
        :returns: The workflow runs of the check suite that do not have a conclusion yet.
        :raises FetchError: If the workflow runs could not be listed.
        """
        try:
            workflow_runs = [WorkflowRun.from_json(run) for run in self.client.list_workflow_runs(owner, repo, check_suite_id)]
        except Exception as e:
            raise FetchError(f"Failed to fetch workflow runs: {e}") from e

        result = [run for run in workflow_runs if run.is_running]
        self.logger.info("Found %d running workflow runs for check suite %s", len(result), check_suite_id)
        return result

    def cancel(self, owner: str, repo: str, run_id: int) -> bool:
        """
        Cancel a workflow run.
        Failures are logged and never raised so that the other runs still get cancelled.

        :returns: `True` if GitHub accepted the cancellation.
        """
        if self.config['is_dry_run']:
            self.logger.info("Would cancel workflow run %s", run_id)
            return False

        try:
            self.request_cancellation(owner, repo, run_id)
        except CancelError as e:
            self.logger.error("Failed to cancel workflow run %s: %s", e.run_id, e)
            return False
        return True

    def request_cancellation(self, owner: str, repo: str, run_id: int) -> None:
        self.logger.info("Cancelling workflow run %s", run_id)
        try:
            self.client.cancel_workflow_run(owner, repo, run_id)
        except Exception as e:
            raise CancelError(run_id, str(e)) from e
