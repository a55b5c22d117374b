import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping

from injector import Injector, inject

from action_io import is_debug, is_github_actions, set_output
from check_suites import CheckSuiteResolver
from config import Config, ConfigModule
from github_client import GitHubClientModule
from logger import LoggingModule
from models import CheckSuite, PullRequest
from pull_requests import PullRequestFinder
from run_state import RunState
from workflow_runs import RunCanceller

OUTPUT_NAME = 'prs_processed'


@inject
@dataclass
class Runner:
	config: Config
	logger: logging.Logger
	pr_finder: PullRequestFinder
	check_suite_resolver: CheckSuiteResolver
	run_canceller: RunCanceller

	def run_from_config(self) -> int:
		return self.run(self.config['owner'], self.config['repo'], self.config['branch'])

	def run(self, owner: str, repo: str, base_branch: str) -> int:
		"""
		Cancel the running GitHub Actions workflow runs of the open non-draft pull requests targeting `base_branch`.

		Failing to list the pull requests aborts the sweep.
		Failures for one pull request, check suite, or workflow run are logged and the sweep continues.

		:returns: The number of pull requests considered, including those whose processing failed.
		"""
		state = RunState()
		prs = self.pr_finder.list_non_draft_open_prs(owner, repo, base_branch)
		state.num_prs = len(prs)

		for pr in prs:
			self.process_pr(state, owner, repo, pr)

		self.logger.info("Processed %d PR(s) targeting %s: %d check suite(s), %d running workflow run(s), %d cancelled, %d not cancelled. Errors: %d PR(s), %d check suite(s).",
			state.num_prs, base_branch, state.num_suites, state.num_running_runs, state.num_cancelled, state.num_not_cancelled, state.num_pr_errors, state.num_suite_errors)
		return len(prs)

	def process_pr(self, state: RunState, owner: str, repo: str, pr: PullRequest) -> None:
		# Check suites are looked up by the head branch, so PRs sharing a head branch share check suites.
		ref = pr.head_ref
		self.logger.info("Processing PR #%d with head ref: %s", pr.number, ref)
		try:
			check_suites = self.check_suite_resolver.list_actions_check_suites(owner, repo, ref)
			for suite in check_suites:
				self.process_check_suite(state, owner, repo, suite, pr)
		except Exception as e:
			state.num_pr_errors += 1
			self.logger.error("Error processing PR #%d with head ref %s: %s", pr.number, ref, e)
			self.logger.debug("Stack trace:", exc_info=True)

	def process_check_suite(self, state: RunState, owner: str, repo: str, suite: CheckSuite, pr: PullRequest) -> None:
		state.num_suites += 1
		try:
			running_runs = self.run_canceller.list_running_runs(owner, repo, suite.id)
			state.num_running_runs += len(running_runs)
			for workflow_run in running_runs:
				if self.run_canceller.cancel(owner, repo, workflow_run.id):
					state.num_cancelled += 1
				else:
					state.num_not_cancelled += 1
		except Exception as e:
			state.num_suite_errors += 1
			self.logger.error("Error processing check suite %s for PR #%d: %s", suite.id, pr.number, e)
			self.logger.debug("Stack trace:", exc_info=True)


def run_action(environ: Mapping[str, str]) -> int:
	"""
	Run the sweep configured by the action inputs in `environ` and report the result.

	:returns: The exit code.
	"""
	inj = Injector([
		ConfigModule(environ),
		LoggingModule(is_github_actions=is_github_actions(environ), is_debug=is_debug(environ)),
		GitHubClientModule(),
	])
	logger = inj.get(logging.Logger)
	try:
		runner = inj.get(Runner)
		num_prs = runner.run_from_config()
		set_output(environ, logger, OUTPUT_NAME, num_prs)
	except Exception as e:
		logger.error("Action failed: %s", e)
		logger.debug("Stack trace:", exc_info=True)
		return 1
	return 0


def main():
	sys.exit(run_action(os.environ))


if __name__ == '__main__':
	main()
