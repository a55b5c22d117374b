from dataclasses import dataclass, field


@dataclass
class RunState:
	"""
	Represents the state of one sweep through the pull requests targeting a branch.
	This is discarded after going through all pull requests.
	"""

	num_prs: int = field(default=0, init=False)
	"""
	The number of pull requests considered.
	This is what the sweep reports, even when processing some of them failed.
	"""

	num_suites: int = field(default=0, init=False)
	num_running_runs: int = field(default=0, init=False)
	num_cancelled: int = field(default=0, init=False)
	num_not_cancelled: int = field(default=0, init=False)
	"""
	Includes runs that were not cancelled because of a dry run.
	"""

	num_pr_errors: int = field(default=0, init=False)
	num_suite_errors: int = field(default=0, init=False)
