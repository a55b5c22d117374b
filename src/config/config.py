from dataclasses import dataclass
from typing import Optional, TypedDict

DEFAULT_API_URL = 'https://api.github.com'
DEFAULT_TIMEOUT_S = 30

ACTIONS_APP_NAME = 'GitHub Actions'
ACTIONS_APP_SLUG = 'github-actions'


@dataclass(frozen=True)
class TokenAuth:
	token: str

	def __repr__(self) -> str:
		return 'TokenAuth(token=***)'


@dataclass(frozen=True)
class AppCredentials:
	app_id: str
	private_key: str
	installation_id: str

	def __repr__(self) -> str:
		return f'AppCredentials(app_id={self.app_id!r}, private_key=***, installation_id={self.installation_id!r})'


AuthMethod = TokenAuth | AppCredentials


class Config(TypedDict):
	branch: str
	"""
	Pull requests targeting this branch are processed.
	"""

	repository: str
	"""
	In the format `owner/repo`.
	"""

	owner: str
	repo: str

	api_url: str
	"""
	The base URL of the GitHub REST API.
	Defaults to `GITHUB_API_URL` and then to https://api.github.com.
	"""

	auth: AuthMethod

	is_dry_run: bool
	"""
	Log which workflow runs would be cancelled without cancelling them.
	"""

	debug: bool

	log_level: Optional[str]

	request_timeout_s: float
	"""
	The timeout for each request to GitHub.
	Defaults to 30 seconds.
	"""

	actions_app_name: str
	"""
	Check suites created by an app with this name are considered GitHub Actions check suites.
	Defaults to "GitHub Actions".
	"""

	actions_app_slug: str
	"""
	Check suites created by an app with this slug are considered GitHub Actions check suites.
	Defaults to "github-actions".
	"""
