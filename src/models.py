from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PullRequest:
	number: int
	head_ref: str
	is_draft: bool
	base_ref: str
	title: str = ''
	html_url: Optional[str] = None

	@classmethod
	def from_json(cls, data: dict[str, Any]) -> 'PullRequest':
		return cls(
			number=data['number'],
			head_ref=data['head']['ref'],
			is_draft=bool(data.get('draft', False)),
			base_ref=data['base']['ref'],
			title=data.get('title') or '',
			html_url=data.get('html_url'),
		)


@dataclass(frozen=True)
class CheckSuite:
	id: int
	app_name: Optional[str]
	app_slug: Optional[str]

	@classmethod
	def from_json(cls, data: dict[str, Any]) -> 'CheckSuite':
		app = data.get('app') or {}
		return cls(
			id=data['id'],
			app_name=app.get('name'),
			app_slug=app.get('slug'),
		)


@dataclass(frozen=True)
class WorkflowRun:
	id: int
	conclusion: Optional[str]
	"""
	`None` while the run is queued or in progress.
	Any other value means the run reached a terminal state.
	"""

	name: Optional[str] = None
	status: Optional[str] = None
	html_url: Optional[str] = None

	@property
	def is_running(self) -> bool:
		return self.conclusion is None

	@classmethod
	def from_json(cls, data: dict[str, Any]) -> 'WorkflowRun':
		return cls(
			id=data['id'],
			conclusion=data.get('conclusion'),
			name=data.get('name'),
			status=data.get('status'),
			html_url=data.get('html_url'),
		)
