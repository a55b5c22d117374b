"""
Reading inputs and writing outputs the way GitHub Actions expects.
See https://docs.github.com/en/actions/using-workflows/workflow-commands-for-github-actions
"""

import logging
import os
from typing import Mapping


def get_input(environ: Mapping[str, str], name: str) -> str:
	"""
	:returns: The stripped value of the action input or an empty string if it is not set.
	"""
	key = 'INPUT_' + name.replace(' ', '_').upper()
	return environ.get(key, '').strip()


def is_debug(environ: Mapping[str, str]) -> bool:
	return environ.get('RUNNER_DEBUG') == '1'


def is_github_actions(environ: Mapping[str, str]) -> bool:
	return environ.get('GITHUB_ACTIONS') == 'true'


def set_output(environ: Mapping[str, str], logger: logging.Logger, name: str, value: object) -> None:
	output_path = environ.get('GITHUB_OUTPUT')
	if output_path:
		with open(output_path, 'a', encoding='utf-8') as f:
			f.write(f"{name}={value}{os.linesep}")
	else:
		logger.info("Output %s=%s", name, value)
