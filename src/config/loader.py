import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from injector import inject
import requests
import yaml

from action_io import get_input, is_debug
from errors import ConfigError
from .config import (ACTIONS_APP_NAME, ACTIONS_APP_SLUG, DEFAULT_API_URL, DEFAULT_TIMEOUT_S,
                     AppCredentials, AuthMethod, Config, TokenAuth)

TRUE_VALUES = ('true', 'True', 'TRUE')
FALSE_VALUES = ('false', 'False', 'FALSE')


@inject
@dataclass
class ConfigLoader:
    """
    Loads the configuration from the action's inputs in the environment.
    Inputs that are not set fall back to the optional YAML file given by the `config_file` input.
    """
    environ: Mapping[str, str]
    logger: logging.Logger

    def load_config(self) -> Config:
        file_config = self.load_config_file(get_input(self.environ, 'config_file'))

        def get(name: str, env_name: Optional[str] = None) -> Any:
            value: Any = get_input(self.environ, name)
            if not value and env_name is not None:
                value = self.environ.get(env_name, '').strip()
            if not value:
                value = file_config.get(name)
            return value

        errors: list[str] = []

        branch = get('branch')
        if not branch:
            errors.append("Branch is required")

        repository = get('repository', 'GITHUB_REPOSITORY')
        owner = repo = ''
        if not repository:
            errors.append("Repository is required")
        else:
            parts = str(repository).split('/')
            if len(parts) != 2 or not all(parts):
                errors.append("Repository must be in the format owner/repo")
            else:
                owner, repo = parts

        auth = self.get_auth(get, errors)

        is_dry_run = self.parse_bool('dry_run', get('dry_run'), errors)
        debug = is_debug(self.environ) or self.parse_bool('debug', file_config.get('debug'), errors)

        request_timeout_s = file_config.get('request_timeout_s', DEFAULT_TIMEOUT_S)
        if not isinstance(request_timeout_s, (int, float)) or request_timeout_s <= 0:
            errors.append(f"request_timeout_s must be a positive number. Got: {request_timeout_s}")

        if errors:
            raise ConfigError("Configuration errors:\n" + "\n".join(errors))
        assert auth is not None

        log_level = file_config.get('log_level')
        if debug:
            self.logger.setLevel(logging.DEBUG)
        elif log_level:
            self.logger.setLevel(logging.getLevelName(str(log_level).upper()))

        config = Config(
            branch=str(branch),
            repository=str(repository),
            owner=owner,
            repo=repo,
            api_url=str(get('api_url', 'GITHUB_API_URL') or DEFAULT_API_URL).rstrip('/'),
            auth=auth,
            is_dry_run=is_dry_run,
            debug=debug,
            log_level=log_level,
            request_timeout_s=request_timeout_s,
            actions_app_name=file_config.get('actions_app_name') or ACTIONS_APP_NAME,
            actions_app_slug=file_config.get('actions_app_slug') or ACTIONS_APP_SLUG,
        )
        self.logger.debug("Configuration loaded for branch '%s' in '%s'.", config['branch'], config['repository'])
        return config

    @staticmethod
    def get_auth(get, errors: list[str]) -> Optional[AuthMethod]:
        token = get('github_token')
        app_id = get('app_id')
        private_key = get('private_key')
        installation_id = get('installation_id')

        if app_id:
            if not private_key or not installation_id:
                errors.append("When using GitHub App authentication, app_id, private_key, and installation_id are all required")
                return None
            return AppCredentials(str(app_id), str(private_key), str(installation_id))
        if token:
            return TokenAuth(str(token))
        errors.append("Authentication is required. Provide either token or app credentials.")
        return None

    @staticmethod
    def parse_bool(name: str, value: Any, errors: list[str]) -> bool:
        if value is None or value == '':
            return False
        if isinstance(value, bool):
            return value
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        errors.append(f"{name} must be one of: true | True | TRUE | false | False | FALSE. Got: {value}")
        return False

    def load_config_file(self, config_source: str) -> dict[str, Any]:
        if not config_source:
            return {}

        config_contents: Optional[str] = None
        if config_source.startswith('https://') or config_source.startswith('http://'):
            max_num_tries = 3
            for try_num in range(max_num_tries):
                try:
                    r = requests.get(config_source, timeout=DEFAULT_TIMEOUT_S)
                    r.raise_for_status()
                    config_contents = r.text
                    break
                except requests.RequestException as e:
                    if try_num == max_num_tries - 1:
                        raise ConfigError(f"Could not download the config file from '{config_source}': {e}") from e
                    self.logger.exception(f"Error while downloading config from '{config_source}'.")
                    time.sleep(1 + try_num * 2)
        else:
            try:
                with open(config_source, 'r', encoding='utf-8') as f:
                    config_contents = f.read()
            except OSError as e:
                raise ConfigError(f"Could not read the config file '{config_source}': {e}") from e

        assert config_contents is not None
        self.logger.info("Loading configuration from '%s'.", config_source)
        try:
            result = yaml.safe_load(config_contents)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse the config file '{config_source}': {e}") from e
        if result is None:
            return {}
        if not isinstance(result, dict):
            raise ConfigError(f"The config file '{config_source}' must contain a mapping. Got: {type(result).__name__}")
        return result
