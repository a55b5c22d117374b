from logging import Logger

from injector import Module, provider, singleton

from config import Config

from .auth import resolve_token
from .client import GitHubClient


class GitHubClientModule(Module):
    @provider
    @singleton
    def provide_github_client(self, config: Config, logger: Logger) -> GitHubClient:
        token = resolve_token(config['auth'], config['api_url'], logger)
        return GitHubClient(
            token=token,
            logger=logger,
            base_url=config['api_url'],
            timeout_s=config['request_timeout_s'],
        )
