from .config import (ACTIONS_APP_NAME, ACTIONS_APP_SLUG, DEFAULT_API_URL, DEFAULT_TIMEOUT_S,
                     AppCredentials, AuthMethod, Config, TokenAuth)
from .config_module import ConfigModule
from .loader import ConfigLoader

__all__ = [
    'ACTIONS_APP_NAME',
    'ACTIONS_APP_SLUG',
    'AppCredentials',
    'AuthMethod',
    'Config',
    'ConfigLoader',
    'ConfigModule',
    'DEFAULT_API_URL',
    'DEFAULT_TIMEOUT_S',
    'TokenAuth',
]
