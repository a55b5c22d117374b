from .logger import LOGGER_NAME, ActionsFormatter, CustomFormatter, LoggingModule

__all__ = [
    'ActionsFormatter',
    'CustomFormatter',
    'LOGGER_NAME',
    'LoggingModule',
]
