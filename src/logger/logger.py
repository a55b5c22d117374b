import logging
from dataclasses import dataclass
from logging import Logger

from injector import Module, provider, singleton

# Adapted from https://stackoverflow.com/a/56944256/782170

LOGGER_NAME = 'cancel-pr-runs'


class CustomFormatter(logging.Formatter):
    blue = "\x1b[34;20m"
    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    format_style = '%(asctime)s [%(levelname)s] - %(name)s:%(filename)s:%(funcName)s\n%(message)s'

    FORMATS = {
        logging.DEBUG: blue + format_style + reset,
        logging.WARNING: yellow + format_style + reset,
        logging.ERROR: red + format_style + reset,
        logging.CRITICAL: bold_red + format_style + reset
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, CustomFormatter.format_style)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


class ActionsFormatter(logging.Formatter):
    """
    Formats records as GitHub Actions workflow commands so that warnings and errors are annotated on the run.
    """

    COMMANDS = {
        logging.DEBUG: 'debug',
        logging.WARNING: 'warning',
        logging.ERROR: 'error',
        logging.CRITICAL: 'error',
    }

    @staticmethod
    def escape(message: str) -> str:
        return message.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')

    def format(self, record):
        message = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f'::{command}::{self.escape(message)}'


@dataclass
class LoggingModule(Module):
    is_github_actions: bool = False
    is_debug: bool = False

    @provider
    @singleton
    def provide_logger(self) -> Logger:
        result = logging.Logger(LOGGER_NAME)
        result.setLevel(logging.DEBUG if self.is_debug else logging.INFO)
        h = logging.StreamHandler()
        h.setFormatter(ActionsFormatter() if self.is_github_actions else CustomFormatter())
        result.addHandler(h)
        return result
