"""
    Copyright 2024 Inmanta

    Licensed under the Apache License, Version 2.0 (the "License");
    you may not use this file except in compliance with the License.
    You may obtain a copy of the License at

        http://www.apache.org/licenses/LICENSE-2.0

    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    Contact: code@inmanta.com
"""

import logging
import logging.config
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Optional, TextIO

import colorlog
import yaml
from colorlog.formatter import LogColors

from netalloc import config, const

LOGGER = logging.getLogger(__name__)

TRACE = 3

logging.addLevelName(TRACE, "TRACE")

"""
This dictionary maps the netalloc log levels to the corresponding Python log levels
"""
log_levels = {
    "0": logging.ERROR,
    "1": logging.WARNING,
    "2": logging.INFO,
    "3": logging.DEBUG,
    "4": TRACE,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": TRACE,
}


def _is_on_tty() -> bool:
    return (hasattr(sys.stdout, "isatty") and sys.stdout.isatty()) or const.ENVIRON_FORCE_TTY in os.environ


def python_log_level_to_name(python_log_level: int) -> str:
    """Convert a python log level to a human readable version that works in log config files"""
    level_to_name = {v: k for k, v in logging.getLevelNamesMapping().items()}
    result = level_to_name.get(python_log_level)
    if result is not None:
        return result
    return str(python_log_level)


def convert_log_level(level: str) -> int:
    """
    Convert the given netalloc log level to the corresponding Python log level.

    :param level: A level name or a verbosity digit, verbosities above 4 are capped at 4.
    """
    level = level.strip().upper()
    if level.isdigit() and int(level) > 4:
        level = "4"
    if level not in log_levels:
        raise ValueError("Unknown log level: %r" % level)
    return log_levels[level]


class NoLoggingConfigFound(Exception):
    pass


class MultiLineFormatter(colorlog.ColoredFormatter):
    """
    Formatter for multi-line log records.

    Continuation lines of a record are indented to the width of the header, so they line up with the first line of the
    message.
    """

    def __init__(
        self,
        fmt: Optional[str] = None,
        *,
        log_colors: Optional[LogColors] = None,
        reset: bool = True,
        no_color: bool = False,
    ) -> None:
        super().__init__(fmt, log_colors=log_colors, reset=reset, no_color=no_color)
        self.fmt = fmt

    def get_header_length(self, record: logging.LogRecord) -> int:
        """
        Get the header length of a given log record, without color codes.
        """
        formatter = colorlog.ColoredFormatter(
            fmt=self.fmt,
            log_colors=self.log_colors,
            reset=False,
            no_color=True,
        )
        header = formatter.format(
            logging.LogRecord(
                record.name,
                record.levelno,
                record.pathname,
                record.lineno,
                "",
                (),
                None,
            )
        )
        return len(header)

    def format(self, record: logging.LogRecord) -> str:
        indent: str = " " * self.get_header_length(record)
        head, *tail = super().format(record).splitlines(True)
        return head + "".join(indent + line for line in tail)


def get_console_formatter_config(timed: bool = False) -> dict[str, object]:
    """
    Returns the dict-based formatter config for logs that are sent to the console.
    """
    log_format = "%(asctime)s " if timed else ""
    if _is_on_tty():
        log_format += "%(log_color)s%(name)-25s%(levelname)-8s%(reset)s%(blue)s%(message)s"
        log_colors = {"TRACE": "white", "DEBUG": "cyan", "INFO": "green", "WARNING": "yellow", "ERROR": "red", "CRITICAL": "red"}
    else:
        log_format += "%(name)-25s%(levelname)-8s%(message)s"
        log_colors = None

    return {
        "()": "netalloc.logging.MultiLineFormatter",
        "fmt": log_format,
        "log_colors": log_colors,
        "reset": _is_on_tty(),
        "no_color": not _is_on_tty(),
    }


def get_console_logging_config(stream: TextIO, python_log_level: int, timed: bool = False) -> dict[str, object]:
    """
    Returns a dict-based logging config with a single console handler on the root logger.
    """
    log_level_name = python_log_level_to_name(python_log_level)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"console_formatter": get_console_formatter_config(timed)},
        "handlers": {
            "console_handler": {
                "class": "logging.StreamHandler",
                "formatter": "console_formatter",
                "level": log_level_name,
                "stream": stream,
            },
        },
        "root": {"handlers": ["console_handler"], "level": log_level_name},
    }


def read_logging_config_file(file_name: str) -> dict[str, object]:
    """
    Read a python dict-based logging config from the given yaml file.
    """
    file_name = os.path.abspath(file_name)
    try:
        with open(file_name, "r", encoding="utf-8") as fh:
            logging_config_as_str = fh.read()
    except FileNotFoundError:
        raise NoLoggingConfigFound(f"Logging config file {file_name} doesn't exist.")
    except Exception:
        raise Exception(f"Failed to read logging config file from {file_name}.")

    try:
        result = yaml.safe_load(logging_config_as_str)
    except Exception:
        raise Exception(f"Failed to parse logging config file from {file_name} as yaml.")
    if not isinstance(result, dict):
        raise Exception(f"Logging config file {file_name} doesn't contain a dictionary.")
    return result


class NetallocLoggerConfig:
    """
    This class is the entry-point for configuring the Python logging framework.

    Call `get_instance` first to install a bootstrap console handler, then `apply_options` once the configuration has
    been loaded, to apply the options of the `logging` config section.
    """

    _instance: Optional["NetallocLoggerConfig"] = None

    def __init__(self, stream: TextIO = sys.stdout) -> None:
        self._stream = stream
        self._handlers: Sequence[logging.Handler] = []
        self._apply_logging_config(get_console_logging_config(stream, logging.INFO))

    @classmethod
    def get_instance(cls, stream: TextIO = sys.stdout) -> "NetallocLoggerConfig":
        """
        This method should be used to obtain an instance of this class, because this class is a singleton.

        :param stream: The stream to send log messages to. Default is standard output (sys.stdout)
        """
        if cls._instance:
            if cls._instance._stream is not stream:
                raise Exception("Instance already exists with a different stream")
        else:
            cls._instance = cls(stream)
        return cls._instance

    @classmethod
    def clean_instance(cls) -> None:
        """
        Remove and close the handlers installed by the current instance.
        """
        if cls._instance is not None:
            cls._instance._remove_handlers()
        cls._instance = None

    @property
    def handlers(self) -> Sequence[logging.Handler]:
        return self._handlers

    def apply_options(self) -> None:
        """
        (Re)configure logging from the options in the `logging` config section.
        """
        config_file: Optional[str] = config.log_config_file.get()
        if config_file is not None:
            LOGGER.debug("Applying logging config from file %s", config_file)
            self._apply_logging_config(read_logging_config_file(config_file))
            return
        python_log_level = convert_log_level(config.log_level.get())
        self._apply_logging_config(get_console_logging_config(self._stream, python_log_level, config.log_timed.get()))

    def _remove_handlers(self) -> None:
        for handler in self._handlers:
            logging.root.removeHandler(handler)
            handler.close()
        self._handlers = []

    def _apply_logging_config(self, dict_config: Mapping[str, object]) -> None:
        """
        Replace the handlers installed by this instance by the ones defined in the given dict config.
        """
        self._remove_handlers()
        handlers_before = list(logging.root.handlers)
        try:
            logging.config.dictConfig(dict(dict_config))
        except Exception:
            raise Exception(f"Failed to apply the logging config defined in {dict_config}.")
        self._handlers = [handler for handler in logging.root.handlers if handler not in handlers_before]
