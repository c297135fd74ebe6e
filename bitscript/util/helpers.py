"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details
"""

import logging
from logging import Logger
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
import sys
import traceback
from typing import Dict, Optional, Union


# Level names accepted in configuration files.
LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def formatTraceback(err: Exception) -> str:
    """
    Format a traceback for an error so that it can go into logs.

    Args:
        err: The error the traceback is extracted from.

    Returns:
        The __str__() of the error, followed by the standard formatting
            of the traceback on the following lines.
    """
    return "".join(traceback.format_exception(None, err, err.__traceback__))


def mkdir(path: Union[Path, str]) -> bool:
    """
    Create the directory if it doesn't exist.

    Args:
        path: the directory path.

    Returns:
        False if a regular file is in the way, True otherwise.
    """
    if os.path.isdir(path):
        return True
    if os.path.isfile(path):
        return False
    os.makedirs(path)
    return True


def levelFromName(name: Union[str, int]) -> int:
    """
    Convert a level name such as "debug" to a logging level. Integers pass
    through unchanged.
    """
    if isinstance(name, int):
        return name
    try:
        return LEVELS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown log level {name!r}")


class LogSettings:
    """
    Used to track a few logging-related settings.
    """

    root = logging.getLogger("bitscript")
    defaultLevel = logging.INFO
    moduleLevels: Dict[str, int] = {}
    loggers: Dict[str, Logger] = {}
    handlers: list = []


LogSettings.root.setLevel(logging.NOTSET)


def prepareLogging(
    filepath: Union[Path, str, None] = None,
    logLvl: int = logging.INFO,
    lvlMap: Optional[Dict[str, int]] = None,
) -> None:
    """
    Prepare for using getLogger. Logs to stdout. If filepath is provided, log
    outputs will be saved to a rotating log file at the specified location. Any
    loggers, both future loggers and those already created, will have their
    levels set according to the new logLvl and lvlMap. Handlers installed by a
    previous call are replaced.

    Args:
        filepath: The base name for the rotating log file.
        logLvl: The default logging level used for all new loggers without
            entries in the lvlMap.
        lvlMap: The name->level mapping will be added to the stored level dict,
            which is referenced when loggers are created using getLogger.
    """
    LogSettings.defaultLevel = logLvl
    LogSettings.moduleLevels.update(lvlMap if lvlMap else {})
    for name, logger in LogSettings.loggers.items():
        logger.setLevel(LogSettings.moduleLevels.get(name, LogSettings.defaultLevel))

    for handler in LogSettings.handlers:
        LogSettings.root.removeHandler(handler)
        handler.close()
    LogSettings.handlers = []

    log_formatter = logging.Formatter(
        "%(asctime)s %(module)s %(levelname)s %(funcName)s(%(lineno)d) %(message)s"
    )
    if filepath:
        fileHandler = RotatingFileHandler(
            filepath,
            mode="a",
            maxBytes=5 * 1024 * 1024,
            backupCount=2,
            encoding=None,
            delay=False,
        )
        fileHandler.setFormatter(log_formatter)
        LogSettings.handlers.append(fileHandler)
    if not sys.executable.endswith("pythonw.exe"):
        # Skip adding the stdout handler for pythonw in windows.
        printHandler = logging.StreamHandler()
        printHandler.setFormatter(log_formatter)
        LogSettings.handlers.append(printHandler)
    for handler in LogSettings.handlers:
        LogSettings.root.addHandler(handler)


def getLogger(name: str) -> Logger:
    """
    Gets a named logger. If the name has a log level registered with
    prepareLogging, that level will be used, otherwise the default is used.

    Args:
        name: The logger name.
    """
    l = LogSettings.root.getChild(name)
    l.setLevel(LogSettings.moduleLevels.get(name, LogSettings.defaultLevel))
    LogSettings.loggers[name] = l
    return l
