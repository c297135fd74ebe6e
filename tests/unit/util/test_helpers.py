"""
Copyright (c) 2019-2020, the Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details
"""

import logging
import os

import pytest

from bitscript import BitscriptError
from bitscript.util import helpers


def test_formatTraceback():
    try:
        raise BitscriptError("test error")
    except BitscriptError as e:
        formatted = helpers.formatTraceback(e)
    assert "test error" in formatted
    assert "Traceback" in formatted


def test_mkdir(tmp_path):
    # Directory already exists.
    assert helpers.mkdir(tmp_path)

    # Path is an existing file.
    filePath = tmp_path / "some_file"
    filePath.touch()
    assert not helpers.mkdir(filePath)

    newDir = tmp_path / "a" / "b"
    assert helpers.mkdir(newDir)
    assert os.path.isdir(newDir)


def test_levelFromName():
    assert helpers.levelFromName("DEBUG") == logging.DEBUG
    assert helpers.levelFromName("warning") == logging.WARNING
    assert helpers.levelFromName(15) == 15
    with pytest.raises(ValueError):
        helpers.levelFromName("chatty")


def test_prepareLogging(tmp_path):
    logger = helpers.getLogger("HELPERSTEST")
    assert logger.name == "bitscript.HELPERSTEST"
    try:
        helpers.prepareLogging(
            str(tmp_path / "log"),
            logLvl=logging.WARNING,
            lvlMap={"HELPERSTEST": logging.DEBUG},
        )
        # Existing loggers are updated.
        assert logger.level == logging.DEBUG
        assert helpers.getLogger("HELPERSTEST2").level == logging.WARNING
        assert len(helpers.LogSettings.handlers) == 2

        # Handlers are replaced, not accumulated.
        helpers.prepareLogging()
        assert len(helpers.LogSettings.handlers) == 1
    finally:
        helpers.LogSettings.moduleLevels.pop("HELPERSTEST", None)
        helpers.prepareLogging()
