"""
Copyright (c) 2019, the Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details
"""

import random

import pytest

from bitscript import config
from bitscript.util import helpers


# Seed initialization is delegated to tests.
# random.seed(0)


@pytest.fixture
def randBytes():
    def _randBytes(low=0, high=50):
        return bytes(random.randint(0, 255) for _ in range(random.randint(low, high)))

    return _randBytes


@pytest.fixture(scope="module")
def prepareLogger(request):
    helpers.prepareLogging()


@pytest.fixture(autouse=True)
def isolatedConfig(tmp_path, monkeypatch):
    """
    Point the configuration at an empty temporary directory, so tests never
    read the user's bitscript.json.
    """
    monkeypatch.setattr(config, "CONFIG_PATH", str(tmp_path / "bitscript.json"))
    config.reset()
    yield
    config.reset()
