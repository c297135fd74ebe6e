"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, the Decred developers
Copyright (c) 2024, the bitscript developers
See LICENSE for details

Configuration settings for bitscript. The configuration file is JSON
formatted and optional: when it doesn't exist, the defaults apply.
"""

import json
import os

from appdirs import AppDirs

from bitscript import BitscriptError
from bitscript.util import helpers


# The configuration lives in an OS-appropriate location. The directory is
# only created when a configuration is saved.
_ad = AppDirs("bitscript", False)
CONFIG_DIR = _ad.user_config_dir

# The master configuration file name.
CONFIG_NAME = "bitscript.json"
CONFIG_PATH = os.path.join(CONFIG_DIR, CONFIG_NAME)

DEFAULTS = {
    # OP_DUP copies the top of the stack instead of the bottom item.
    "dupFromTop": False,
    # Optional upper bound for scripts and witness items read from a
    # transaction. null keeps the protocol limits.
    "maxScriptSize": None,
    "logLevel": "info",
    "moduleLevels": {},
}

log = helpers.getLogger("CONFIG")


class Config:
    """
    Config is a set of configuration settings, defaults overlaid with
    whatever the configuration file holds. Keys this version doesn't know are
    kept and saved back.
    """

    def __init__(self, settings=None, path=None):
        self.path = path
        self.file = json.loads(json.dumps(DEFAULTS))
        if settings:
            self.file.update(settings)
        self.normalize()

    @staticmethod
    def fromFile(path):
        """
        Load the configuration file at path. A missing file gives the
        defaults.

        Args:
            path (str): The file path.

        Returns:
            Config: The configuration.
        """
        if not os.path.isfile(path):
            log.debug(f"no configuration file at {path}, using defaults")
            return Config(path=path)
        with open(path) as f:
            try:
                settings = json.load(f)
            except json.JSONDecodeError as e:
                raise BitscriptError(f"malformed configuration file {path}: {e}")
        if not isinstance(settings, dict):
            raise BitscriptError(f"configuration file {path} must hold a JSON object")
        return Config(settings, path=path)

    def set(self, k, v):
        """
        Set the configuration option. The configuration is not saved, so `save`
        should be called separately.

        Args:
            k (str): The setting key.
            v (JSON-encodable): The value.
        """
        settings = dict(self.file)
        settings[k] = v
        self.normalize(settings)
        self.file = settings

    def get(self, *keys):
        """
        Retrieve the setting at the provided key path. Multiple keys can be
        provided, with each successive key being retrieved from the previous
        key's value.

        Args:
            *keys (str): Recursive key list.

        Returns:
            mixed: The configuration value, or None if the path doesn't exist.
        """
        d = self.file
        for k in keys:
            if not isinstance(d, dict) or k not in d:
                return None
            d = d[k]
        return d

    def normalize(self, file=None):
        """
        Perform type checks on the known settings.

        Args:
            file (dict): The settings to check. Defaults to the current ones.
        """
        file = self.file if file is None else file
        if not isinstance(file["dupFromTop"], bool):
            raise BitscriptError("dupFromTop must be true or false")
        maxSize = file["maxScriptSize"]
        if maxSize is not None and (
            isinstance(maxSize, bool) or not isinstance(maxSize, int) or maxSize < 0
        ):
            raise BitscriptError("maxScriptSize must be null or a non-negative integer")
        try:
            helpers.levelFromName(file["logLevel"])
            for lvl in file["moduleLevels"].values():
                helpers.levelFromName(lvl)
        except (ValueError, AttributeError) as e:
            raise BitscriptError(f"bad log level setting: {e}")

    @property
    def dupFromTop(self):
        return self.file["dupFromTop"]

    @property
    def maxScriptSize(self):
        return self.file["maxScriptSize"]

    @property
    def logLevel(self):
        return helpers.levelFromName(self.file["logLevel"])

    def applyLogging(self, filepath=None):
        """
        Configure logging from the logLevel and moduleLevels settings.

        Args:
            filepath (str): Optional path for a rotating log file.
        """
        lvlMap = {
            name: helpers.levelFromName(lvl)
            for name, lvl in self.file["moduleLevels"].items()
        }
        helpers.prepareLogging(filepath, logLvl=self.logLevel, lvlMap=lvlMap)

    def save(self, path=None):
        """
        Save the file.

        Args:
            path (str): Where to save. Defaults to the path the configuration
                was loaded from, then to CONFIG_PATH.
        """
        path = path or self.path or CONFIG_PATH
        helpers.mkdir(os.path.dirname(path) or ".")
        with open(path, "w") as f:
            json.dump(self.file, f, indent=4, sort_keys=True)
        self.path = path


bitscriptConfig = None


def load(path=None):
    """
    Load and return the current configuration.

    The configuration is only loaded once. Successive calls to the modular
    `load` function will return the same instance until `reset` is called.

    Args:
        path (str): The configuration file. Defaults to CONFIG_PATH.

    Returns:
        Config: The current configuration.
    """
    global bitscriptConfig
    if not bitscriptConfig:
        bitscriptConfig = Config.fromFile(path or CONFIG_PATH)
    return bitscriptConfig


def reset():
    """
    Forget the loaded configuration, so the next `load` reads the file again.
    """
    global bitscriptConfig
    bitscriptConfig = None
