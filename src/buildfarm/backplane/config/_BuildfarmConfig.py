import configparser
import os
from typing import Any, Mapping, Optional

import yaml

from .._logging import logger
from .sections import BackplaneConfig
from ._SYSTEMWIDE_CONFIG import SYSTEMWIDE_CONFIG

REDIS_URI_ENV_VAR = "REDIS_URI"
"""Environment variable which overrides the configured Redis URI."""

YAML_EXTENSIONS = (".yml", ".yaml")
"""Extensions of configuration files in YAML format. Any other file is read as INI."""


class BuildfarmConfig:
    """
    Represents a loaded configuration file for the buildfarm. Only the backplane
    section is parsed; other sections are left to their own consumers.
    """
    def __init__(
            self,
            config_file: Optional[str] = None,
            redis_uri: Optional[str] = None
    ):
        """
        :param config_file:
                    The configuration file to load. None for the system-wide one.
        :param redis_uri:
                    Overrides the configured Redis URI. If None, the REDIS_URI
                    environment variable is used instead, if set.
        """
        # Use the system configuration if no other is provided
        if config_file is None:
            config_file = SYSTEMWIDE_CONFIG

        # Check the file exists
        if not os.path.exists(config_file):
            raise Exception(f"Config file '{config_file}' does not exist!")

        logger().debug(f"Loading configuration from: {config_file}")

        # Do the raw parse of the config file
        raw = read_raw_config(config_file)
        section = BackplaneConfig.SECTION_NAME

        # Apply the Redis URI override
        if redis_uri is None:
            redis_uri = os.environ.get(REDIS_URI_ENV_VAR) or None
        if redis_uri is not None:
            logger().debug("Overriding the configured Redis URI")
            raw = dict(raw)
            raw[section] = {**section_values(raw, section), "redisUri": redis_uri}

        warn_deprecated(section_values(raw, section), config_file)

        # Parse the individual sections of the configuration file
        self._backplane = BackplaneConfig(section, raw, config_file)

    @property
    def backplane(self) -> BackplaneConfig:
        return self._backplane


def read_raw_config(config_file: str) -> Mapping[str, Mapping[str, Any]]:
    """
    Reads a configuration file into a mapping from section names to raw values.

    :param config_file:
                The file to read, YAML if it has a YAML extension, otherwise INI.
    :return:
                The raw sections.
    """
    if config_file.lower().endswith(YAML_EXTENSIONS):
        with open(config_file, "r", encoding="utf-8") as file:
            try:
                document = yaml.safe_load(file)
            except yaml.YAMLError as e:
                raise ValueError(f"Error in config file '{config_file}': invalid YAML\n{e}") from e

        if document is None:
            return {}
        if not isinstance(document, Mapping):
            raise ValueError(f"Error in config file '{config_file}': top level is not a mapping")
        return document

    config = configparser.ConfigParser(interpolation=None)
    # Keys are case-sensitive, as in YAML
    config.optionxform = str
    config.read(config_file, encoding="utf-8")
    return config


def section_values(raw: Mapping[str, Any], section: str) -> Mapping[str, Any]:
    """
    Gets the raw values of a section, or an empty mapping if the section is
    missing, empty or malformed (which parsing the section reports).
    """
    values = raw[section] if section in raw else None
    if not isinstance(values, Mapping):
        return {}
    return values


def warn_deprecated(values: Mapping[str, Any], config_file: str):
    """
    Warns about deprecated backplane keys, which are accepted but ignored.

    :param values:
                The raw values of the backplane section.
    :param config_file:
                The file the values were read from.
    """
    for key in BackplaneConfig.DEPRECATED_KEYS:
        if values.get(key) is not None:
            logger().warning(f"'{key}' in config file '{config_file}' is deprecated and has no effect")
