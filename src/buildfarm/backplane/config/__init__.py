"""
Module for handling the configuration of the buildfarm's backplane.
"""
from ._SYSTEMWIDE_CONFIG import SYSTEMWIDE_CONFIG
from ._BackplaneType import BackplaneType
from ._BuildfarmConfig import BuildfarmConfig, REDIS_URI_ENV_VAR
from .sections import BackplaneConfig
from ._util import str2bool, normalise, list_of, read_text_file
