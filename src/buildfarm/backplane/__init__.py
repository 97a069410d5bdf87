from ._logging import init_logger, logger
from .config import BackplaneConfig, BackplaneType, BuildfarmConfig, SYSTEMWIDE_CONFIG
