from enum import Enum


class BackplaneType(Enum):
    """
    The kinds of backplane the buildfarm can coordinate through.
    """
    SHARD = "SHARD"
