from typing import Any, Dict, Mapping, Optional, Tuple

from ..base import ConfigSection, ConfigProperty, REDACTED
from .._BackplaneType import BackplaneType
from .._uri import get_password, mask_password
from .._util import enum_member, integer, list_of, read_text_file, records, str2bool, string, thaw


class BackplaneConfig(ConfigSection):
    """
    Configuration of the buildfarm's backplane, the shared Redis store used for
    queues, caches and worker registries. Expirations are in seconds and a value
    of 0 means no expiry; timeouts are as noted per property.

    Loaded once and read-only thereafter. The raw credential properties are
    private; use redis_username and get_redis_password() to get the effective
    credentials, and get_redis_uri_masked() to display the connection URI.
    """
    SECTION_NAME = "backplane"

    type: BackplaneType = ConfigProperty(enum_member(BackplaneType), default=BackplaneType.SHARD)

    # Connectivity
    redis_uri: Optional[str] = ConfigProperty(string, optional=True)
    """The URI of the Redis server, possibly with an embedded password."""

    redis_nodes: Tuple[str, ...] = ConfigProperty(list_of(string, sep=','), default=())
    """Additional node addresses of a Redis cluster."""

    redis_certificate_authority_file: Optional[str] = ConfigProperty(string, optional=True)
    """
    Path to a CA.pem for the Redis TLS. If specified, ONLY this root CA is
    trusted (it is not added to the defaults).
    """

    jedis_pool_max_total: int = ConfigProperty(integer, default=4000)
    """The maximum number of pooled connections."""

    timeout: int = ConfigProperty(integer, default=10000)
    """Timeout of Redis operations, in milliseconds."""

    max_attempts: int = ConfigProperty(integer, default=20)
    """The number of connection attempts before giving up."""

    # Credentials
    _redis_username: Optional[str] = ConfigProperty(string, optional=True)
    _redis_password: Optional[str] = ConfigProperty(string, optional=True, secret=True)
    _redis_credential_file: Optional[str] = ConfigProperty(string, optional=True)

    # Key-space
    workers_hash_name: str = ConfigProperty(string, default="Workers")
    worker_channel: str = ConfigProperty(string, default="WorkerChannel")
    action_cache_prefix: str = ConfigProperty(string, default="ActionCache")
    action_cache_expire: int = ConfigProperty(integer, default=2419200)  # 4 weeks
    action_blacklist_prefix: str = ConfigProperty(string, default="ActionBlacklist")
    action_blacklist_expire: int = ConfigProperty(integer, default=3600)  # 1 hour
    invocation_blacklist_prefix: str = ConfigProperty(string, default="InvocationBlacklist")
    operation_prefix: str = ConfigProperty(string, default="Operation")
    operation_expire: int = ConfigProperty(integer, default=604800)  # 1 week
    pre_queued_operations_list_name: str = ConfigProperty(string, default="{Arrival}:PreQueuedOperations")
    processing_list_name: str = ConfigProperty(string, default="{Arrival}:ProcessingOperations")
    processing_prefix: str = ConfigProperty(string, default="Processing")
    processing_timeout_millis: int = ConfigProperty(integer, default=20000)
    queued_operations_list_name: str = ConfigProperty(string, default="{Execution}:QueuedOperations")
    dispatching_prefix: str = ConfigProperty(string, default="Dispatching")
    dispatching_timeout_millis: int = ConfigProperty(integer, default=10000)
    dispatched_operations_hash_name: str = ConfigProperty(string, default="DispatchedOperations")
    operation_channel_prefix: str = ConfigProperty(string, default="OperationChannel")
    cas_prefix: str = ConfigProperty(string, default="ContentAddressableStorage")
    cas_expire: int = ConfigProperty(integer, default=604800)  # 1 week
    correlated_invocations_index_prefix: str = ConfigProperty(string, default="CorrelatedInvocationsIndex")
    max_correlated_invocations_index_timeout: int = ConfigProperty(integer, default=3 * 24 * 60 * 60)
    correlated_invocations_prefix: str = ConfigProperty(string, default="CorrelatedInvocation")
    max_correlated_invocations_timeout: int = ConfigProperty(integer, default=7 * 24 * 60 * 60)
    tool_invocations_prefix: str = ConfigProperty(string, default="ToolInvocation")
    max_tool_invocation_timeout: int = ConfigProperty(integer, default=604800)

    # Queueing
    max_queue_depth: int = ConfigProperty(integer, default=100000)
    max_pre_queue_depth: int = ConfigProperty(integer, default=1000000)
    priority_queue: bool = ConfigProperty(str2bool, default=False)
    queues: Tuple[Mapping[str, Any], ...] = ConfigProperty(records, default=())
    """The queue definitions, in order. Each is passed on as-is."""

    priority_poll_interval_millis: int = ConfigProperty(integer, default=100)
    """Interval between polls of a priority queue, which can't be popped blocking."""

    cache_cas: bool = ConfigProperty(str2bool, default=False)
    """Whether to cache CAS entries locally in front of the backplane."""

    # Deprecated, parsed so old files still load but without effect
    _subscribe_to_backplane: bool = ConfigProperty(str2bool, default=True)
    _run_failsafe_operation: bool = ConfigProperty(str2bool, default=True)

    DEPRECATED_KEYS = ("subscribeToBackplane", "runFailsafeOperation")
    """Keys which are still accepted, but no longer have any effect."""

    @property
    def redis_username(self) -> Optional[str]:
        """The Redis username, or None if unset."""
        return self._redis_username or None

    def get_redis_password(self) -> Optional[str]:
        """
        Looks in several prioritised places for the Redis password:

        1. the password in the Redis URI;
        2. the contents of the redisCredentialFile (read on every call);
        3. the redisPassword.

        :return:
                    The Redis password, or None if unset.
        :raises ValueError:
                    If the Redis URI is malformed.
        :raises OSError:
                    If the credential file is set but can't be read.
        """
        if self.redis_uri:
            password = get_password(self.redis_uri)
            if password:
                return password

        if self._redis_credential_file:
            return read_text_file(self._redis_credential_file)

        return self._redis_password or None

    def get_redis_uri_masked(self) -> Optional[str]:
        """
        Gets the Redis URI for display, with its password hidden.

        :return:
                    The Redis URI with the password replaced, or None if unset.
        :raises ValueError:
                    If the Redis URI is malformed.
        """
        if not self.redis_uri:
            return self.redis_uri

        return mask_password(self.redis_uri, REDACTED)

    def to_display_dict(self) -> Dict[str, Any]:
        display = super().to_display_dict()
        display["type"] = self.type.value

        # A URI which can't be parsed can't be masked either, so hide all of it
        try:
            display["redisUri"] = self.get_redis_uri_masked()
        except ValueError:
            display["redisUri"] = REDACTED

        display["queues"] = thaw(self.queues)
        display["redisNodes"] = list(self.redis_nodes)
        for key in self.DEPRECATED_KEYS:
            del display[key]
        return display
