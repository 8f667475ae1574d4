import os
from typing import NamedTuple, Union

from localsns import constants
from localsns.constants import (
    BIND_HOST,
    DEFAULT_ACCOUNT_ID,
    DEFAULT_PORT_EDGE,
    DEFAULT_REGION,
    LOG_LEVELS,
    TRACE_LOG_LEVELS,
    TRUE_STRINGS,
)


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Returns the lower-cased log level set in the variable, or False if it is not a known level."""
    value = _env(env_var_name).lower()
    return value if value in LOG_LEVELS else False


def is_env_true(env_var_name: str) -> bool:
    return _env(env_var_name).lower() in TRUE_STRINGS


class HostAndPort(NamedTuple):
    """An address the server listens on, ``str()`` renders it as ``host:port``."""

    host: str
    port: int

    @classmethod
    def parse(cls, value: str, default_host: str, default_port: int) -> "HostAndPort":
        """
        Parses ``host``, ``host:port`` or ``:port``. The missing part is taken from the defaults.

        :raises ValueError: if the port is not a number between 0 and 65535
        """
        host, _, port = value.strip().partition(":")
        host = host.strip() or default_host
        if not port:
            return cls(host, default_port)
        if not port.isdigit():
            raise ValueError(f"invalid port {port!r}")
        if int(port) > 65535:
            raise ValueError(f"port {port} out of range")
        return cls(host, int(port))

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


# log level of the localsns loggers (trace, debug, info, warn, error)
LS_LOG = eval_log_type("LS_LOG")
DEBUG = is_env_true("DEBUG") or LS_LOG in TRACE_LOG_LEVELS


def is_trace_logging_enabled() -> bool:
    return bool(LS_LOG) and LS_LOG in TRACE_LOG_LEVELS


# address the gateway listens on
GATEWAY_LISTEN = HostAndPort.parse(
    _env("GATEWAY_LISTEN"), default_host=BIND_HOST, default_port=DEFAULT_PORT_EDGE
)

# region and account used to build topic ARNs and to resolve pseudo parameters like #{AWS::AccountId}
SNS_REGION = _env("SNS_REGION") or DEFAULT_REGION
SNS_ACCOUNT_ID = _env("SNS_ACCOUNT_ID") or DEFAULT_ACCOUNT_ID

# number of worker threads delivering notifications to subscribers
SNS_PUBLISH_WORKERS = int(_env("SNS_PUBLISH_WORKERS") or 10)

# seconds a delivery may take to connect and to receive the response, so a hung endpoint frees its worker
SNS_DELIVERY_TIMEOUT = float(_env("SNS_DELIVERY_TIMEOUT") or 10)

# whether to disable returning CORS headers entirely
DISABLE_CORS_HEADERS = is_env_true("DISABLE_CORS_HEADERS")
EXTRA_CORS_ALLOWED_HEADERS = _env("EXTRA_CORS_ALLOWED_HEADERS")
EXTRA_CORS_EXPOSE_HEADERS = _env("EXTRA_CORS_EXPOSE_HEADERS")

# variables shown by `localsns config show`
CONFIG_ENV_VARS = [
    "DEBUG",
    "DISABLE_CORS_HEADERS",
    "EXTRA_CORS_ALLOWED_HEADERS",
    "EXTRA_CORS_EXPOSE_HEADERS",
    "GATEWAY_LISTEN",
    "LS_LOG",
    "SNS_ACCOUNT_ID",
    "SNS_DELIVERY_TIMEOUT",
    "SNS_PUBLISH_WORKERS",
    "SNS_REGION",
]


def get_config_values() -> dict:
    """Returns the effective value of each variable listed in ``CONFIG_ENV_VARS``."""
    module = globals()
    return {key: module.get(key) for key in CONFIG_ENV_VARS}


def external_service_url(host: str = None, port: int = None, protocol: str = "http") -> str:
    """Returns the URL clients can use to reach the gateway from the local machine."""
    host = host or constants.LOCALHOST
    port = port or GATEWAY_LISTEN.port
    return f"{protocol}://{host}:{port}"
