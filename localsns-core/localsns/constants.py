import localsns.version

# localsns version
VERSION = localsns.version.__version__

# default port the gateway listens on
DEFAULT_PORT_EDGE = 4002

# host name for localhost
LOCALHOST = "localhost"

# host to bind to when starting the server
BIND_HOST = "0.0.0.0"

# region and account used to build ARNs if nothing else is configured
DEFAULT_REGION = "us-east-1"
DEFAULT_ACCOUNT_ID = "123456789012"

# API path for localsns internal resources
INTERNAL_RESOURCE_PATH = "/_localsns"

# content types
APPLICATION_JSON = "application/json"
TEXT_XML = "text/xml"

# strings to indicate truthy values in environment variables
TRUE_STRINGS = ("1", "true", "True")

# log levels
LS_LOG_TRACE = "trace"
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
TRACE_LOG_LEVELS = [LS_LOG_TRACE]
