from localsns.constants import INTERNAL_RESOURCE_PATH

# protocols delivered by POSTing the notification to the subscription endpoint
SNS_PROTOCOLS = ("http", "https")

# placeholder for the signature fields of notifications, messages are never signed
PLACEHOLDER_VALUE = "EXAMPLE"

SIGNATURE_VERSION = "1"
EVENT_VERSION = "1.0"
EVENT_SOURCE = "aws:sns"

# user agent of the real service when delivering to HTTP(S) endpoints
SNS_USER_AGENT = "Amazon Simple Notification Service Agent"

# upper bound (exclusive) of the random suffix of subscription ARNs
SUBSCRIPTION_SUFFIX_BOUND = 1000000

HEALTH_ENDPOINT = f"{INTERNAL_RESOURCE_PATH}/health"
