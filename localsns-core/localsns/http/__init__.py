from rolo import Request
from rolo.routing import Router, route
from rolo.routing.handler import handler_dispatcher

from .response import Response

# methods accepted by the SNS endpoint, every request is dispatched by its ``Action`` parameter
HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE")

__all__ = [
    "HTTP_METHODS",
    "Request",
    "Response",
    "Router",
    "handler_dispatcher",
    "route",
]
