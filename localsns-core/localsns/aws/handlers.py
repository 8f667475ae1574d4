"""Handlers of the localsns gateway handler chain."""
import logging
import re

from flask_cors.core import (
    ACL_ALLOW_HEADERS,
    ACL_EXPOSE_HEADERS,
    ACL_METHODS,
    ACL_ORIGIN,
    ACL_REQUEST_HEADERS,
)
from rolo.gateway import HandlerChain, RequestContext
from werkzeug.exceptions import HTTPException

from localsns import config
from localsns.constants import INTERNAL_RESOURCE_PATH
from localsns.http import HTTP_METHODS, Response

LOG = logging.getLogger(__name__)

# headers sent by the AWS SDKs and CLIs, on top of those a browser sends anyway
CORS_ALLOWED_HEADERS = [
    "authorization",
    "content-type",
    "x-amz-date",
    "x-amz-security-token",
    "x-amz-user-agent",
    "amz-sdk-invocation-id",
    "amz-sdk-request",
] + [header for header in config.EXTRA_CORS_ALLOWED_HEADERS.split(",") if header]

CORS_EXPOSE_HEADERS = ["x-amzn-requestid"] + [
    header for header in config.EXTRA_CORS_EXPOSE_HEADERS.split(",") if header
]


def answer_preflight(chain: HandlerChain, context: RequestContext, response: Response):
    """Answers CORS preflight requests with an empty 204, every origin is allowed."""
    if context.request.method == "OPTIONS":
        response.status_code = 204
        chain.stop()


def add_cors_headers(chain: HandlerChain, context: RequestContext, response: Response):
    """Adds permissive CORS headers to every response, unless DISABLE_CORS_HEADERS is set."""
    if config.DISABLE_CORS_HEADERS:
        return

    headers = response.headers
    requested_headers = re.split(r"[,\s]+", context.request.headers.get(ACL_REQUEST_HEADERS, ""))
    headers.setdefault(ACL_ORIGIN, "*")
    headers.setdefault(ACL_METHODS, ",".join(HTTP_METHODS))
    headers.setdefault(
        ACL_ALLOW_HEADERS, ",".join(h for h in requested_headers + CORS_ALLOWED_HEADERS if h)
    )
    headers.setdefault(ACL_EXPOSE_HEADERS, ",".join(CORS_EXPOSE_HEADERS))


class ResponseLogger:
    """
    Logs every request together with the status of its response on the ``localsns.request`` logger.
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger("localsns.request")

    def __call__(self, _: HandlerChain, context: RequestContext, response: Response):
        if context.request.path.startswith(INTERNAL_RESOURCE_PATH):
            # health checks would drown everything else
            return
        self.logger.info(
            "%s %s => %d",
            context.request.method,
            context.request.path,
            response.status_code,
        )


def log_exception(
    chain: HandlerChain, exception: Exception, context: RequestContext, response: Response
):
    request = context.request
    if LOG.isEnabledFor(logging.DEBUG):
        LOG.exception(
            "Error while serving %s %s", request.method, request.path, exc_info=exception
        )
    else:
        LOG.error("Error while serving %s %s: %s", request.method, request.path, exception)


def return_internal_failure(
    chain: HandlerChain, exception: Exception, context: RequestContext, response: Response
):
    """
    Turns an exception into a JSON error response. ``HTTPException`` keeps its status code, anything else
    becomes a 500.
    """
    if isinstance(exception, HTTPException):
        response.status_code = exception.code
        response.set_json({"error": exception.name, "message": exception.description})
        return

    response.status_code = 500
    response.set_json(
        {
            "error": "Unexpected exception",
            "message": str(exception),
            "type": exception.__class__.__name__,
        }
    )


log_response = ResponseLogger()
