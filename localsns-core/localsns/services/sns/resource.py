import logging

from localsns import constants
from localsns.aws.protocol.parser import parse_request_params
from localsns.aws.protocol.serializer import to_xml
from localsns.http import HTTP_METHODS, Request, Response, route
from localsns.services.sns import constants as sns_constants
from localsns.services.sns.actions import parse_action
from localsns.services.sns.provider import SnsProvider

LOG = logging.getLogger("localsns.request")


class SnsResource:
    """
    HTTP endpoints of the SNS emulator:

    - ``/``: the SNS query API, the ``Action`` parameter selects the operation.
    - ``/_localsns/health``: returns the status and version of the server.
    """

    def __init__(self, provider: SnsProvider):
        self.provider = provider

    @route("/", methods=HTTP_METHODS)
    def on_request(self, request: Request) -> Response:
        params = parse_request_params(request)
        action = parse_action(params)
        LOG.debug("Dispatching %s", action)
        document = self.provider.dispatch(action)
        return Response.for_xml(to_xml(document))

    @route(sns_constants.HEALTH_ENDPOINT, methods=["GET"])
    def on_get_health(self, request: Request):
        return {"status": "running", "version": constants.VERSION}
