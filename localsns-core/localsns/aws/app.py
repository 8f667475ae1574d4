from rolo.gateway import Gateway
from rolo.gateway.handlers import RouterHandler

from localsns.aws import handlers
from localsns.http import Router, handler_dispatcher
from localsns.services.sns.provider import SnsProvider
from localsns.services.sns.resource import SnsResource


class SnsGateway(Gateway):
    """
    The gateway serving the SNS API. Preflight requests are answered right away, everything else is routed to
    the endpoints of a ``SnsResource`` backed by the given provider. Every response gets CORS headers and is
    logged on ``localsns.request``.
    """

    def __init__(self, provider: SnsProvider = None) -> None:
        self.provider = provider or SnsProvider()
        self.router = Router(dispatcher=handler_dispatcher())
        self.router.add(SnsResource(self.provider))

        super().__init__(
            request_handlers=[
                handlers.answer_preflight,
                RouterHandler(self.router, respond_not_found=True),
            ],
            response_handlers=[
                handlers.add_cors_headers,
                handlers.log_response,
            ],
            exception_handlers=[
                handlers.log_exception,
                handlers.return_internal_failure,
            ],
        )

    def shutdown(self):
        self.provider.shutdown()
