import pytest

from localsns.aws.app import SnsGateway
from localsns.aws.serving.werkzeug import GatewayServer
from localsns.utils import net
from localsns.utils.sync import poll_condition


@pytest.fixture
def serve_gateway():
    _servers = []

    def _create(gateway: SnsGateway) -> GatewayServer:
        srv = GatewayServer(gateway, port=net.get_free_tcp_port(), host="localhost")
        _servers.append(srv)
        srv.start()
        assert srv.wait_is_up(timeout=10), "gave up waiting for server to start up"
        return srv

    yield _create

    for server in _servers:
        server.shutdown()
        server.gateway.shutdown()
        assert poll_condition(
            lambda: not server.is_up(), timeout=10
        ), "gave up waiting for server to shut down"
