import logging
import threading

from rolo.gateway import Gateway
from rolo.gateway.wsgi import WsgiGateway
from werkzeug.serving import WSGIRequestHandler, make_server

from localsns.utils.net import is_port_open
from localsns.utils.sync import poll_condition

LOG = logging.getLogger(__name__)


class QuietRequestHandler(WSGIRequestHandler):
    def log_request(self, code="-", size="-"):
        # requests are logged by the gateway
        pass


class GatewayServer:
    """
    Serves a gateway with a threaded werkzeug server, each request is handled in its own thread. The server
    binds its socket on creation, ``start`` runs the accept loop in a daemon thread.
    """

    def __init__(self, gateway: Gateway, port: int, host: str = "localhost") -> None:
        self.gateway = gateway
        self.host = host
        self.port = port
        self.server = make_server(
            host,
            port,
            app=WsgiGateway(gateway),
            threaded=True,
            request_handler=QuietRequestHandler,
        )
        self._thread = threading.Thread(target=self._serve, name="gateway-server", daemon=True)
        self._lock = threading.Lock()
        self._stopped = False

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def _serve(self):
        LOG.info("starting gateway server on %s", self.url)
        try:
            self.server.serve_forever()
        finally:
            self.server.server_close()
            LOG.debug("gateway server on %s returning", self.url)

    def start(self) -> None:
        self._thread.start()

    def is_running(self) -> bool:
        return self._thread.is_alive()

    def is_up(self) -> bool:
        return self.is_running() and is_port_open(self.url)

    def wait_is_up(self, timeout: float = None) -> bool:
        return poll_condition(self.is_up, timeout=timeout, interval=0.1)

    def join(self, timeout: float = None) -> None:
        self._thread.join(timeout)

    def shutdown(self) -> None:
        """Stops the accept loop and closes the socket. Calling it more than once has no effect."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            if self._thread.ident is None:
                self.server.server_close()
            else:
                self.server.shutdown()
                self._thread.join()
