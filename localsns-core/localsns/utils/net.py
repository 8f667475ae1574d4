import socket
from contextlib import closing
from typing import Union
from urllib.parse import urlparse


def is_port_open(port_or_url: Union[int, str], host: str = "localhost") -> bool:
    """
    Whether a TCP connection to the port can be established within a second.

    :param port_or_url: a port number, or a URL like ``http://localhost:4002``
    :param host: the host to connect to if only a port is given
    """
    port = port_or_url
    if isinstance(port_or_url, str):
        url = urlparse(port_or_url)
        host, port = url.hostname, url.port
    try:
        with socket.create_connection((host, int(port)), timeout=1):
            return True
    except OSError:
        return False


def get_free_tcp_port() -> int:
    """Returns a port which was free when asked, by letting the system pick one for a throwaway socket."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as sock:
        sock.bind(("", 0))
        return sock.getsockname()[1]
