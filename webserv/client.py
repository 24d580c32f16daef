"""One accepted connection and the request/response it carries."""

from __future__ import annotations

import socket
import time

from webserv.http_request import HttpRequest
from webserv.http_response import HttpResponse
from webserv.request_handler import RequestHandler
from webserv.server_config import ServerConfig

_RECV_SIZE = 8192


class Client:
    """Buffers data for a connection and turns requests into responses."""

    def __init__(
        self,
        sock: socket.socket | None = None,
        address: tuple[str, int] | None = None,
    ) -> None:
        self.sock = sock
        self.fd = sock.fileno() if sock is not None else -1
        self.address = address
        self.request = HttpRequest()
        self.response = HttpResponse()
        self.read_buffer = b""
        self.write_buffer = b""
        self.keep_alive = True
        self.last_activity = time.time()
        self.server_config: ServerConfig | None = None

    def _socket(self) -> socket.socket:
        if self.sock is None:
            raise OSError("connection is closed")
        return self.sock

    def read(self) -> int | None:
        """Receive available data into the request.

        Returns the number of bytes read, 0 when the peer closed the
        connection, or None when nothing was available. Raises OSError
        on a socket error.
        """
        try:
            data = self._socket().recv(_RECV_SIZE)
        except (BlockingIOError, InterruptedError):
            return None
        if not data:
            return 0
        self.read_buffer += data
        self.request.append_data(data)
        self.last_activity = time.time()
        return len(data)

    def write(self) -> int:
        """Send as much of the write buffer as the socket takes.

        Returns the number of bytes sent. Raises OSError on a socket error.
        """
        if not self.write_buffer:
            return 0
        try:
            sent = self._socket().send(self.write_buffer)
        except (BlockingIOError, InterruptedError):
            return 0
        if sent > 0:
            self.write_buffer = self.write_buffer[sent:]
            self.last_activity = time.time()
        return sent

    def process_request(self) -> None:
        """Build the response for the received request."""
        if self.server_config is None:
            return
        self.response.clear()
        RequestHandler(self.request, self.response, self.server_config).handle()
        self.keep_alive = self.request.keep_alive()
        self.response.add_header("Connection", "keep-alive" if self.keep_alive else "close")

    def prepare_response(self) -> None:
        """Serialise the response into the write buffer."""
        self.write_buffer = self.response.build()

    def is_read_complete(self) -> bool:
        return self.request.is_complete

    def is_write_complete(self) -> bool:
        return not self.write_buffer

    def reset(self) -> None:
        """Get ready for the next request on a kept-alive connection."""
        self.request = HttpRequest()
        self.response.clear()
        self.read_buffer = b""
        self.write_buffer = b""

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None
        self.fd = -1

    def is_timeout(self, current_time: float, timeout: float) -> bool:
        """Return True if the connection has been idle longer than timeout."""
        return current_time - self.last_activity > timeout

    def client_ip(self) -> str:
        """Return the peer's address, or '0.0.0.0' if it is unknown."""
        if not self.address:
            return "0.0.0.0"
        return str(self.address[0])