"""Non-blocking IPv4 TCP listening socket."""

from __future__ import annotations

import errno
import socket


class ListenSocket:
    """A TCP socket that accepts connections on one host and port."""

    def __init__(self, host: str = "0.0.0.0", port: int = 0) -> None:
        self.host = host
        self.port = port
        self.sock: socket.socket | None = None
        self.address: tuple[str, int] = ("0.0.0.0", port)
        self.is_listening = False

    def create(self) -> None:
        """Open a non-blocking socket with SO_REUSEADDR set.

        Raises OSError if the host is not an IPv4 address or the socket
        cannot be opened.
        """
        self.close()
        if self.host in ("", "0.0.0.0"):
            address = "0.0.0.0"
        else:
            socket.inet_pton(socket.AF_INET, self.host)
            address = self.host
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.setblocking(False)
        except OSError:
            sock.close()
            raise
        self.sock = sock
        self.address = (address, self.port)

    def _require_socket(self) -> socket.socket:
        if self.sock is None:
            raise OSError(errno.EBADF, "socket has not been created")
        return self.sock

    def bind(self) -> None:
        """Bind to the configured address. Raises OSError on failure."""
        self._require_socket().bind(self.address)

    def listen(self, backlog: int) -> None:
        """Start listening. Raises OSError on failure."""
        self._require_socket().listen(backlog)
        self.is_listening = True

    def accept(self) -> tuple[socket.socket, tuple[str, int]] | None:
        """Accept a pending connection as a non-blocking socket.

        Returns None when no connection is waiting.
        """
        sock = self._require_socket()
        try:
            conn, address = sock.accept()
        except (BlockingIOError, InterruptedError):
            return None
        conn.setblocking(False)
        return conn, address

    def close(self) -> None:
        """Close the socket; closing twice is harmless."""
        if self.sock is not None:
            self.sock.close()
            self.sock = None
        self.is_listening = False

    def fileno(self) -> int:
        """Return the socket's descriptor, or -1 when it is closed."""
        return self.sock.fileno() if self.sock is not None else -1