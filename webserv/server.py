"""Event loop serving all configured virtual servers."""

from __future__ import annotations

import os
import selectors
import time

from webserv.client import Client
from webserv.config_parser import ConfigParser
from webserv.listen_socket import ListenSocket
from webserv.logger import get_logger
from webserv.server_config import ServerConfig

CLIENT_TIMEOUT = 30
LISTEN_BACKLOG = 256
_POLL_INTERVAL = 1.0


class Server:
    """Accepts connections and serves requests with a readiness selector."""

    def __init__(self) -> None:
        self.server_configs: list[ServerConfig] = []
        self.is_running = False
        self._listen_sockets: list[ListenSocket] = []
        self._listen_config: dict[int, ServerConfig] = {}
        self._clients: dict[int, Client] = {}
        self._selector: selectors.BaseSelector | None = None

    def load_config(self, config_file: str | os.PathLike[str]) -> None:
        """Replace the configurations with those read from a file.

        Raises ConfigError if the file cannot be parsed.
        """
        self.server_configs = ConfigParser(config_file).parse()

    def add_server_config(self, config: ServerConfig) -> None:
        self.server_configs.append(config)

    def init(self) -> None:
        """Open the listening sockets. Raises RuntimeError if none can be used."""
        if not self.server_configs:
            raise RuntimeError("No server configuration loaded")
        self.setup_sockets()

    def run(self) -> None:
        """Serve connections until stop() is called."""
        if self._selector is None:
            raise RuntimeError("Server sockets are not set up")
        get_logger().info("Entering main event loop")
        self.is_running = True

        while self.is_running:
            selector = self._selector
            if selector is None:
                break
            try:
                events = selector.select(timeout=_POLL_INTERVAL)
            except (OSError, ValueError):
                if not self.is_running:
                    break
                raise
            if not self.is_running:
                break

            ready = {key.fd: mask for key, mask in events}

            for listen_socket in list(self._listen_sockets):
                fd = listen_socket.fileno()
                if fd >= 0 and ready.get(fd, 0) & selectors.EVENT_READ:
                    self._accept_new_connection(listen_socket)

            now = time.time()
            for fd in list(self._clients):
                client = self._clients.get(fd)
                if client is None:
                    continue
                if client.is_timeout(now, CLIENT_TIMEOUT):
                    self._close_client_connection(fd)
                    continue
                mask = ready.get(fd, 0)
                if mask & selectors.EVENT_READ:
                    self._handle_client_read(fd)
                if fd in self._clients and mask & selectors.EVENT_WRITE:
                    self._handle_client_write(fd)

    def stop(self) -> None:
        """End the event loop and close every socket."""
        self.is_running = False
        self.close_all_sockets()

    def setup_sockets(self) -> None:
        self._selector = selectors.DefaultSelector()
        self._setup_listen_sockets()

    def close_all_sockets(self) -> None:
        """Close all client and listening sockets."""
        selector, self._selector = self._selector, None
        if selector is not None:
            selector.close()
        for client in self._clients.values():
            client.close()
        self._clients.clear()
        for listen_socket in self._listen_sockets:
            listen_socket.close()
        self._listen_sockets.clear()
        self._listen_config.clear()

    def _setup_listen_sockets(self) -> None:
        logger = get_logger()
        for config in self.server_configs:
            listen_socket = ListenSocket(config.host, config.port)
            try:
                listen_socket.create()
            except OSError:
                logger.warning(f"Failed to create socket for {config.host}")
                continue
            try:
                listen_socket.bind()
            except OSError:
                logger.warning(f"Failed to bind {config.host}:{config.port}")
                listen_socket.close()
                continue
            try:
                listen_socket.listen(LISTEN_BACKLOG)
            except OSError:
                logger.warning("Failed to listen on configured socket")
                listen_socket.close()
                continue

            self._listen_sockets.append(listen_socket)
            self._listen_config[listen_socket.fileno()] = config
            assert self._selector is not None
            self._selector.register(listen_socket.sock, selectors.EVENT_READ)
            logger.info(f"Listening on {config.host}:{config.port}")

        if not self._listen_sockets:
            raise RuntimeError("No listening sockets available")

    def _accept_new_connection(self, listen_socket: ListenSocket) -> None:
        try:
            accepted = listen_socket.accept()
        except OSError:
            return
        if accepted is None or self._selector is None:
            return
        conn, address = accepted
        client = Client(conn, address)
        client.server_config = self._listen_config.get(listen_socket.fileno())
        self._clients[client.fd] = client
        self._selector.register(conn, selectors.EVENT_READ)

    def _watch(self, client: Client, events: int) -> None:
        if self._selector is not None and client.sock is not None:
            self._selector.modify(client.sock, events)

    def _handle_client_read(self, fd: int) -> None:
        client = self._clients.get(fd)
        if client is None:
            return
        try:
            received = client.read()
        except OSError:
            get_logger().warning("Client read error")
            self._close_client_connection(fd)
            return
        if received == 0:
            self._close_client_connection(fd)
            return
        if client.is_read_complete():
            client.process_request()
            client.prepare_response()
            self._watch(client, selectors.EVENT_WRITE)

    def _handle_client_write(self, fd: int) -> None:
        client = self._clients.get(fd)
        if client is None:
            return
        try:
            client.write()
        except OSError:
            self._close_client_connection(fd)
            return
        if client.is_write_complete():
            if client.keep_alive:
                client.reset()
                self._watch(client, selectors.EVENT_READ)
            else:
                self._close_client_connection(fd)

    def _close_client_connection(self, fd: int) -> None:
        client = self._clients.pop(fd, None)
        if client is None:
            return
        if self._selector is not None and client.sock is not None:
            try:
                self._selector.unregister(client.sock)
            except (KeyError, ValueError):
                pass
        client.close()