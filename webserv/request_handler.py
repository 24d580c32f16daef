"""Turns a parsed request into a response according to a server config."""

from __future__ import annotations

import os

from webserv.http_request import HttpRequest
from webserv.http_response import HttpResponse
from webserv.route import Route
from webserv.server_config import ServerConfig

_MIME_TYPES = {
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "txt": "text/plain",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "ico": "image/x-icon",
}


def mime_from_extension(ext: str) -> str:
    """Return the content type for a file extension without its dot."""
    return _MIME_TYPES.get(ext, "application/octet-stream")


def _extension_of(path: str) -> str:
    _, dot, ext = path.rpartition(".")
    return ext if dot else ""


def _read_bytes(path: str) -> bytes | None:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return None


class RequestHandler:
    """Fills in a response for one request."""

    def __init__(self, request: HttpRequest, response: HttpResponse, config: ServerConfig) -> None:
        self.request = request
        self.response = response
        self.config = config
        self.route: Route | None = None

    def handle(self) -> None:
        """Route the request and build the matching response."""
        self.route = self.config.match_route(self.request.path())

        if self.route is not None and self.route.redirect:
            self._handle_redirect(self.route.redirect)
            return

        method = self.request.method
        if not self._is_allowed_method(method):
            self.handle_error(405)
            return

        handlers = {
            "GET": self._handle_get,
            "POST": self._handle_not_implemented,
            "DELETE": self._handle_not_implemented,
        }
        handler = handlers.get(method)
        if handler is None:
            self.handle_error(405)
        else:
            handler()

    def handle_error(self, status_code: int) -> None:
        self.response.set_status(status_code)
        self.send_error_page(status_code)

    def send_error_page(self, status_code: int) -> None:
        """Use the configured error page if readable, else a generated one."""
        error_path = self.config.error_page(status_code)
        if error_path:
            content = _read_bytes(error_path)
            if content is None and error_path.startswith("/"):
                content = _read_bytes("." + error_path)
            if content is not None:
                self.response.set_content_type("text/html")
                self.response.body = content
                return

        self.response.set_content_type("text/html")
        self.response.body = (
            f"<html><body><h1>{status_code} {self.response.status_message}</h1></body></html>"
        )

    def _handle_get(self) -> None:
        file_path = self._resolve_file_path()
        if not file_path:
            self.handle_error(403)
            return
        if not os.path.exists(file_path):
            self.handle_error(404)
            return
        if os.path.isdir(file_path):
            if self.route is not None and self.route.autoindex:
                self._generate_directory_listing(file_path)
            else:
                self.handle_error(403)
            return
        self._serve_static_file(file_path)

    def _handle_not_implemented(self) -> None:
        self.handle_error(501)

    def _serve_static_file(self, path: str) -> None:
        content = _read_bytes(path)
        if content is None:
            self.handle_error(404)
            return
        self.response.set_status(200)
        self.response.body = content
        self.response.set_content_type(mime_from_extension(_extension_of(path)))

    def _generate_directory_listing(self, path: str) -> None:
        try:
            names = sorted(os.listdir(path))
        except OSError:
            self.handle_error(403)
            return
        items = "".join(f'<li><a href="{name}">{name}</a></li>' for name in ["..", *names])
        html = (
            f"<html><body><h1>Index of {self.request.path()}</h1><ul>"
            f"{items}</ul></body></html>"
        )
        self.response.set_status(200)
        self.response.set_content_type("text/html")
        self.response.body = html

    def _handle_redirect(self, location: str) -> None:
        self.response.set_status(301)
        self.response.set_location(location)
        self.response.set_content_type("text/html")
        self.response.body = "<html><body><h1>301 Moved Permanently</h1></body></html>"

    def _resolve_file_path(self) -> str:
        """Map the request path onto the filesystem; '' if it is refused."""
        route = self.route
        root = route.root if route is not None and route.root else self.config.root

        request_path = self.request.path() or "/"
        if ".." in request_path:
            return ""

        relative = request_path
        if route is not None and route.path != "/" and relative.startswith(route.path):
            relative = relative[len(route.path):]
        relative = relative or "/"

        if root.endswith("/") and relative.startswith("/"):
            full_path = root + relative[1:]
        elif root and not root.endswith("/") and not relative.startswith("/"):
            full_path = f"{root}/{relative}"
        else:
            full_path = root + relative

        if os.path.isdir(full_path):
            base = full_path if full_path.endswith("/") else full_path + "/"
            candidates = (route.index if route is not None else []) + self.config.index
            for name in candidates:
                candidate = base + name
                if os.path.exists(candidate):
                    return candidate

        return full_path

    def _is_allowed_method(self, method: str) -> bool:
        if self.route is None:
            return method in ("GET", "POST", "DELETE")
        return self.route.is_method_allowed(method)