"""HTTP response construction and serialisation."""

from __future__ import annotations

_STATUS_MESSAGES = {
    200: "OK",
    201: "Created",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    413: "Payload Too Large",
    500: "Internal Server Error",
    501: "Not Implemented",
}


def status_message(code: int) -> str:
    """Return the reason phrase for a status code, or 'Unknown'."""
    return _STATUS_MESSAGES.get(code, "Unknown")


def _to_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class HttpResponse:
    """A response with status line, headers and body."""

    def __init__(self) -> None:
        self.clear()

    @property
    def body(self) -> bytes:
        return self._body

    @body.setter
    def body(self, value: bytes | str) -> None:
        self._body = _to_bytes(value)

    def clear(self) -> None:
        """Reset to a 200 response with the default headers."""
        self.status_code = 200
        self.status_message = status_message(200)
        self.http_version = "HTTP/1.1"
        self.headers: dict[str, str] = {}
        self._body = b""
        self.headers_sent = False
        self.add_header("Server", "webserv/0.1")
        self.add_header("Connection", "close")

    def set_status(self, code: int) -> None:
        """Set the status code and its reason phrase."""
        self.status_code = code
        self.status_message = status_message(code)

    def add_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def append_body(self, data: bytes | str) -> None:
        self._body += _to_bytes(data)

    def build(self) -> bytes:
        """Return the full response, with Content-Length set from the body."""
        self.set_content_length(len(self._body))
        return self.build_headers() + self._body

    def build_headers(self) -> bytes:
        """Return the status line and headers, sorted by name."""
        lines = [f"{self.http_version} {self.status_code} {self.status_message}\r\n"]
        lines.extend(f"{key}: {value}\r\n" for key, value in sorted(self.headers.items()))
        lines.append("\r\n")
        self.headers_sent = True
        return "".join(lines).encode("utf-8")

    def set_content_type(self, content_type: str) -> None:
        self.add_header("Content-Type", content_type)

    def set_content_length(self, length: int) -> None:
        self.add_header("Content-Length", str(length))

    def set_location(self, location: str) -> None:
        self.add_header("Location", location)

    def set_cookie(self, name: str, value: str) -> None:
        self.add_header("Set-Cookie", f"{name}={value}; Path=/")

    def build_error_response(self, code: int, error_page: bytes | str) -> None:
        """Turn this into an HTML error response, using the page if given."""
        self.set_status(code)
        self.set_content_type("text/html")
        if error_page:
            self.body = error_page
            return
        self.body = f"<html><body><h1>{code} {status_message(code)}</h1></body></html>"