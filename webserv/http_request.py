"""Incremental HTTP/1.x request parsing."""

from __future__ import annotations

import contextlib
import re

_UNSIGNED = re.compile(r"\s*\+?(\d+)")


def _to_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _parse_unsigned(text: str) -> int:
    match = _UNSIGNED.match(text)
    return int(match.group(1)) if match else 0


class HttpRequest:
    """A request assembled from raw bytes received on a connection."""

    def __init__(self) -> None:
        self.raw = b""
        self.clear()

    def clear(self) -> None:
        """Reset the parsed fields; the accumulated raw data is kept."""
        self.method = ""
        self.uri = ""
        self.http_version = "HTTP/1.1"
        self.headers: dict[str, str] = {}
        self.body = b""
        self.query_string = ""
        self.is_complete = False
        self.is_chunked = False
        self.content_length = 0

    def parse(self, raw: bytes | str) -> None:
        """Parse a whole request buffer.

        A buffer without an end of headers leaves the request incomplete.
        Raises ValueError when the header section has no line break.
        """
        self.clear()
        raw = _to_bytes(raw)
        self.raw = raw

        header_section, sep, body_section = raw.partition(b"\r\n\r\n")
        if not sep:
            header_section, sep, body_section = raw.partition(b"\n\n")
        if not sep:
            return

        request_line, line_sep, header_lines = header_section.partition(b"\r\n")
        if not line_sep:
            request_line, line_sep, header_lines = header_section.partition(b"\n")
        if not line_sep:
            raise ValueError("malformed request: no line break in header section")

        self._parse_request_line(request_line.decode("latin-1"))
        self._parse_headers(header_lines.decode("latin-1"))

        if self.is_chunked:
            self.body = body_section
            if b"\r\n0\r\n\r\n" in self.body or b"\n0\n\n" in self.body:
                self.is_complete = True
            return

        self.body = body_section
        if self.content_length == 0:
            self.is_complete = True
        elif len(self.body) >= self.content_length:
            self.body = self.body[: self.content_length]
            self.is_complete = True

    def append_data(self, data: bytes | str) -> None:
        """Add received data and reparse the accumulated buffer."""
        combined = self.raw + _to_bytes(data)
        with contextlib.suppress(ValueError):
            self.parse(combined)
        self.raw = combined

    def _parse_request_line(self, line: str) -> None:
        parts = line.split()
        if parts:
            self.method = parts[0]
        if len(parts) > 1:
            self.uri = parts[1]
        if len(parts) > 2:
            self.http_version = parts[2]
        _, question, query = self.uri.partition("?")
        self.query_string = query if question else ""

    def _parse_headers(self, section: str) -> None:
        for line in section.split("\n"):
            line = line.removesuffix("\r")
            if not line:
                continue
            key, colon, value = line.partition(":")
            if not colon:
                continue
            self.headers[key.lower()] = value.lstrip(" \t")

        if self.has_header("content-length"):
            self.content_length = _parse_unsigned(self.header("content-length"))
        if self.header("transfer-encoding").lower() == "chunked":
            self.is_chunked = True

    def header(self, key: str) -> str:
        """Return a header value by case-insensitive name, or ''."""
        return self.headers.get(key.lower(), "")

    def has_header(self, key: str) -> bool:
        """Return True if the header is present (case-insensitive name)."""
        return key.lower() in self.headers

    def add_header(self, key: str, value: str) -> None:
        """Set a header under the exact key given."""
        self.headers[key] = value

    def keep_alive(self) -> bool:
        """Return True if the connection should stay open after this request."""
        connection = self.header("connection").lower()
        if self.http_version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    def path(self) -> str:
        """Return the URI without its query string."""
        path, question, _ = self.uri.partition("?")
        if not question:
            return self.uri or "/"
        return path