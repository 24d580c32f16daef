"""Reading of the nginx-like server configuration file."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator

from webserv.route import Route
from webserv.server_config import ServerConfig

_WHITESPACE = " \t\r\n"
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_LEADING_UNSIGNED = re.compile(r"[ \t\n\v\f\r]*\+?(\d+)")


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or is invalid."""


def _trim(text: str) -> str:
    """Strip surrounding whitespace and drop anything from a '#' onwards."""
    out = text.strip(_WHITESPACE)
    head, hash_mark, _ = out.partition("#")
    if hash_mark:
        out = head.strip(_WHITESPACE)
    return out


def _to_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _to_unsigned(text: str) -> int:
    match = _LEADING_UNSIGNED.match(text)
    return int(match.group(1)) if match else 0


def _directive_tokens(line: str) -> list[str]:
    clean = _trim(line)
    if clean.endswith(";"):
        clean = clean[:-1]
    return split(clean, " ")


def split(text: str, delimiter: str) -> list[str]:
    """Split on a delimiter, trimming each field and dropping empty ones."""
    return [item for item in (_trim(part) for part in text.split(delimiter)) if item]


def default_config_path() -> str:
    """Return the configuration path used when none is given."""
    return "config/default.conf"


def _apply_server_directive(line: str, config: ServerConfig) -> None:
    tokens = _directive_tokens(line)
    if not tokens:
        return
    name, args = tokens[0], tokens[1:]
    if name == "listen" and args:
        host, colon, port = args[0].partition(":")
        if colon:
            config.host = host
            config.port = _to_int(port)
        else:
            config.port = _to_int(args[0])
    elif name == "server_name" and args:
        config.server_names.extend(args)
    elif name == "root" and args:
        config.root = args[0]
    elif name == "index" and args:
        config.index.extend(args)
    elif name == "client_max_body_size" and args:
        config.client_max_body_size = _to_unsigned(args[0])
    elif name == "error_page" and len(args) >= 2:
        page = args[-1]
        for code in args[:-1]:
            config.error_pages[_to_int(code)] = page


def _apply_route_directive(line: str, route: Route) -> None:
    tokens = _directive_tokens(line)
    if not tokens:
        return
    name, args = tokens[0], tokens[1:]
    if name == "allowed_methods" and args:
        route.allowed_methods.extend(args)
    elif name == "root" and args:
        route.root = args[0]
    elif name == "autoindex" and args:
        route.autoindex = args[0] == "on"
    elif name == "index" and args:
        route.index.extend(args)
    elif name == "upload_path" and args:
        route.upload_path = args[0]
    elif name == "return" and len(args) >= 2:
        route.redirect = args[1]
    elif name == "cgi_extension" and len(args) >= 2:
        route.cgi_extensions[args[0]] = args[1]


class ConfigParser:
    """Parses a configuration file into a list of server configurations."""

    def __init__(self, config_file: str | os.PathLike[str] = "") -> None:
        self.config_file = os.fspath(config_file)
        self.server_configs: list[ServerConfig] = []
        self._lines: Iterator[str] = iter(())
        self._line_number = 0

    def parse(self) -> list[ServerConfig]:
        """Read and validate the file; return the server configurations.

        Raises ConfigError if the file cannot be opened or is invalid.
        """
        if not self.config_file:
            self.config_file = default_config_path()
        try:
            with open(self.config_file, encoding="utf-8", errors="replace") as handle:
                text = handle.read()
        except OSError as exc:
            raise ConfigError(
                f"cannot open configuration file {self.config_file!r}: {exc.strerror}"
            ) from exc

        self.server_configs = []
        self._lines = iter(text.split("\n"))
        self._line_number = 0

        while (line := self._next_line()) is not None:
            if not line:
                continue
            if line in ("server{", "server {"):
                self._parse_server_block()
                continue
            if line == "server":
                following = self._next_line()
                if following is None:
                    raise self._error("unexpected end of file after 'server'")
                if following != "{":
                    raise self._error("expected '{' after 'server'")
                self._parse_server_block()
                continue
            raise self._error(f"unexpected line {line!r}")

        self._validate()
        return self.server_configs

    def is_duplicate_server(self, config: ServerConfig) -> bool:
        """Return True if a parsed server already listens on the same address."""
        return any(
            existing.host == config.host and existing.port == config.port
            for existing in self.server_configs
        )

    def _next_line(self) -> str | None:
        line = next(self._lines, None)
        if line is None:
            return None
        self._line_number += 1
        return _trim(line)

    def _error(self, message: str) -> ConfigError:
        return ConfigError(f"{self.config_file}:{self._line_number}: {message}")

    def _parse_server_block(self) -> None:
        config = ServerConfig()
        while (line := self._next_line()) is not None:
            if not line:
                continue
            if line == "}":
                self.server_configs.append(config)
                return
            if line.startswith("location"):
                head, brace, _ = line[len("location"):].partition("{")
                if not brace:
                    raise self._error("invalid location block")
                config.routes.append(self._parse_location_block(_trim(head) or "/"))
                continue
            _apply_server_directive(line, config)
        raise self._error("unclosed server block")

    def _parse_location_block(self, path: str) -> Route:
        route = Route(path)
        while (line := self._next_line()) is not None:
            if not line:
                continue
            if line == "}":
                return route
            _apply_route_directive(line, route)
        raise self._error("unclosed location block")

    def _validate(self) -> None:
        if not self.server_configs:
            raise ConfigError(f"{self.config_file}: no server block found")
        for config in self.server_configs:
            if not 0 < config.port <= 65535:
                raise ConfigError(f"{self.config_file}: invalid listen port {config.port}")