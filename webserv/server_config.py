"""Configuration of one virtual server."""

from __future__ import annotations

from dataclasses import dataclass, field

from webserv.route import Route


@dataclass
class ServerConfig:
    """Listen address, names, error pages, limits and routes of a server."""

    host: str = "0.0.0.0"
    port: int = 8080
    server_names: list[str] = field(default_factory=list)
    error_pages: dict[int, str] = field(default_factory=dict)
    client_max_body_size: int = 1048576
    routes: list[Route] = field(default_factory=list)
    root: str = ""
    index: list[str] = field(default_factory=list)

    def error_page(self, code: int) -> str:
        """Return the configured error page path for a status, or ''."""
        return self.error_pages.get(code, "")

    def match_route(self, path: str) -> Route | None:
        """Return the route with the longest matching path.

        Among routes of equal length the one declared last wins.
        """
        best: Route | None = None
        best_length = 0
        for route in self.routes:
            if route.matches(path) and len(route.path) >= best_length:
                best = route
                best_length = len(route.path)
        return best

    def is_server_name(self, name: str) -> bool:
        """Return True if the name is one of this server's names."""
        return name in self.server_names