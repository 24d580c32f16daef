"""Location blocks: per-path routing rules of a virtual server."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Route:
    """Settings that apply to requests under one location path."""

    path: str = "/"
    allowed_methods: list[str] = field(default_factory=list)
    root: str = ""
    autoindex: bool = False
    index: list[str] = field(default_factory=list)
    redirect: str = ""
    upload_path: str = ""
    cgi_extensions: dict[str, str] = field(default_factory=dict)

    def is_method_allowed(self, method: str) -> bool:
        """Return True if the method is permitted; an empty list permits all."""
        if not self.allowed_methods:
            return True
        return method in self.allowed_methods

    def has_cgi_extension(self, ext: str) -> bool:
        """Return True if a CGI handler is registered for the extension."""
        return ext in self.cgi_extensions

    def cgi_handler(self, ext: str) -> str:
        """Return the CGI handler for the extension, or an empty string."""
        return self.cgi_extensions.get(ext, "")

    def matches(self, request_path: str) -> bool:
        """Return True if the request path falls under this location."""
        if self.path == "/":
            return True
        if not request_path.startswith(self.path):
            return False
        rest = request_path[len(self.path):]
        return rest == "" or rest.startswith("/")