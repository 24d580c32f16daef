"""A small HTTP/1.1 static-file server with nginx-style configuration."""

__version__ = "0.1.0"