"""Building blocks for a small threaded HTTP server: headers, methods, cookies, socket connectors and static file endpoints."""

__version__ = "0.1.0"