"""spoder — fetch a web page over TCP/TLS and stream its visible text."""

__version__ = "0.1.0"
