"""Two-player naval battle game: board rules, wire protocol, TCP server and client."""

__version__ = "0.1.0"
__all__ = ["board", "protocol", "server", "client"]