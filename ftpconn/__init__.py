"""FTP client library: connections, transfers, listing parsers and directory walking."""

__version__ = "0.1.0"