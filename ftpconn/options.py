"""Options that control how a connection is established and used."""

import ssl
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import BinaryIO, Callable, Optional

from .debug import DebugStream

DEFAULT_DIAL_TIMEOUT = 30.0
"""Seconds allowed for connecting when no other timeout is set."""


@dataclass
class DialOptions:
    """Settings for dialing a server and for later data connections.

    ``dial_func(host, port)`` replaces the default socket connect for both
    control and data connections and must return a connected socket.
    ``tls_context`` enables implicit TLS, or explicit TLS (AUTH TLS) when
    ``explicit_tls`` is set. ``location`` is the server's time zone used for
    listing dates.
    """

    timeout: Optional[float] = None
    shut_timeout: Optional[float] = None
    disable_epsv: bool = False
    disable_utf8: bool = False
    disable_mlsd: bool = False
    writing_mdtm: bool = False
    force_list_hidden: bool = False
    location: tzinfo = timezone.utc
    tls_context: Optional[ssl.SSLContext] = None
    explicit_tls: bool = False
    debug_output: Optional[BinaryIO] = None
    dial_func: Optional[Callable] = None

    def wrap_stream(self, stream):
        """Return ``stream``, copied to the debug output when one is set."""
        if self.debug_output is None:
            return stream
        return DebugStream(stream, self.debug_output)