"""Control-connection reply handling and passive-mode reply parsing."""

import ipaddress
from typing import Optional, Tuple, Union

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"

IPLike = Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]


class FTPError(Exception):
    """A reply from the server that reports an error or an unexpected code."""

    def __init__(self, code: int, msg: str) -> None:
        super().__init__(code, msg)
        self.code = code
        self.msg = msg

    def __str__(self) -> str:
        return f"{self.code:03d} {self.msg}"


def _strip_eol(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


def _parse_code_line(line: str) -> Tuple[int, bool, str]:
    """Split a reply line into code, continuation flag and message."""
    if len(line) < 4 or line[3] not in (" ", "-"):
        raise ValueError(f"short response: {line}")
    digits = line[:3]
    if not digits.isdigit() or int(digits) < 100:
        raise ValueError(f"invalid response code: {line}")
    return int(digits), line[3] == "-", line[4:]


def _matches(code: int, expected: Optional[int]) -> bool:
    if expected is None or expected < 1:
        return True
    if expected < 10:
        return code // 100 == expected
    if expected < 100:
        return code // 10 == expected
    if expected < 1000:
        return code == expected
    return True


class ControlConnection:
    """Line-oriented command/reply exchange over a binary stream."""

    def __init__(self, stream) -> None:
        self.stream = stream

    def _read_line(self) -> str:
        raw = self.stream.readline()
        if not raw:
            raise EOFError("connection closed by server")
        return _strip_eol(raw.decode(_ENCODING, _ERRORS))

    def send(self, line: str) -> None:
        """Send one command line terminated by CRLF."""
        self.stream.write((line + "\r\n").encode(_ENCODING, _ERRORS))
        self.stream.flush()

    def read_response(self, expected: Optional[int] = None) -> Tuple[int, str]:
        """Read a (possibly multi-line) reply and return ``(code, message)``.

        ``expected`` may be a full code, its first two digits or its first
        digit; ``None`` accepts any code. A mismatch raises :class:`FTPError`
        carrying the whole message.
        """
        code, continued, message = _parse_code_line(self._read_line())
        while continued:
            line = self._read_line()
            try:
                code2, continued, more = _parse_code_line(line)
            except ValueError:
                code2 = None
            if code2 != code:
                message += "\n" + line.rstrip("\r\n")
                continued = True
                continue
            message += "\n" + more
        if not _matches(code, expected):
            raise FTPError(code, message)
        return code, message

    def close(self) -> None:
        """Close the underlying stream."""
        self.stream.close()

    def __enter__(self) -> "ControlConnection":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def parse_epsv_reply(line: str) -> int:
    """Return the port announced in an EPSV reply message."""
    start = line.find("|||")
    end = line.rfind("|")
    if start == -1 or end == -1:
        raise ValueError("invalid EPSV response format")
    return int(line[start + 3:end])


def parse_pasv_reply(line: str) -> Tuple[str, int]:
    """Return the ``(host, port)`` announced in a PASV reply message."""
    start = line.find("(")
    end = line.rfind(")")
    if start == -1 or end == -1:
        raise ValueError("invalid PASV response format")
    parts = line[start + 1:end].split(",")
    if len(parts) < 6:
        raise ValueError("invalid PASV response format")
    port = int(parts[4]) * 256 + int(parts[5])
    host = ".".join(parts[:4])
    return host, port


_PRIVATE_V4 = tuple(
    ipaddress.ip_network(net) for net in ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")
)
_PRIVATE_V6 = ipaddress.ip_network("fc00::/7")


def _as_ip(value: IPLike):
    ip = ipaddress.ip_address(value) if isinstance(value, str) else value
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def _is_private(ip) -> bool:
    if isinstance(ip, ipaddress.IPv4Address):
        return any(ip in net for net in _PRIVATE_V4)
    return ip in _PRIVATE_V6


def is_bogus_data_ip(cmd_ip: IPLike, data_ip: IPLike) -> bool:
    """Tell whether a PASV data address should be replaced by the control host."""
    cmd = _as_ip(cmd_ip)
    data = _as_ip(data_ip)
    return (
        data.is_multicast
        or _is_private(cmd) != _is_private(data)
        or cmd.is_loopback != data.is_loopback
    )