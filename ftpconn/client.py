"""FTP client connection (RFC 959) with passive data transfers."""

import socket
import ssl
from datetime import datetime, timezone
from typing import BinaryIO, Dict, List, Optional, Tuple

from .entry import Entry, EntryType, TransferType
from .options import DEFAULT_DIAL_TIMEOUT, DialOptions
from .parse import ListParseError, parse_list_line, parse_next_rfc3659_list_line, parse_rfc3659_list_line
from .protocol import ControlConnection, FTPError, is_bogus_data_ip, parse_epsv_reply, parse_pasv_reply
from .status import Status, status_text
from .walker import Walker

_TIME_FORMAT = "%Y%m%d%H%M%S"
_CHUNK = 32 * 1024


def _raise_collected(errors: List[BaseException]) -> None:
    if errors:
        raise errors[0]


def _split_host_port(address: str) -> Tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


def _split_lines(data: bytes) -> List[str]:
    text = data.decode("utf-8", "surrogateescape")
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class Response:
    """A data connection opened for a transfer from the server."""

    def __init__(self, sock: socket.socket, client: "ServerConn") -> None:
        self._sock = sock
        self._client = client
        self._file = sock.makefile("rb")
        self._closed = False

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything until the end when negative."""
        return self._file.read(size)

    def close(self) -> None:
        """Close the data connection and read the transfer status; later calls do nothing."""
        if self._closed:
            return
        errors: List[BaseException] = []
        try:
            self._file.close()
            self._sock.close()
        except OSError as exc:
            errors.append(exc)
        try:
            self._client._check_data_shut()
        except Exception as exc:
            errors.append(exc)
        self._closed = True
        _raise_collected(errors)

    def set_timeout(self, timeout: Optional[float]) -> None:
        """Set the timeout in seconds for reads on the data connection."""
        self._sock.settimeout(timeout)

    def __enter__(self) -> "Response":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class ServerConn:
    """A control connection to an FTP server; one data transfer at a time."""

    def __init__(self, sock: socket.socket, options: DialOptions) -> None:
        self.options = options
        self._sock = sock
        self.host = sock.getpeername()[0]
        self._file = sock.makefile("rwb")
        self.conn = ControlConnection(options.wrap_stream(self._file))
        self.features: Dict[str, str] = {}
        self.skip_epsv = False
        self.mlst_supported = False
        self.mfmt_supported = False
        self.mdtm_supported = False
        self.mdtm_can_write = False
        self.use_pret = False

    def _attach(self, sock: socket.socket) -> None:
        self._sock = sock
        self._file = sock.makefile("rwb")
        self.conn = ControlConnection(self.options.wrap_stream(self._file))

    def _cmd(self, expected: Optional[int], line: str) -> Tuple[int, str]:
        self.conn.send(line)
        return self.conn.read_response(expected)

    def login(self, user: str, password: str) -> None:
        """Authenticate, probe features and switch to binary and UTF-8 mode."""
        code, message = self._cmd(None, f"USER {user}")
        if code == Status.USER_OK:
            self._cmd(Status.LOGGED_IN, f"PASS {password}")
        elif code != Status.LOGGED_IN:
            raise FTPError(code, message)

        self._feat()
        self.mlst_supported = "MLST" in self.features and not self.options.disable_mlsd
        self.use_pret = "PRET" in self.features
        self.mfmt_supported = "MFMT" in self.features
        self.mdtm_supported = "MDTM" in self.features
        self.mdtm_can_write = self.mdtm_supported and self.options.writing_mdtm

        self.set_transfer_type(TransferType.BINARY)
        if not self.options.disable_utf8:
            self._set_utf8()
        if self.options.tls_context is not None:
            self._cmd(Status.COMMAND_OK, "PBSZ 0")
            self._cmd(Status.COMMAND_OK, "PROT P")

    def _auth_tls(self) -> None:
        self._cmd(Status.AUTH_OK, "AUTH TLS")

    def _feat(self) -> None:
        code, message = self._cmd(None, "FEAT")
        if code != Status.SYSTEM:
            return
        for line in message.split("\n"):
            if not line.startswith(" "):
                continue
            command, _, desc = line.strip().partition(" ")
            self.features[command] = desc

    def _set_utf8(self) -> None:
        if "UTF8" not in self.features:
            return
        code, message = self._cmd(None, "OPTS UTF8 ON")
        if code in (
            Status.BAD_ARGUMENTS,
            Status.NOT_IMPLEMENTED_PARAMETER,
            Status.COMMAND_NOT_IMPLEMENTED,
            Status.COMMAND_OK,
        ):
            return
        raise FTPError(code, message)

    def _epsv(self) -> int:
        _, line = self._cmd(Status.EXTENDED_PASSIVE_MODE, "EPSV")
        return parse_epsv_reply(line)

    def _pasv(self) -> Tuple[str, int]:
        _, line = self._cmd(Status.PASSIVE_MODE, "PASV")
        host, port = parse_pasv_reply(line)
        if self.host != host:
            try:
                if is_bogus_data_ip(self.host, host):
                    return self.host, port
            except ValueError:
                pass
        return host, port

    def _data_conn_port(self) -> Tuple[str, int]:
        if not self.options.disable_epsv and not self.skip_epsv:
            try:
                return self.host, self._epsv()
            except Exception:
                self.skip_epsv = True
        return self._pasv()

    def _open_data_conn(self) -> socket.socket:
        host, port = self._data_conn_port()
        if self.options.dial_func is not None:
            return self.options.dial_func(host, port)
        sock = socket.create_connection((host, port), timeout=self.options.timeout)
        if self.options.tls_context is not None:
            # Handshake is deferred to the first read or write.
            return self.options.tls_context.wrap_socket(
                sock, server_hostname=self.host, do_handshake_on_connect=False
            )
        return sock

    def _cmd_data_conn_from(self, offset: int, line: str) -> socket.socket:
        if self.use_pret:
            self._cmd(None, f"PRET {line}")
        sock = self._open_data_conn()
        try:
            if offset:
                self._cmd(Status.REQUEST_FILE_PENDING, f"REST {offset}")
            self.conn.send(line)
            code, msg = self.conn.read_response(None)
            if code not in (Status.ALREADY_OPEN, Status.ABOUT_TO_SEND):
                raise FTPError(code, msg)
        except BaseException:
            sock.close()
            raise
        return sock

    def _check_data_shut(self) -> None:
        if self.options.shut_timeout:
            self._sock.settimeout(self.options.shut_timeout)
        self.conn.read_response(Status.CLOSING_DATA_CONNECTION)

    def set_transfer_type(self, transfer_type: TransferType) -> None:
        """Switch the transfer representation (TYPE)."""
        self._cmd(Status.COMMAND_OK, f"TYPE {TransferType(transfer_type).value}")

    def _read_listing(self, line: str) -> List[str]:
        response = Response(self._cmd_data_conn_from(0, line), self)
        errors: List[BaseException] = []
        data = b""
        try:
            data = self.options.wrap_stream(response).read()
        except Exception as exc:
            errors.append(exc)
        try:
            response.close()
        except Exception as exc:
            errors.append(exc)
        _raise_collected(errors)
        return _split_lines(data)

    def name_list(self, path: str = "") -> List[str]:
        """Return the names listed by NLST."""
        return self._read_listing("NLST" + (f" {path}" if path else ""))

    def list(self, path: str = "") -> List[Entry]:
        """Return the entries of a directory, using MLSD when available."""
        if self.mlst_supported and not self.options.force_list_hidden:
            cmd, parser = "MLSD", parse_rfc3659_list_line
        else:
            cmd = "LIST -a" if self.options.force_list_hidden else "LIST"
            parser = parse_list_line
        lines = self._read_listing(cmd + (f" {path}" if path else ""))
        now = datetime.now(self.options.location)
        entries = []
        for line in lines:
            try:
                entries.append(parser(line, now, self.options.location))
            except ListParseError:
                continue
        return entries

    def get_entry(self, path: str = "") -> Entry:
        """Describe one path (the current directory if empty) with MLST."""
        if not self.mlst_supported:
            raise FTPError(Status.NOT_IMPLEMENTED, status_text(Status.NOT_IMPLEMENTED))
        _, msg = self._cmd(Status.REQUESTED_FILE_ACTION_OK, "MLST" + (f" {path}" if path else ""))
        lines = msg.split("\n")
        if len(lines) < 3:
            raise ValueError("invalid response")
        entry = Entry()
        for line in lines[1:-1]:
            if line.startswith(" "):
                line = line[1:]
            if not line:
                continue
            entry = parse_next_rfc3659_list_line(line, self.options.location, entry)
        return entry

    def is_time_precise_in_list(self) -> bool:
        """Tell whether listings carry times with one-second precision."""
        return self.mlst_supported

    def change_dir(self, path: str) -> None:
        self._cmd(Status.REQUESTED_FILE_ACTION_OK, f"CWD {path}")

    def change_dir_to_parent(self) -> None:
        self._cmd(Status.REQUESTED_FILE_ACTION_OK, "CDUP")

    def current_dir(self) -> str:
        """Return the current remote directory."""
        _, msg = self._cmd(Status.PATH_CREATED, "PWD")
        start = msg.find('"')
        end = msg.rfind('"')
        if start == -1 or end == -1:
            raise ValueError("unsuported PWD response format")
        return msg[start + 1:end]

    def file_size(self, path: str) -> int:
        _, msg = self._cmd(Status.FILE, f"SIZE {path}")
        return int(msg)

    def get_time(self, path: str) -> datetime:
        """Return a file's modification time in UTC (MDTM)."""
        if not self.mdtm_supported:
            raise RuntimeError("GetTime is not supported")
        _, msg = self._cmd(Status.FILE, f"MDTM {path}")
        return datetime.strptime(msg, _TIME_FORMAT).replace(tzinfo=timezone.utc)

    def is_get_time_supported(self) -> bool:
        return self.mdtm_supported

    def set_time(self, path: str, when: datetime) -> None:
        """Set a file's modification time with MFMT, or MDTM where allowed."""
        utime = when.astimezone(timezone.utc).strftime(_TIME_FORMAT)
        if self.mfmt_supported:
            self._cmd(Status.FILE, f"MFMT {utime} {path}")
        elif self.mdtm_can_write:
            self._cmd(Status.FILE, f"MDTM {utime} {path}")
        else:
            raise RuntimeError("SetTime is not supported")

    def is_set_time_supported(self) -> bool:
        return self.mfmt_supported or self.mdtm_can_write

    def retr(self, path: str) -> Response:
        """Start downloading a file; close the response when done."""
        return self.retr_from(path, 0)

    def retr_from(self, path: str, offset: int) -> Response:
        """Start downloading a file from ``offset`` bytes on."""
        return Response(self._cmd_data_conn_from(offset, f"RETR {path}"), self)

    def _upload(self, line: str, reader: BinaryIO, offset: int) -> None:
        sock = self._cmd_data_conn_from(offset, line)
        errors: List[BaseException] = []
        try:
            written = 0
            while True:
                chunk = reader.read(_CHUNK)
                if not chunk:
                    break
                sock.sendall(chunk)
                written += len(chunk)
            if written == 0 and isinstance(sock, ssl.SSLSocket):
                sock.do_handshake()
        except Exception as exc:
            errors.append(exc)
        try:
            sock.close()
        except OSError as exc:
            errors.append(exc)
        try:
            self._check_data_shut()
        except Exception as exc:
            errors.append(exc)
        _raise_collected(errors)

    def stor(self, path: str, reader: BinaryIO) -> None:
        """Store the content of ``reader`` as a remote file."""
        self.stor_from(path, reader, 0)

    def stor_from(self, path: str, reader: BinaryIO, offset: int) -> None:
        """Store the content of ``reader`` starting at ``offset`` in the remote file."""
        self._upload(f"STOR {path}", reader, offset)

    def append(self, path: str, reader: BinaryIO) -> None:
        """Append the content of ``reader`` to a remote file (APPE)."""
        self._upload(f"APPE {path}", reader, 0)

    def rename(self, from_path: str, to_path: str) -> None:
        self._cmd(Status.REQUEST_FILE_PENDING, f"RNFR {from_path}")
        self._cmd(Status.REQUESTED_FILE_ACTION_OK, f"RNTO {to_path}")

    def delete(self, path: str) -> None:
        self._cmd(Status.REQUESTED_FILE_ACTION_OK, f"DELE {path}")

    def remove_dir_recur(self, path: str) -> None:
        """Delete a directory and everything below it."""
        self.change_dir(path)
        current = self.current_dir()
        for entry in self.list(current):
            if entry.name in ("..", "."):
                continue
            if entry.type == EntryType.FOLDER:
                self.remove_dir_recur(f"{current}/{entry.name}")
            else:
                self.delete(entry.name)
        self.change_dir_to_parent()
        self.remove_dir(current)

    def make_dir(self, path: str) -> None:
        self._cmd(Status.PATH_CREATED, f"MKD {path}")

    def remove_dir(self, path: str) -> None:
        self._cmd(Status.REQUESTED_FILE_ACTION_OK, f"RMD {path}")

    def walk(self, root: str) -> Walker:
        """Return a walker over the tree below ``root``."""
        return Walker(self, root)

    def no_op(self) -> None:
        self._cmd(Status.COMMAND_OK, "NOOP")

    def logout(self) -> None:
        self._cmd(Status.READY, "REIN")

    def quit(self) -> None:
        """Send QUIT and close the control connection."""
        errors: List[BaseException] = []
        try:
            self.conn.send("QUIT")
        except Exception as exc:
            errors.append(exc)
        try:
            self.conn.close()
            self._sock.close()
        except Exception as exc:
            errors.append(exc)
        _raise_collected(errors)

    def __enter__(self) -> "ServerConn":
        return self

    def __exit__(self, *args) -> None:
        self.quit()


def dial(address: str, **kwargs) -> ServerConn:
    """Connect to ``host:port``; keyword arguments are :class:`DialOptions` fields."""
    options = DialOptions(**kwargs)
    host, port = _split_host_port(address)
    if options.dial_func is not None:
        sock = options.dial_func(host, port)
    else:
        timeout = options.timeout if options.timeout is not None else DEFAULT_DIAL_TIMEOUT
        sock = socket.create_connection((host, port), timeout=timeout)
        sock.settimeout(options.timeout)
        if options.tls_context is not None and not options.explicit_tls:
            sock = options.tls_context.wrap_socket(sock, server_hostname=host)

    client = ServerConn(sock, options)
    try:
        client.conn.read_response(Status.READY)
        if options.explicit_tls:
            client._auth_tls()
            client._attach(options.tls_context.wrap_socket(sock, server_hostname=host))
    except BaseException:
        try:
            client.quit()
        except Exception:
            pass
        raise
    return client


def connect(address: str) -> ServerConn:
    """Connect with default options."""
    return dial(address)


def dial_timeout(address: str, timeout: float) -> ServerConn:
    """Connect with the given timeout in seconds."""
    return dial(address, timeout=timeout)