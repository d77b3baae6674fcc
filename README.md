# ftpconn

A small FTP client library covering RFC 959 and the common extensions
(FEAT, MLSD/MLST, EPSV, MDTM/MFMT, UTF8, PRET, explicit and implicit TLS).

A `ServerConn` holds one control connection and opens at most one
passive data connection at a time. Directory listings are read with MLSD
when the server advertises MLST, and otherwise with `LIST`, whose lines
are parsed in the dialects seen in the wild: UNIX `ls -l`, MS-DOS `DIR`,
hostedftp.com and IBM i.

The package has no runtime dependencies beyond the standard library. Its
test suite runs under pytest, which the `test` extra installs.

## Connecting

```python
from ftpconn.client import dial

password = "password"

with dial("ftp.example.com:21") as conn:
    conn.login("user", password)
    print(conn.current_dir())
    conn.no_op()
```

`dial(address, **options)` takes a `host:port` address (IPv6 hosts in
brackets) and reads the server's 220 greeting. Leaving the `with` block
sends `QUIT` and closes the control connection; `conn.quit()` does the
same explicitly. `dial_timeout(address, timeout)` is `dial` with a
timeout in seconds, and `connect(address)` is `dial` with defaults.

`login` sends `USER` and, when asked for it, `PASS`; it then probes the
server's features with `FEAT`, switches to binary mode, turns on UTF-8
when advertised, and with TLS sends `PBSZ 0` and `PROT P`.

### Options

The keyword arguments of `dial` are the fields of
`ftpconn.options.DialOptions`:

| option | meaning |
|---|---|
| `timeout` | socket timeout in seconds (connecting defaults to 30 s when unset) |
| `shut_timeout` | timeout set on the control socket before reading the end-of-transfer reply |
| `disable_epsv` | always use `PASV` instead of trying `EPSV` first |
| `disable_utf8` | do not send `OPTS UTF8 ON` |
| `disable_mlsd` | do not use MLSD/MLST even when advertised |
| `writing_mdtm` | allow `set_time` to use `MDTM <time> <path>` on servers that accept it |
| `force_list_hidden` | list with `LIST -a`, even when MLSD is available |
| `location` | time zone of the dates in listings (default UTC) |
| `tls_context` | an `ssl.SSLContext`; enables implicit TLS |
| `explicit_tls` | with `tls_context`, connect in plain text and upgrade with `AUTH TLS` |
| `debug_output` | a binary stream that receives a copy of the control traffic and of listings |
| `dial_func` | `dial_func(host, port)` returning a connected socket, used instead of the default connect for control and data connections |

## Listing directories

```python
for entry in conn.list("/pub"):
    print(entry.name, entry.type, entry.size, entry.time)

names = conn.name_list("/pub")        # NLST
info = conn.get_entry("/pub/readme")  # MLST, needs server support
```

An empty path lists the current directory. `list` returns
`ftpconn.entry.Entry` objects (`name`, `target` for links, `type`,
`size`, `time`) and skips lines it cannot parse. `EntryType` is `FILE`,
`FOLDER` or `LINK`, and `str()` of it gives `"file"`, `"folder"` or
`"link"`. `is_time_precise_in_list()` tells whether listings come from
MLSD and so carry times to the second.

The parsers in `ftpconn.parse` can be used on their own:

```python
from datetime import datetime, timezone
from ftpconn.parse import parse_list_line

line = "-rw-r--r--   1 ftp  wheel  12016 Mar 16  2016 report.csv"
entry = parse_list_line(line, datetime.now(timezone.utc), timezone.utc)
```

An unrecognised line raises `UnsupportedListLineError`; a date in an
unknown shape raises `UnsupportedListDateError`; an unknown file type
character raises `UnknownEntryTypeError`. All three derive from
`ListParseError`, itself a `ValueError`.

## Downloading and uploading

```python
import io

with conn.retr("/pub/readme") as response:
    chunks = []
    while chunk := response.read(65536):
        chunks.append(chunk)
data = b"".join(chunks)

# resume a download after the first 1024 bytes
with conn.retr_from("/pub/big.iso", 1024) as response:
    rest = response.read()

conn.stor("upload.txt", io.BytesIO(b"hello"))
conn.append("upload.txt", io.BytesIO(b" world"))
conn.stor_from("upload.txt", io.BytesIO(b"HELLO"), 0)
```

A `Response` must be closed (or used as a context manager) before the
next command is sent, since closing it reads the server's "transfer
complete" reply; closing it a second time does nothing.
`response.set_timeout(seconds)` sets a timeout on its reads.
`conn.set_transfer_type(TransferType.ASCII)` switches the representation
(`ftpconn.entry.TransferType`; binary is set at login).

## Managing files

```python
conn.make_dir("incoming")
conn.change_dir("incoming")
conn.change_dir_to_parent()
conn.rename("old.txt", "new.txt")
conn.delete("new.txt")
conn.remove_dir("incoming")
conn.remove_dir_recur("old-tree")   # deletes contents first
size = conn.file_size("data.bin")
conn.logout()                        # REIN
```

Modification times are available when the server advertises them:

```python
if conn.is_get_time_supported():
    modified = conn.get_time("data.bin")   # aware datetime in UTC
if conn.is_set_time_supported():
    conn.set_time("data.bin", modified)
```

Without support, `get_time` and `set_time` raise `RuntimeError`.

## Walking a tree

```python
walker = conn.walk("/pub")
while walker.next():
    print(walker.path(), walker.stat())
    if walker.path().endswith("/skip-me"):
        walker.skip_dir()
if walker.err() is not None:
    raise walker.err()
```

A `Walker` can also be iterated; it yields `(path, entry)` pairs and
raises the listing error if one stops the walk:

```python
for path, entry in conn.walk("/pub"):
    print(path, entry.size)
```

## Errors and status codes

Replies with an unexpected code raise `ftpconn.protocol.FTPError`, which
carries the reply's `code` and `msg`. A closed control connection raises
`EOFError`, and socket failures surface as `OSError`.
`ftpconn.status.Status` names the RFC 959 reply codes and
`status_text(code)` gives their description:

```python
from ftpconn.status import Status, status_text

status_text(Status.INVALID_CREDENTIALS)  # "Invalid username or password."
status_text(0)                           # "Unknown status code: 0"
```

## What it does not do

The package is a client library only. It has no command-line program,
no FTP server, and no active-mode transfers (`PORT`/`EPRT`): data
connections are always passive.