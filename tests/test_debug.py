import io

from ftpconn.debug import DebugStream


def test_read_is_copied_to_output():
    payload = b"220 FTP Server ready.\r\n"
    output = io.BytesIO()
    stream = DebugStream(io.BytesIO(payload), output)
    assert stream.read() == payload
    assert output.getvalue() == payload


def test_partial_reads_accumulate():
    payload = b"abcdefgh"
    output = io.BytesIO()
    stream = DebugStream(io.BytesIO(payload), output)
    first = stream.read(3)
    rest = stream.read()
    assert first + rest == payload
    assert output.getvalue() == payload


def test_readline_is_copied():
    lines = [b"211-Features:\r\n", b" UTF8\r\n", b"211 End\r\n"]
    output = io.BytesIO()
    stream = DebugStream(io.BytesIO(b"".join(lines)), output)
    got = [stream.readline() for _ in lines]
    assert got == lines
    assert stream.readline() == b""
    assert output.getvalue() == b"".join(lines)


def test_write_goes_to_both():
    target = io.BytesIO()
    output = io.BytesIO()
    stream = DebugStream(target, output)
    data = b"USER anonymous\r\n"
    assert stream.write(data) == len(data)
    stream.flush()
    assert target.getvalue() == data
    assert output.getvalue() == data


def test_close_closes_only_wrapped_stream():
    target = io.BytesIO()
    output = io.BytesIO()
    with DebugStream(target, output) as stream:
        stream.write(b"QUIT\r\n")
    assert target.closed
    assert not output.closed
    assert output.getvalue() == b"QUIT\r\n"