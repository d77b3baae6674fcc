import io
from datetime import timezone

from ftpconn.debug import DebugStream
from ftpconn.options import DEFAULT_DIAL_TIMEOUT, DialOptions


class _Stream(io.BytesIO):
    pass


def test_defaults_follow_source():
    options = DialOptions()
    assert options.location is timezone.utc
    assert options.explicit_tls is False
    assert options.disable_epsv is False
    assert DEFAULT_DIAL_TIMEOUT == 30.0


def test_wrap_stream_without_debug_returns_same_object():
    stream = _Stream(b"220 FTP Server ready.\r\n")
    assert DialOptions().wrap_stream(stream) is stream


def test_wrap_stream_with_debug_copies_reads():
    output = io.BytesIO()
    payload = b"220 FTP Server ready.\r\n"
    wrapped = DialOptions(debug_output=output).wrap_stream(_Stream(payload))
    assert isinstance(wrapped, DebugStream)
    assert wrapped.readline() == payload
    assert output.getvalue() == payload


def test_wrap_stream_with_debug_copies_writes():
    output = io.BytesIO()
    inner = _Stream()
    wrapped = DialOptions(debug_output=output).wrap_stream(inner)
    wrapped.write(b"NOOP\r\n")
    assert inner.getvalue() == b"NOOP\r\n"
    assert output.getvalue() == b"NOOP\r\n"


def test_wrapped_close_leaves_debug_output_open():
    output = io.BytesIO()
    inner = _Stream(b"data")
    wrapped = DialOptions(debug_output=output).wrap_stream(inner)
    assert wrapped.read() == b"data"
    wrapped.close()
    assert inner.closed is True
    assert output.closed is False


def test_custom_location_kept():
    tz = timezone.max
    assert DialOptions(location=tz).location is tz