"""Stream wrapper that copies traffic to a debug output."""

from typing import BinaryIO


class DebugStream:
    """Wraps a binary stream, copying everything read or written to ``output``.

    Closing the wrapper closes only the wrapped stream.
    """

    def __init__(self, stream: BinaryIO, output: BinaryIO) -> None:
        self._stream = stream
        self._output = output

    def read(self, size: int = -1) -> bytes:
        data = self._stream.read(size)
        if data:
            self._output.write(data)
        return data

    def readline(self, size: int = -1) -> bytes:
        data = self._stream.readline(size)
        if data:
            self._output.write(data)
        return data

    def write(self, data: bytes) -> int:
        self._output.write(data)
        return self._stream.write(data)

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        self._stream.close()

    def __enter__(self) -> "DebugStream":
        return self

    def __exit__(self, *args) -> None:
        self.close()