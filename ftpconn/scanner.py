"""Scanner for fields separated by runs of spaces."""


class FieldScanner:
    """Splits a line into space-delimited fields one at a time."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def next(self) -> str:
        """Return the next field, or an empty string at the end."""
        text = self._text
        length = len(text)
        while self._pos < length and text[self._pos] == " ":
            self._pos += 1
        start = self._pos
        end = text.find(" ", start)
        if end == -1:
            self._pos = length
            return text[start:]
        self._pos = end + 1
        return text[start:end]

    def next_fields(self, count: int) -> list[str]:
        """Return up to ``count`` further fields, stopping at the first empty one."""
        fields = []
        for _ in range(count):
            field = self.next()
            if not field:
                break
            fields.append(field)
        return fields

    def remaining(self) -> str:
        """Return the unscanned rest of the line."""
        return self._text[self._pos:]