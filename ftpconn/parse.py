"""Parsers for the directory listing formats servers send."""

import re
from datetime import datetime, timedelta, tzinfo
from typing import Callable, List, Optional

from .entry import Entry, EntryType
from .scanner import FieldScanner


class ListParseError(ValueError):
    """A listing line could not be parsed."""


class UnsupportedListLineError(ListParseError):
    def __init__(self, msg: str = "unsupported LIST line") -> None:
        super().__init__(msg)


class UnsupportedListDateError(ListParseError):
    def __init__(self, msg: str = "unsupported LIST date") -> None:
        super().__init__(msg)


class UnknownEntryTypeError(ListParseError):
    def __init__(self, msg: str = "unknown entry type") -> None:
        super().__init__(msg)


_MAX_UINT64 = 2**64 - 1

_MONTHS = {
    name: number
    for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"),
        start=1,
    )
}

_MODIFY_RE = re.compile(r"(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})")
_DAY_RE = re.compile(r" ?(\d{1,2})")
_YEAR_RE = re.compile(r"\d{4}")
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})")

_DIR_FORMATS = (
    (re.compile(r"(\d{2})-(\d{2})-(\d{2})  (\d{2}):(\d{2})(AM|PM)"), 17),
    (re.compile(r"(\d{4})-(\d{2})-(\d{2})  (\d{2}):(\d{2})"), 17),
    (re.compile(r"(\d{2})-(\d{2})-(\d{4})  (\d{2}):(\d{2})(AM|PM)"), 19),
    (re.compile(r"(\d{2})-(\d{2})-(\d{4})  (\d{2}):(\d{2})"), 17),
)


def _normalized(year, month, day, hour=0, minute=0, second=0, tz=None) -> datetime:
    """Build a datetime, carrying out-of-range fields into the next unit."""
    base = datetime(year + (month - 1) // 12, (month - 1) % 12 + 1, 1, tzinfo=tz)
    return base + timedelta(days=day - 1, hours=hour, minutes=minute, seconds=second)


def _add_months(when: datetime, months: int) -> datetime:
    total = when.month - 1 + months
    base = when.replace(year=when.year + total // 12, month=total % 12 + 1, day=1)
    return base + timedelta(days=when.day - 1)


def _parse_uint(text: str, base: int) -> int:
    digits = text
    if base == 0:
        prefix = text[:2].lower()
        if prefix in ("0x", "0b", "0o"):
            base = {"0x": 16, "0b": 2, "0o": 8}[prefix]
            digits = text[2:]
        elif len(text) > 1 and text[0] == "0":
            base, digits = 8, text[1:]
        else:
            base = 10
    if not digits or not digits.isascii() or not digits.isalnum():
        raise ListParseError(f"invalid unsigned integer: {text!r}")
    try:
        value = int(digits, base)
    except ValueError:
        raise ListParseError(f"invalid unsigned integer: {text!r}") from None
    if value > _MAX_UINT64:
        raise ListParseError(f"value out of range: {text!r}")
    return value


def set_entry_size(entry: Entry, text: str) -> None:
    """Set the entry size from a number with an optional base prefix."""
    entry.size = _parse_uint(text, 0)


def _parse_day_month_year(day: str, month: str, year: str, clock: str, tz) -> datetime:
    day_m = _DAY_RE.fullmatch(day)
    month_n = _MONTHS.get(month.lower()) if len(month) == 3 else None
    clock_m = _CLOCK_RE.fullmatch(clock)
    if not day_m or month_n is None or not _YEAR_RE.fullmatch(year) or not clock_m:
        raise ListParseError(f"cannot parse time {day} {month} {year} {clock}")
    try:
        return datetime(
            int(year), month_n, int(day_m.group(1)),
            int(clock_m.group(1)), int(clock_m.group(2)), tzinfo=tz,
        )
    except ValueError as exc:
        raise ListParseError(str(exc)) from None


def set_entry_time(entry: Entry, fields: List[str], now: datetime, tz: tzinfo) -> None:
    """Set the entry time from ``[month, day, year-or-clock]`` fields."""
    if ":" in fields[2]:
        when = _parse_day_month_year(fields[1], fields[0], str(now.year), fields[2], tz)
        if not when < _add_months(now, 6):
            when = _add_months(when, -12)
        entry.time = when
    else:
        if len(fields[2]) != 4:
            raise UnsupportedListDateError()
        entry.time = _parse_day_month_year(fields[1], fields[0], fields[2], "00:00", tz)


def parse_next_rfc3659_list_line(line: str, tz: tzinfo, entry: Entry) -> Entry:
    """Merge one RFC 3659 fact line into ``entry``."""
    semicolon = line.find(";")
    space = line.find(" ")
    if semicolon < 0 or semicolon > space:
        raise UnsupportedListLineError()

    name = line[space + 1:]
    if entry.name == "":
        entry.name = name
    elif entry.name != name:
        raise UnsupportedListLineError()

    for fact in line[:space - 1].split(";"):
        eq = fact.find("=")
        if eq < 1:
            raise UnsupportedListLineError()
        key = fact[:eq].lower()
        value = fact[eq + 1:]
        if key == "modify":
            match = _MODIFY_RE.fullmatch(value)
            if not match:
                raise ListParseError(f"cannot parse time {value!r}")
            try:
                entry.time = datetime(*(int(g) for g in match.groups()), tzinfo=tz)
            except ValueError as exc:
                raise ListParseError(str(exc)) from None
        elif key == "type":
            if value in ("dir", "cdir", "pdir"):
                entry.type = EntryType.FOLDER
            elif value == "file":
                entry.type = EntryType.FILE
        elif key == "size":
            set_entry_size(entry, value)
    return entry


def parse_rfc3659_list_line(line: str, now: datetime, tz: tzinfo) -> Entry:
    """Parse a listing line in the RFC 3659 (MLSD) format."""
    return parse_next_rfc3659_list_line(line, tz, Entry())


def parse_ls_list_line(line: str, now: datetime, tz: tzinfo) -> Entry:
    """Parse a listing line in the style of UNIX ``ls -l``."""
    first = line.find(" ")
    if not (first == 10 or (first == 11 and line[10] == "+")):
        raise UnsupportedListLineError()

    scanner = FieldScanner(line)
    fields = scanner.next_fields(6)
    if len(fields) < 6:
        raise UnsupportedListLineError()

    if fields[1] == "folder" and fields[2] == "0":
        entry = Entry(type=EntryType.FOLDER, name=scanner.remaining())
        set_entry_time(entry, fields[3:6], now, tz)
        return entry

    if fields[1] == "0":
        fields.append(scanner.next())
        entry = Entry(type=EntryType.FILE, name=scanner.remaining())
        try:
            set_entry_size(entry, fields[2])
        except ListParseError:
            raise UnsupportedListLineError() from None
        set_entry_time(entry, fields[4:7], now, tz)
        return entry

    fields.extend(scanner.next_fields(2))
    if len(fields) < 8:
        raise UnsupportedListLineError()

    entry = Entry(name=scanner.remaining())
    kind = fields[0][0]
    if kind == "-":
        entry.type = EntryType.FILE
        set_entry_size(entry, fields[4])
    elif kind == "d":
        entry.type = EntryType.FOLDER
    elif kind == "l":
        entry.type = EntryType.LINK
        arrow = entry.name.find(" -> ")
        if arrow > 0:
            entry.target = entry.name[arrow + 4:]
            entry.name = entry.name[:arrow]
    else:
        raise UnknownEntryTypeError()

    set_entry_time(entry, fields[5:8], now, tz)
    return entry


def _parse_dir_time(text: str, pattern: "re.Pattern[str]", tz) -> Optional[datetime]:
    match = pattern.fullmatch(text)
    if not match:
        return None
    groups = match.groups()
    if len(groups[0]) == 4:
        year, month, day = int(groups[0]), int(groups[1]), int(groups[2])
    else:
        month, day, year = int(groups[0]), int(groups[1]), int(groups[2])
        if len(groups[2]) == 2:
            year += 1900 if year >= 69 else 2000
    hour, minute = int(groups[3]), int(groups[4])
    if len(groups) == 6:
        if hour > 12:
            return None
        if groups[5] == "PM" and hour < 12:
            hour += 12
        elif groups[5] == "AM" and hour == 12:
            hour = 0
    try:
        return datetime(year, month, day, hour, minute, tzinfo=tz)
    except ValueError:
        return None


def parse_dir_list_line(line: str, now: datetime, tz: tzinfo) -> Entry:
    """Parse a listing line in the style of the MS-DOS ``DIR`` command."""
    entry = Entry()
    failed = False
    for pattern, width in _DIR_FORMATS:
        if len(line) > width:
            when = _parse_dir_time(line[:width], pattern, tz)
            if when is not None:
                entry.time = when
                line = line[width:]
                failed = False
                break
            failed = True
    if failed:
        raise UnsupportedListLineError()

    line = line.lstrip(" ")
    if line.startswith("<DIR>"):
        entry.type = EntryType.FOLDER
        line = line[len("<DIR>"):]
    else:
        space = line.find(" ")
        if space == -1:
            raise UnsupportedListLineError()
        try:
            entry.size = _parse_uint(line[:space], 10)
        except ListParseError:
            raise UnsupportedListLineError() from None
        entry.type = EntryType.FILE
        line = line[space:]

    entry.name = line.lstrip(" ")
    return entry


def parse_hosted_ftp_line(line: str, now: datetime, tz: tzinfo) -> Entry:
    """Parse the ``ls``-like format whose link count is always 0."""
    if line.find(" ") != 10:
        raise UnsupportedListLineError()
    scanner = FieldScanner(line)
    fields = scanner.next_fields(2)
    if len(fields) < 2 or fields[1] != "0":
        raise UnsupportedListLineError()
    return parse_ls_list_line(fields[0] + " 1 " + scanner.remaining(), now, tz)


def _int_field(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ListParseError(f"invalid number: {text!r}") from None


def parse_ibm_list_line(line: str, now: datetime, tz: tzinfo) -> Entry:
    """Parse the listing format of IBM systems such as AS/400."""
    scanner = FieldScanner(line)
    owner = scanner.next()
    if not owner:
        raise UnsupportedListLineError()
    size_text = scanner.next()
    if not size_text:
        raise UnsupportedListLineError()
    date_text = scanner.next()
    if len(date_text) != 8:
        raise UnsupportedListLineError()
    clock_text = scanner.next()
    if len(clock_text) != 8:
        raise UnsupportedListLineError()
    file_type = scanner.next()
    if not file_type:
        raise UnsupportedListLineError()
    path = scanner.remaining().lstrip(" ")
    if not path:
        raise UnsupportedListLineError()

    size = _parse_uint(size_text, 10)
    day = _int_field(date_text[0:2])
    month = _int_field(date_text[3:5])
    year = 2000 + _int_field(date_text[6:8])
    hour = _int_field(clock_text[0:2])
    minute = _int_field(clock_text[3:5])
    second = _int_field(clock_text[6:8])
    timestamp = _normalized(year, month, day, hour, minute, second, tz)

    entry_type = EntryType.FOLDER if file_type == "*DIR" else EntryType.FILE
    name = path
    if entry_type == EntryType.FOLDER and name.endswith("/"):
        name = name[:-1]
    return Entry(name=name, size=size, time=timestamp, type=entry_type)


_LIST_LINE_PARSERS: List[Callable[[str, datetime, tzinfo], Entry]] = [
    parse_rfc3659_list_line,
    parse_ls_list_line,
    parse_dir_list_line,
    parse_hosted_ftp_line,
    parse_ibm_list_line,
]


def parse_list_line(line: str, now: datetime, tz: tzinfo) -> Entry:
    """Parse a LIST line, trying each known format in turn."""
    for parser in _LIST_LINE_PARSERS:
        try:
            return parser(line, now, tz)
        except UnsupportedListLineError:
            continue
    raise UnsupportedListLineError()