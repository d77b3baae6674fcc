from datetime import datetime, timezone

import pytest

from ftpconn.entry import Entry, EntryType
from ftpconn.parse import (
    ListParseError,
    UnknownEntryTypeError,
    UnsupportedListDateError,
    UnsupportedListLineError,
    parse_ibm_list_line,
    parse_list_line,
    parse_next_rfc3659_list_line,
    set_entry_size,
    set_entry_time,
)

UTC = timezone.utc
NOW = datetime(2017, 3, 10, 23, 0, tzinfo=UTC)
THIS_YEAR = NOW.year
PREVIOUS_YEAR = THIS_YEAR - 1


def t(*args):
    return datetime(*args, tzinfo=UTC)


LIST_TESTS = [
    ("drwxr-xr-x    3 110      1002            3 Dec 02  2009 pub", "pub", 0, EntryType.FOLDER, t(2009, 12, 2)),
    ("drwxr-xr-x    3 110      1002            3 Dec 02  2009 p u b", "p u b", 0, EntryType.FOLDER, t(2009, 12, 2)),
    ("-rw-r--r--   1 marketwired marketwired    12016 Mar 16  2016 2016031611G087802-001.newsml", "2016031611G087802-001.newsml", 12016, EntryType.FILE, t(2016, 3, 16)),
    ("-rwxr-xr-x    3 110      1002            1234567 Dec 02  2009 fileName", "fileName", 1234567, EntryType.FILE, t(2009, 12, 2)),
    ("lrwxrwxrwx   1 root     other          7 Jan 25 00:17 bin -> usr/bin", "bin", 0, EntryType.LINK, t(THIS_YEAR, 1, 25, 0, 17)),
    ("drwxr-xr-x               folder        0 Aug 15 05:49 !!!-Tipp des Haus!", "!!!-Tipp des Haus!", 0, EntryType.FOLDER, t(THIS_YEAR, 8, 15, 5, 49)),
    ("drwxrwxrwx               folder        0 Aug 11 20:32 P0RN", "P0RN", 0, EntryType.FOLDER, t(THIS_YEAR, 8, 11, 20, 32)),
    ("-rw-r--r--        0   18446744073709551615 18446744073709551615 Nov 16  2006 VIDEO_TS.VOB", "VIDEO_TS.VOB", 18446744073709551615, EntryType.FILE, t(2006, 11, 16)),
    ("----------   1 owner    group         1803128 Jul 10 10:18 ls-lR.Z", "ls-lR.Z", 1803128, EntryType.FILE, t(THIS_YEAR, 7, 10, 10, 18)),
    ("d---------   1 owner    group               0 Nov  9 19:45 Softlib", "Softlib", 0, EntryType.FOLDER, t(PREVIOUS_YEAR, 11, 9, 19, 45)),
    ("-rwxrwxrwx   1 noone    nogroup      322 Aug 19  1996 message.ftp", "message.ftp", 322, EntryType.FILE, t(1996, 8, 19)),
    ("modify=20150813224845;perm=fle;type=cdir;unique=119FBB87U4;UNIX.group=0;UNIX.mode=0755;UNIX.owner=0; .", ".", 0, EntryType.FOLDER, t(2015, 8, 13, 22, 48, 45)),
    ("modify=20150813224845;perm=fle;type=pdir;unique=119FBB87U4;UNIX.group=0;UNIX.mode=0755;UNIX.owner=0; ..", "..", 0, EntryType.FOLDER, t(2015, 8, 13, 22, 48, 45)),
    ("modify=20150806235817;perm=fle;type=dir;unique=1B20F360U4;UNIX.group=0;UNIX.mode=0755;UNIX.owner=0; movies", "movies", 0, EntryType.FOLDER, t(2015, 8, 6, 23, 58, 17)),
    ("modify=20150814172949;perm=flcdmpe;type=dir;unique=85A0C168U4;UNIX.group=0;UNIX.mode=0777;UNIX.owner=0; _upload", "_upload", 0, EntryType.FOLDER, t(2015, 8, 14, 17, 29, 49)),
    ("modify=20150813175250;perm=adfr;size=951;type=file;unique=119FBB87UE;UNIX.group=0;UNIX.mode=0644;UNIX.owner=0; welcome.msg", "welcome.msg", 951, EntryType.FILE, t(2015, 8, 13, 17, 52, 50)),
    ("Modify=20150813175250;Perm=adfr;Size=951;Type=file;Unique=119FBB87UE;UNIX.group=0;UNIX.mode=0644;UNIX.owner=0; welcome.msg", "welcome.msg", 951, EntryType.FILE, t(2015, 8, 13, 17, 52, 50)),
    ("08-07-15  07:50PM                  718 Post_PRR_20150901_1166_265118_13049.dat", "Post_PRR_20150901_1166_265118_13049.dat", 718, EntryType.FILE, t(2015, 8, 7, 19, 50)),
    ("08-10-15  02:04PM       <DIR>          Billing", "Billing", 0, EntryType.FOLDER, t(2015, 8, 10, 14, 4)),
    ("08-07-2015  07:50PM                  718 Post_PRR_20150901_1166_265118_13049.dat", "Post_PRR_20150901_1166_265118_13049.dat", 718, EntryType.FILE, t(2015, 8, 7, 19, 50)),
    ("08-10-2015  02:04PM       <DIR>          Billing", "Billing", 0, EntryType.FOLDER, t(2015, 8, 10, 14, 4)),
    ("drwxr-xr-x    3 110      1002            3 Dec 02  2009 spaces   dir   name", "spaces   dir   name", 0, EntryType.FOLDER, t(2009, 12, 2)),
    ("-rwxr-xr-x    3 110      1002            1234567 Dec 02  2009 file   name", "file   name", 1234567, EntryType.FILE, t(2009, 12, 2)),
    ("-rwxr-xr-x    3 110      1002            1234567 Dec 02  2009  foo bar ", " foo bar ", 1234567, EntryType.FILE, t(2009, 12, 2)),
    ("-r--------   0 user group     65222236 Feb 24 00:39 RegularFile", "RegularFile", 65222236, EntryType.FILE, t(THIS_YEAR, 2, 24, 0, 39)),
    ("-rwxrw-r--+  1 521      101         2080 May 21 10:53 data.csv", "data.csv", 2080, EntryType.FILE, t(THIS_YEAR, 5, 21, 10, 53)),
]


@pytest.mark.parametrize("line,name,size,entry_type,when", LIST_TESTS)
def test_parse_valid_list_line(line, name, size, entry_type, when):
    entry = parse_list_line(line, NOW, UTC)
    assert entry.name == name
    assert entry.type == entry_type
    assert entry.size == size
    assert entry.time == when


@pytest.mark.parametrize(
    "line,name,target",
    [
        ("lrwxrwxrwx   1 root     other          7 Jan 25 00:17 bin -> usr/bin", "bin", "usr/bin"),
        ("lrwxrwxrwx    1 0        1001           27 Jul 07  2017 R-3.4.0.pkg -> el-capitan/base/R-3.4.0.pkg", "R-3.4.0.pkg", "el-capitan/base/R-3.4.0.pkg"),
    ],
)
def test_parse_symlinks(line, name, target):
    entry = parse_list_line(line, NOW, UTC)
    assert entry.name == name
    assert entry.target == target
    assert entry.type == EntryType.LINK


@pytest.mark.parametrize(
    "line,error,message",
    [
        ("d [R----F--] supervisor            512       Jan 16 18:53 login", UnsupportedListLineError, "unsupported LIST line"),
        ("- [R----F--] rhesus             214059       Oct 20 15:27 cx.exe", UnsupportedListLineError, "unsupported LIST line"),
        ("drwxr-xr-x    3 110      1002            3 Dec 02  209 pub", UnsupportedListDateError, "unsupported LIST date"),
        ("modify=20150806235817;invalid;UNIX.owner=0; movies", UnsupportedListLineError, "unsupported LIST line"),
        ("Zrwxrwxrwx   1 root     other          7 Jan 25 00:17 bin -> usr/bin", UnknownEntryTypeError, "unknown entry type"),
        ("total 1", UnsupportedListLineError, "unsupported LIST line"),
        ("000000000x ", UnsupportedListLineError, "unsupported LIST line"),
        ("", UnsupportedListLineError, "unsupported LIST line"),
    ],
)
def test_parse_unsupported_list_line(line, error, message):
    with pytest.raises(error) as info:
        parse_list_line(line, NOW, UTC)
    assert str(info.value) == message


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Feb 10 23:00", t(THIS_YEAR, 2, 10, 23)),
        ("Sep 10 22:59", t(THIS_YEAR, 9, 10, 22, 59)),
        ("Sep 10 23:00", t(PREVIOUS_YEAR, 9, 10, 23)),
        ("Jan 23  2019", t(2019, 1, 23)),
    ],
)
def test_set_time(text, expected):
    entry = Entry()
    set_entry_time(entry, text.split(), NOW, UTC)
    assert entry.time == expected


@pytest.mark.parametrize(
    "line,name,size,when,entry_type",
    [
        ("TSTITFECOM        804 13/05/25 13:26:10 *STMF      ON_HAND_090425_000001.CSV", "ON_HAND_090425_000001.CSV", 804, t(2025, 5, 13, 13, 26, 10), EntryType.FILE),
        ("TSTITFECOM      12288 13/05/25 13:26:12 *DIR       .deleted/", ".deleted", 12288, t(2025, 5, 13, 13, 26, 12), EntryType.FOLDER),
        ("TSTITFECOM       8192 13/05/25 13:31:43 *DIR       561/", "561", 8192, t(2025, 5, 13, 13, 31, 43), EntryType.FOLDER),
        ("TSTITFECOM      21504 13/05/25 13:31:42 *STMF      114/POLL53.DWN", "114/POLL53.DWN", 21504, t(2025, 5, 13, 13, 31, 42), EntryType.FILE),
    ],
)
def test_parse_ibm_list_line(line, name, size, when, entry_type):
    entry = parse_ibm_list_line(line, t(2023, 1, 1), UTC)
    assert entry.name == name
    assert entry.size == size
    assert entry.time == when
    assert entry.type == entry_type


def test_set_entry_size_bases():
    entry = Entry()
    set_entry_size(entry, "0x10")
    assert entry.size == 16
    set_entry_size(entry, "010")
    assert entry.size == 8
    with pytest.raises(ListParseError):
        set_entry_size(entry, "-1")
    with pytest.raises(ListParseError):
        set_entry_size(entry, "18446744073709551616")


def test_rfc3659_lines_merge_into_one_entry():
    entry = parse_next_rfc3659_list_line("Type=dir;Size=0; d", UTC, Entry())
    entry = parse_next_rfc3659_list_line("Modify=20201213202400; d", UTC, entry)
    assert entry.type == EntryType.FOLDER
    assert entry.time == t(2020, 12, 13, 20, 24)
    with pytest.raises(UnsupportedListLineError):
        parse_next_rfc3659_list_line("Size=1; other", UTC, entry)