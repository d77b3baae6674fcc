import pytest

from ftpconn.entry import Entry, EntryType
from ftpconn.walker import Walker


class FakeConn:
    def __init__(self, tree, fail=()):
        self.tree = tree
        self.fail = set(fail)
        self.listed = []

    def list(self, path):
        self.listed.append(path)
        if path in self.fail:
            raise OSError("listing failed")
        return self.tree.get(path, [])


def test_walk_root_gets_trailing_slash():
    conn = FakeConn({})
    w = Walker(conn, "root")
    assert w.root == "root/"
    assert w.server_conn is conn


def test_cur_init_lists_root():
    conn = FakeConn({"/root/": [Entry(name="lo")]})
    w = Walker(conn, "/root")
    assert w.next() is True
    assert w.path() == "/root/lo"
    assert w.stat().name == "lo"
    assert w.next() is False


def test_descends_and_skips_dot_entries():
    conn = FakeConn({
        "/r/": [Entry(name="."), Entry(name=".."), Entry(name="a"),
                Entry(name="sub", type=EntryType.FOLDER)],
        "/r/sub": [Entry(name="b")],
    })
    paths = [path for path, _ in Walker(conn, "/r")]
    assert paths == ["/r/sub", "/r/sub/b", "/r/a"]


def test_skip_dir_does_not_list():
    conn = FakeConn({
        "/r/": [Entry(name="a"), Entry(name="sub", type=EntryType.FOLDER)],
        "/r/sub": [Entry(name="b")],
    })
    w = Walker(conn, "/r")
    assert w.next() and w.path() == "/r/sub"
    w.skip_dir()
    assert w.next() and w.path() == "/r/a"
    assert w.next() is False
    assert "/r/sub" not in conn.listed


def test_error_stops_walk():
    conn = FakeConn({}, fail={"/r/"})
    w = Walker(conn, "/r")
    assert w.next() is False
    assert str(w.err()) == "listing failed"


def test_iteration_raises_error():
    conn = FakeConn({"/r/": [Entry(name="sub", type=EntryType.FOLDER)]}, fail={"/r/sub"})
    with pytest.raises(OSError, match="listing failed"):
        list(Walker(conn, "/r"))


def test_empty_tree_returns_false():
    w = Walker(FakeConn({}), "/root")
    assert w.next() is False
    assert w.err() is None