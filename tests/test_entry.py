import pytest

from ftpconn.entry import Entry, EntryType, TransferType


@pytest.mark.parametrize(
    "member, text",
    [
        (EntryType.FILE, "file"),
        (EntryType.FOLDER, "folder"),
        (EntryType.LINK, "link"),
    ],
)
def test_entry_type_string(member, text):
    assert str(EntryType(member.value)) == text


@pytest.mark.parametrize(
    "code, member",
    [
        ("I", TransferType.BINARY),
        ("A", TransferType.ASCII),
    ],
)
def test_transfer_type_from_code(code, member):
    assert TransferType(code) is member


def test_transfer_type_rejects_unknown_code():
    with pytest.raises(ValueError):
        TransferType("X")


def test_entry_defaults():
    entry = Entry()
    assert (entry.name, entry.target, entry.type, entry.size, entry.time) == (
        "", "", EntryType.FILE, 0, None,
    )