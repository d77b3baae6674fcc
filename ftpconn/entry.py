"""Directory entries and transfer types."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional


class EntryType(IntEnum):
    """Kind of a directory entry."""

    FILE = 0
    FOLDER = 1
    LINK = 2

    def __str__(self) -> str:
        return ("file", "folder", "link")[self.value]


class TransferType(str, Enum):
    """Representation used for file transfers."""

    BINARY = "I"
    ASCII = "A"


@dataclass
class Entry:
    """A file, folder or link on the remote server."""

    name: str = ""
    target: str = ""
    type: EntryType = EntryType.FILE
    size: int = 0
    time: Optional[datetime] = None