"""FTP reply codes (RFC 959) and their descriptions."""

from enum import IntEnum


class Status(IntEnum):
    """Reply codes an FTP server may send on the control connection."""

    INITIATING = 100
    RESTART_MARKER = 110
    READY_MINUTE = 120
    ALREADY_OPEN = 125
    ABOUT_TO_SEND = 150

    COMMAND_OK = 200
    COMMAND_NOT_IMPLEMENTED = 202
    SYSTEM = 211
    DIRECTORY = 212
    FILE = 213
    HELP = 214
    NAME = 215
    READY = 220
    CLOSING = 221
    DATA_CONNECTION_OPEN = 225
    CLOSING_DATA_CONNECTION = 226
    PASSIVE_MODE = 227
    LONG_PASSIVE_MODE = 228
    EXTENDED_PASSIVE_MODE = 229
    LOGGED_IN = 230
    LOGGED_OUT = 231
    LOGOUT_ACK = 232
    AUTH_OK = 234
    REQUESTED_FILE_ACTION_OK = 250
    PATH_CREATED = 257

    USER_OK = 331
    LOGIN_NEED_ACCOUNT = 332
    REQUEST_FILE_PENDING = 350

    NOT_AVAILABLE = 421
    CAN_NOT_OPEN_DATA_CONNECTION = 425
    TRANSFER_ABORTED = 426
    INVALID_CREDENTIALS = 430
    HOST_UNAVAILABLE = 434
    FILE_ACTION_IGNORED = 450
    ACTION_ABORTED = 451
    INSUFFICIENT_STORAGE = 452

    BAD_COMMAND = 500
    BAD_ARGUMENTS = 501
    NOT_IMPLEMENTED = 502
    BAD_SEQUENCE = 503
    NOT_IMPLEMENTED_PARAMETER = 504
    NOT_LOGGED_IN = 530
    STOR_NEED_ACCOUNT = 532
    FILE_UNAVAILABLE = 550
    PAGE_TYPE_UNKNOWN = 551
    EXCEEDED_STORAGE = 552
    BAD_FILE_NAME = 553


_STATUS_TEXT = {
    Status.COMMAND_OK: "Command okay.",
    Status.COMMAND_NOT_IMPLEMENTED: "Command not implemented, superfluous at this site.",
    Status.SYSTEM: "System status, or system help reply.",
    Status.DIRECTORY: "Directory status.",
    Status.FILE: "File status.",
    Status.HELP: "Help message.",
    Status.NAME: "",
    Status.READY: "Service ready for new user.",
    Status.CLOSING: "Service closing control connection.",
    Status.DATA_CONNECTION_OPEN: "Data connection open; no transfer in progress.",
    Status.CLOSING_DATA_CONNECTION: "Closing data connection. Requested file action successful.",
    Status.PASSIVE_MODE: "Entering Passive Mode.",
    Status.LONG_PASSIVE_MODE: "Entering Long Passive Mode.",
    Status.EXTENDED_PASSIVE_MODE: "Entering Extended Passive Mode.",
    Status.LOGGED_IN: "User logged in, proceed.",
    Status.LOGGED_OUT: "User logged out; service terminated.",
    Status.LOGOUT_ACK: "Logout command noted, will complete when transfer done.",
    Status.AUTH_OK: "AUTH command OK",
    Status.REQUESTED_FILE_ACTION_OK: "Requested file action okay, completed.",
    Status.PATH_CREATED: "Path created.",
    Status.USER_OK: "User name okay, need password.",
    Status.LOGIN_NEED_ACCOUNT: "Need account for login.",
    Status.REQUEST_FILE_PENDING: "Requested file action pending further information.",
    Status.NOT_AVAILABLE: "Service not available, closing control connection.",
    Status.CAN_NOT_OPEN_DATA_CONNECTION: "Can't open data connection.",
    Status.TRANSFER_ABORTED: "Connection closed; transfer aborted.",
    Status.INVALID_CREDENTIALS: "Invalid username or password.",
    Status.HOST_UNAVAILABLE: "Requested host unavailable.",
    Status.FILE_ACTION_IGNORED: "Requested file action not taken.",
    Status.ACTION_ABORTED: "Requested action aborted. Local error in processing.",
    Status.INSUFFICIENT_STORAGE: "Insufficient storage space in system.",
    Status.BAD_COMMAND: "Command unrecognized.",
    Status.BAD_ARGUMENTS: "Syntax error in parameters or arguments.",
    Status.NOT_IMPLEMENTED: "Command not implemented.",
    Status.BAD_SEQUENCE: "Bad sequence of commands.",
    Status.NOT_IMPLEMENTED_PARAMETER: "Command not implemented for that parameter.",
    Status.NOT_LOGGED_IN: "Not logged in.",
    Status.STOR_NEED_ACCOUNT: "Need account for storing files.",
    Status.FILE_UNAVAILABLE: "File unavailable.",
    Status.PAGE_TYPE_UNKNOWN: "Page type unknown.",
    Status.EXCEEDED_STORAGE: "Exceeded storage allocation.",
    Status.BAD_FILE_NAME: "File name not allowed.",
}


def status_text(code: int) -> str:
    """Return the description of an FTP reply code."""
    try:
        return _STATUS_TEXT[code]
    except KeyError:
        return f"Unknown status code: {int(code)}"