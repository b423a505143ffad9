"""
I/O failure taxonomy for injected errors.

Python reports transport failures as `OSError` subclasses keyed by `errno`.
`ErrorKind` names each failure a stream can report so tests can inject any of
them verbatim and later recognise them in events.

`OSError(code, strerror)` already returns the matching subclass for a known
errno (e.g. `ECONNRESET` gives `ConnectionResetError`), so kinds only record
their errno. Kinds without an errno are raised as a bare `OSError` carrying
the kind's description.
"""

from __future__ import annotations

import errno
import os
from enum import Enum
from typing import Final


class ErrorKind(Enum):
    """A category of I/O failure."""

    NOT_FOUND = "entity not found"
    PERMISSION_DENIED = "permission denied"
    CONNECTION_REFUSED = "connection refused"
    CONNECTION_RESET = "connection reset"
    CONNECTION_ABORTED = "connection aborted"
    NOT_CONNECTED = "not connected"
    ADDR_IN_USE = "address in use"
    ADDR_NOT_AVAILABLE = "address not available"
    NETWORK_UNREACHABLE = "network unreachable"
    HOST_UNREACHABLE = "host unreachable"
    BROKEN_PIPE = "broken pipe"
    ALREADY_EXISTS = "entity already exists"
    WOULD_BLOCK = "operation would block"
    INVALID_INPUT = "invalid input parameter"
    INVALID_DATA = "invalid data"
    TIMED_OUT = "timed out"
    WRITE_ZERO = "write zero"
    INTERRUPTED = "operation interrupted"
    UNSUPPORTED = "unsupported"
    UNEXPECTED_EOF = "unexpected end of file"
    OUT_OF_MEMORY = "out of memory"
    OTHER = "other error"

    @property
    def errno(self) -> int | None:
        """The errno code raised for this kind, or None when the platform has none."""
        return _ERRNO_BY_KIND.get(self)

    def to_exception(self) -> OSError:
        """Build a fresh exception instance for this kind."""
        code = self.errno
        if code is None:
            return OSError(self.value)
        return OSError(code, os.strerror(code))

    @classmethod
    def of(cls, exc: OSError) -> ErrorKind:
        """
        Classify an exception.

        Lookup order: errno, then exception class, then the description used
        by `to_exception` for errno-less kinds. Anything else is `OTHER`.
        """
        if exc.errno is not None and exc.errno in _KIND_BY_ERRNO:
            return _KIND_BY_ERRNO[exc.errno]

        for exc_type, kind in _KIND_BY_CLASS:
            if isinstance(exc, exc_type):
                return kind

        if len(exc.args) == 1 and isinstance(exc.args[0], str) and exc.args[0] in _KIND_BY_VALUE:
            return _KIND_BY_VALUE[exc.args[0]]

        return cls.OTHER


_ERRNO_BY_KIND: Final[dict[ErrorKind, int]] = {
    ErrorKind.NOT_FOUND: errno.ENOENT,
    ErrorKind.PERMISSION_DENIED: errno.EACCES,
    ErrorKind.CONNECTION_REFUSED: errno.ECONNREFUSED,
    ErrorKind.CONNECTION_RESET: errno.ECONNRESET,
    ErrorKind.CONNECTION_ABORTED: errno.ECONNABORTED,
    ErrorKind.NOT_CONNECTED: errno.ENOTCONN,
    ErrorKind.ADDR_IN_USE: errno.EADDRINUSE,
    ErrorKind.ADDR_NOT_AVAILABLE: errno.EADDRNOTAVAIL,
    ErrorKind.NETWORK_UNREACHABLE: errno.ENETUNREACH,
    ErrorKind.HOST_UNREACHABLE: errno.EHOSTUNREACH,
    ErrorKind.BROKEN_PIPE: errno.EPIPE,
    ErrorKind.ALREADY_EXISTS: errno.EEXIST,
    ErrorKind.WOULD_BLOCK: errno.EAGAIN,
    ErrorKind.INVALID_INPUT: errno.EINVAL,
    ErrorKind.TIMED_OUT: errno.ETIMEDOUT,
    ErrorKind.INTERRUPTED: errno.EINTR,
    ErrorKind.UNSUPPORTED: errno.EOPNOTSUPP,
    ErrorKind.OUT_OF_MEMORY: errno.ENOMEM,
}

_KIND_BY_ERRNO: Final[dict[int, ErrorKind]] = {
    code: kind for kind, code in _ERRNO_BY_KIND.items()
} | {errno.EWOULDBLOCK: ErrorKind.WOULD_BLOCK}

# Subclasses before their bases. Only consulted when the errno is missing or unknown.
_KIND_BY_CLASS: Final[tuple[tuple[type[OSError], ErrorKind], ...]] = (
    (ConnectionRefusedError, ErrorKind.CONNECTION_REFUSED),
    (ConnectionResetError, ErrorKind.CONNECTION_RESET),
    (ConnectionAbortedError, ErrorKind.CONNECTION_ABORTED),
    (BrokenPipeError, ErrorKind.BROKEN_PIPE),
    (BlockingIOError, ErrorKind.WOULD_BLOCK),
    (TimeoutError, ErrorKind.TIMED_OUT),
    (InterruptedError, ErrorKind.INTERRUPTED),
    (FileNotFoundError, ErrorKind.NOT_FOUND),
    (FileExistsError, ErrorKind.ALREADY_EXISTS),
    (PermissionError, ErrorKind.PERMISSION_DENIED),
)

_KIND_BY_VALUE: Final[dict[str, ErrorKind]] = {kind.value: kind for kind in ErrorKind}
