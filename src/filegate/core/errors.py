"""Exception types and error codes for the file-access gate."""

from enum import Enum


class SecurityErrorCode(str, Enum):
    """Policy violation codes, listed in validation priority order."""

    PATH_TRAVERSAL = "PATH_TRAVERSAL"
    SENSITIVE_FILE = "SENSITIVE_FILE"
    ACCESS_DENIED = "ACCESS_DENIED"
    SYMLINK_DETECTED = "SYMLINK_DETECTED"
    SIZE_EXCEEDED = "SIZE_EXCEEDED"
    FILE_LIMIT_EXCEEDED = "FILE_LIMIT_EXCEEDED"


class ReadErrorCode(str, Enum):
    """Filesystem failure codes for read operations."""

    NOT_FOUND = "NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    IS_DIRECTORY = "IS_DIRECTORY"
    NOT_A_DIRECTORY = "NOT_A_DIRECTORY"
    BINARY_FILE = "BINARY_FILE"
    READ_FAILED = "READ_FAILED"


class FilegateError(Exception):
    """Base exception for filegate errors."""

    pass


class SecurityError(FilegateError):
    """Raised when a path fails security validation or exceeds a limit.

    Attributes:
        code: The SecurityErrorCode describing the violation
        path: The offending path, if the violation concerns a single path
        actual_size: File size in bytes (SIZE_EXCEEDED only)
        limit: The ceiling that was exceeded (SIZE_EXCEEDED and FILE_LIMIT_EXCEEDED)
    """

    def __init__(
        self,
        message: str,
        code: SecurityErrorCode,
        path: str | None = None,
        actual_size: int | None = None,
        limit: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.path = path
        self.actual_size = actual_size
        self.limit = limit


class ReadError(FilegateError):
    """Raised when a file or directory cannot be read.

    The underlying OSError (if any) is kept on ``cause`` and chained as
    ``__cause__`` by the raiser.
    """

    def __init__(
        self,
        message: str,
        code: ReadErrorCode,
        path: str,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.path = path
        self.cause = cause
