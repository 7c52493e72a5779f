"""Exceptions for campaign applications app."""


class NotFoundError(Exception):
    """Raised when an entity is absent or outside the caller's ownership.

    The two cases share one error so callers cannot probe which ids exist.
    """


class ForbiddenError(Exception):
    """Raised when the caller lacks the role an operation requires."""


class InvalidFileTypeError(Exception):
    """Raised when an upload's type or extension is not allowed."""

    def __init__(self, filename: str, reason: str) -> None:
        """Initialize InvalidFileTypeError.

        Args:
            filename: Original filename of the rejected upload.
            reason: Why the file was rejected.
        """
        self.filename = filename
        self.reason = reason
        super().__init__(f'File type not allowed for {filename}: {reason}')


class FileTooLargeError(Exception):
    """Raised when an upload exceeds the per-file size limit."""

    def __init__(self, filename: str, size_bytes: int, limit_bytes: int) -> None:
        """Initialize FileTooLargeError.

        Args:
            filename: Original filename of the rejected upload.
            size_bytes: Size of the upload.
            limit_bytes: Maximum allowed size.
        """
        self.filename = filename
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f'File {filename} is {size_bytes} bytes, '
            f'limit is {limit_bytes} bytes',
        )


class TooManyFilesError(Exception):
    """Raised when an upload request carries more files than allowed."""

    def __init__(self, count: int, limit: int) -> None:
        """Initialize TooManyFilesError.

        Args:
            count: Number of files sent.
            limit: Maximum files per request.
        """
        self.count = count
        self.limit = limit
        super().__init__(f'Received {count} files, at most {limit} allowed')


class InvalidTransitionError(Exception):
    """Raised when a status change is not reachable from the current status."""

    def __init__(self, current: str, requested: str) -> None:
        """Initialize InvalidTransitionError.

        Args:
            current: Current status.
            requested: Requested status.
        """
        self.current = current
        self.requested = requested
        super().__init__(
            f'Cannot change status from {current!r} to {requested!r}',
        )


class ConflictError(Exception):
    """Raised when an update was based on a stale version."""

    def __init__(self, expected_version: int, actual_version: int) -> None:
        """Initialize ConflictError.

        Args:
            expected_version: Version the client based its change on.
            actual_version: Version currently stored.
        """
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f'Application was modified (expected version '
            f'{expected_version}, current {actual_version})',
        )


class StorageFailureError(Exception):
    """Raised when the object store or database fails mid-operation.

    The operation leaves no partial state behind when this is raised.
    """
