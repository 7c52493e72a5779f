"""Upload validation against the configured allow-list.

Runs before any byte is written to storage.
"""

import logging
from typing import Final

from django.conf import settings

from server.apps.campaign_applications.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
)
from server.apps.campaign_applications.infrastructure.metadata import (
    get_file_extension,
)

logger = logging.getLogger(__name__)

_DEFAULT_MAX_FILE_SIZE: Final = 30 * 1024 * 1024


def get_allowed_mime_types() -> frozenset[str]:
    """Get MIME types accepted for attachments.

    Returns:
        Allowed MIME types from settings.
    """
    return frozenset(
        getattr(settings, 'CAMPAIGN_APPLICATION_ALLOWED_MIME_TYPES', ()),
    )


def get_allowed_extensions() -> frozenset[str]:
    """Get filename extensions accepted for attachments.

    Returns:
        Allowed lowercase extensions (without dot) from settings.
    """
    return frozenset(
        extension.lower()
        for extension in getattr(
            settings,
            'CAMPAIGN_APPLICATION_ALLOWED_EXTENSIONS',
            (),
        )
    )


def get_max_file_size() -> int:
    """Get per-file size limit in bytes.

    Returns:
        Limit from settings or 30 MiB.
    """
    return getattr(
        settings,
        'CAMPAIGN_APPLICATION_MAX_FILE_SIZE',
        _DEFAULT_MAX_FILE_SIZE,
    )


def validate_file_type(content_type: str, filename: str) -> None:
    """Check an upload's declared type and extension.

    Both must be on the allow-list; a matching MIME type with a
    disallowed extension (or the reverse) is rejected.

    Args:
        content_type: MIME type declared by the client.
        filename: Original filename.

    Raises:
        InvalidFileTypeError: If the type or extension is not allowed.
    """
    mime_type = content_type.split(';', 1)[0].strip().lower()
    if mime_type not in get_allowed_mime_types():
        logger.warning('Rejected upload %s: type %s', filename, mime_type)
        raise InvalidFileTypeError(
            filename,
            f'content type {mime_type or "(none)"} is not allowed',
        )

    extension = get_file_extension(filename)
    if extension not in get_allowed_extensions():
        logger.warning('Rejected upload %s: extension %s', filename, extension)
        raise InvalidFileTypeError(
            filename,
            f'extension {extension or "(none)"} is not allowed',
        )


def validate_file_size(size_bytes: int, filename: str) -> None:
    """Check an upload against the per-file size limit.

    Args:
        size_bytes: Size of the upload.
        filename: Original filename.

    Raises:
        FileTooLargeError: If the upload is over the limit.
    """
    limit = get_max_file_size()
    if size_bytes > limit:
        logger.warning(
            'Rejected upload %s: %d bytes over limit %d',
            filename,
            size_bytes,
            limit,
        )
        raise FileTooLargeError(filename, size_bytes, limit)
