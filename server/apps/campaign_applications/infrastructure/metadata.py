"""Metadata extraction utilities for attachments."""

import hashlib
import mimetypes
import uuid
from pathlib import Path
from typing import BinaryIO, Final

_CHUNK_SIZE: Final = 8192  # 8KB chunks for checksum calculation

# Every attachment object lives under this prefix
STORAGE_KEY_PREFIX: Final = 'campaign-applications'

_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from filename extension.

    Used when an upload does not declare a content type.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_MIME_TYPE
    return mime_type


def calculate_checksum(file_obj: BinaryIO) -> str:
    """Calculate SHA256 checksum of file.

    Reads file in chunks to handle large files efficiently.
    Resets file pointer to beginning after calculation.

    Args:
        file_obj: File-like object to checksum.

    Returns:
        Hex-encoded SHA256 hash string.
    """
    sha256_hash = hashlib.sha256()

    file_obj.seek(0)
    for chunk in iter(lambda: file_obj.read(_CHUNK_SIZE), b''):
        sha256_hash.update(chunk)

    # Reset file pointer to beginning for the upload
    file_obj.seek(0)

    return sha256_hash.hexdigest()


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = Path(filename).suffix
    return extension.lstrip('.').lower()


def build_storage_key(application_id: uuid.UUID) -> str:
    """Generate a fresh, opaque storage key for an attachment.

    The key never contains the original filename, so user input cannot
    influence where bytes are written.

    Example: 'campaign-applications/<application id>/<32 hex chars>'

    Args:
        application_id: ID of the owning application.

    Returns:
        Storage key.
    """
    return f'{STORAGE_KEY_PREFIX}/{application_id}/{uuid.uuid4().hex}'


def sanitize_filename(filename: str) -> str:
    """Reduce an uploaded filename to its final path component.

    Browsers may send full client paths; only the name is kept.

    Args:
        filename: Filename as sent by the client.

    Returns:
        Filename without directories, 'file' if nothing is left.
    """
    name = Path(filename.replace('\\', '/')).name.strip()
    return name or 'file'
