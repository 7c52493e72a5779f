"""Business logic for attachment operations.

Ordering rules keep storage and database consistent:
- upload: write every object first, then create all metadata rows
- delete: remove the row and the object in one transaction that only
  commits once the object is gone
"""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, Any, Final, Self

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import UploadedFile
from django.db import DatabaseError, transaction
from django.utils.http import content_disposition_header

from server.apps.campaign_applications.exceptions import (
    NotFoundError,
    StorageFailureError,
    TooManyFilesError,
)
from server.apps.campaign_applications.infrastructure.metadata import (
    build_storage_key,
    calculate_checksum,
    detect_mime_type,
    sanitize_filename,
)
from server.apps.campaign_applications.infrastructure.storage import (
    ObjectNotFoundError,
)
from server.apps.campaign_applications.infrastructure.validation import (
    validate_file_size,
    validate_file_type,
)
from server.apps.campaign_applications.logic.access import visible_files
from server.apps.campaign_applications.models import (
    CampaignApplication,
    CampaignApplicationFile,
)
from server.apps.people.logic.actors import Actor
from server.apps.people.models import Person

if TYPE_CHECKING:
    from server.apps.campaign_applications.infrastructure.storage import (
        FileStorage,
    )

logger = logging.getLogger(__name__)

# Errors raised by boto3/botocore or local file I/O during storage calls
STORAGE_ERRORS: Final = (Boto3Error, BotoCoreError, ClientError, OSError)

IMAGE_CACHE_CONTROL: Final = (
    'public, s-maxage=15552000, stale-while-revalidate=15552000, immutable'
)
NO_CACHE_CONTROL: Final = 'no-store'

_DEFAULT_MAX_FILES: Final = 10


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def get_max_files() -> int:
    """Get maximum number of files per upload request.

    Returns:
        Limit from settings or 10.
    """
    return getattr(settings, 'CAMPAIGN_APPLICATION_MAX_FILES', _DEFAULT_MAX_FILES)


def cache_control_for(mime_type: str) -> str:
    """Choose the Cache-Control policy for a download.

    Images are cached as immutable; every other type is never cached.

    Args:
        mime_type: Stored MIME type of the file.

    Returns:
        Cache-Control header value.
    """
    if (mime_type or '').startswith('image/'):
        return IMAGE_CACHE_CONTROL
    return NO_CACHE_CONTROL


def content_disposition_for(filename: str) -> str:
    """Build a Content-Disposition that forces a download.

    Quotes and backslashes in the name are escaped; non-ASCII names are
    sent in the RFC 5987 form.

    Args:
        filename: Original filename of the attachment.

    Returns:
        Content-Disposition header value.
    """
    return content_disposition_header(as_attachment=True, filename=filename)


@dataclass(frozen=True, slots=True)
class FileHandle:
    """Open download of a stored attachment.

    Wraps a live storage stream; use as a context manager or hand the
    stream to a response that closes it.
    """

    mime_type: str
    filename: str
    size_bytes: int
    stream: Any

    @property
    def content_disposition(self) -> str:
        """Content-Disposition forcing a download under the original name."""
        return content_disposition_for(self.filename)

    @property
    def cache_control(self) -> str:
        """Cache-Control policy for this file's MIME type."""
        return cache_control_for(self.mime_type)

    def close(self) -> None:
        """Release the underlying storage stream."""
        self.stream.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


@dataclass(frozen=True, slots=True)
class _PreparedUpload:
    """Upload that passed validation, with its computed metadata."""

    upload: UploadedFile
    filename: str
    mime_type: str
    size_bytes: int
    checksum: str


def _prepare_upload(upload: UploadedFile) -> _PreparedUpload:
    """Validate one upload and compute its metadata.

    Args:
        upload: File received in the request.

    Returns:
        Prepared upload.

    Raises:
        InvalidFileTypeError: If the type or extension is not allowed.
        FileTooLargeError: If the file is over the size limit.
    """
    filename = sanitize_filename(upload.name or '')
    declared_type = upload.content_type or detect_mime_type(filename)
    validate_file_type(declared_type, filename)
    validate_file_size(upload.size or 0, filename)

    return _PreparedUpload(
        upload=upload,
        filename=filename,
        mime_type=declared_type.split(';', 1)[0].strip().lower(),
        size_bytes=upload.size or 0,
        checksum=calculate_checksum(upload),
    )


def _rollback_objects(storage: 'FileStorage', storage_keys: Sequence[str]) -> None:
    """Remove objects written by a batch that did not complete.

    Args:
        storage: Storage backend.
        storage_keys: Keys written so far.
    """
    for storage_key in storage_keys:
        storage.rollback_upload(storage_key)


def upload_files(
    application_id: uuid.UUID,
    uploads: Sequence[UploadedFile],
    person: Person,
) -> list[CampaignApplicationFile]:
    """Attach a batch of uploaded files to an application.

    The batch is all-or-nothing. Every file is validated before any byte
    is written; a failed write removes the objects already written; and
    metadata rows are created only after all objects are stored.

    Args:
        application_id: ID of the application.
        uploads: Files received in the request.
        person: Person uploading the files.

    Returns:
        Created CampaignApplicationFile instances, in upload order.

    Raises:
        ValidationError: If no files were sent.
        TooManyFilesError: If more files were sent than allowed.
        NotFoundError: If the application does not exist.
        InvalidFileTypeError: If any file has a disallowed type.
        FileTooLargeError: If any file is over the size limit.
        StorageFailureError: If storage or database writes fail.
    """
    if not uploads:
        raise ValidationError('No files provided', code='no_files')

    max_files = get_max_files()
    if len(uploads) > max_files:
        raise TooManyFilesError(len(uploads), max_files)

    try:
        application = CampaignApplication.objects.get(pk=application_id)
    except CampaignApplication.DoesNotExist as error:
        raise NotFoundError('Campaign application not found') from error

    # Validate the whole batch before touching storage
    prepared = [_prepare_upload(upload) for upload in uploads]

    storage = _get_storage()
    storage_keys: list[str] = []

    # Step 1: Upload every object
    try:
        for item in prepared:
            storage_keys.append(
                storage.save(build_storage_key(application.id), item.upload),
            )
    except STORAGE_ERRORS as error:
        logger.exception(
            'Upload batch failed for application %s after %d of %d files',
            application.id,
            len(storage_keys),
            len(prepared),
        )
        _rollback_objects(storage, storage_keys)
        raise StorageFailureError('Failed to store uploaded files') from error
    except BaseException:
        # Request cancelled mid-batch: nothing may outlive it
        _rollback_objects(storage, storage_keys)
        raise

    # Step 2: Create all metadata rows in one transaction
    try:
        with transaction.atomic():
            attachments = [
                CampaignApplicationFile.objects.create(
                    application=application,
                    uploaded_by=person,
                    storage_key=storage_key,
                    filename=item.filename,
                    mime_type=item.mime_type,
                    size_bytes=item.size_bytes,
                    checksum_sha256=item.checksum,
                )
                for item, storage_key in zip(prepared, storage_keys, strict=True)
            ]
    except DatabaseError as error:
        logger.exception(
            'Database transaction failed, rolling back storage uploads '
            'for application %s',
            application.id,
        )
        _rollback_objects(storage, storage_keys)
        raise StorageFailureError('Failed to record uploaded files') from error

    logger.info(
        'Uploaded %d files to application %s (person: %s)',
        len(attachments),
        application.id,
        person.id,
    )
    return attachments


def _get_visible_file(
    file_id: uuid.UUID,
    actor: Actor,
    *,
    for_update: bool = False,
) -> CampaignApplicationFile:
    """Get an attachment the actor may access.

    Args:
        file_id: ID of the attachment.
        actor: Acting role for the request.
        for_update: Lock the row for the current transaction.

    Returns:
        CampaignApplicationFile instance.

    Raises:
        NotFoundError: If absent or outside the actor's scope.
    """
    files = visible_files(actor)
    if for_update:
        files = files.select_for_update()
    try:
        return files.get(pk=file_id)
    except CampaignApplicationFile.DoesNotExist as error:
        raise NotFoundError('File not found') from error


def fetch_file(file_id: uuid.UUID, actor: Actor) -> FileHandle:
    """Open an attachment for download.

    Args:
        file_id: ID of the attachment.
        actor: Acting role for the request.

    Returns:
        FileHandle with a live stream the caller must close.

    Raises:
        NotFoundError: If absent or outside the actor's scope.
        StorageFailureError: If the bytes cannot be read.
    """
    attachment = _get_visible_file(file_id, actor)
    storage = _get_storage()

    try:
        stream = storage.open_stream(attachment.storage_key)
    except ObjectNotFoundError as error:
        logger.error(
            'File %s has metadata but no object: %s',
            attachment.id,
            attachment.storage_key,
        )
        raise StorageFailureError('File content is missing') from error
    except STORAGE_ERRORS as error:
        raise StorageFailureError('Failed to read file') from error

    logger.debug('Serving file %s (%s)', attachment.id, attachment.mime_type)
    return FileHandle(
        mime_type=attachment.mime_type,
        filename=attachment.filename,
        size_bytes=attachment.size_bytes,
        stream=stream,
    )


def _remove(attachment: CampaignApplicationFile) -> None:
    """Delete an attachment's row and object.

    Must run inside a transaction: the row delete only commits if the
    object delete returns.

    Args:
        attachment: Locked attachment row.
    """
    storage_key = attachment.storage_key
    attachment.delete()
    _get_storage().delete(storage_key)


def delete_file(file_id: uuid.UUID, actor: Actor) -> None:
    """Delete an attachment and its stored bytes.

    If the object cannot be deleted the row is kept, so the call can be
    retried safely.

    Args:
        file_id: ID of the attachment.
        actor: Acting role for the request.

    Raises:
        NotFoundError: If absent or outside the actor's scope.
        StorageFailureError: If the object delete fails.
    """
    try:
        with transaction.atomic():
            attachment = _get_visible_file(file_id, actor, for_update=True)
            _remove(attachment)
    except STORAGE_ERRORS as error:
        logger.exception('Failed to delete file %s, row kept', file_id)
        raise StorageFailureError('Failed to delete file') from error

    logger.info(
        'File deleted: ID=%s by %s',
        file_id,
        type(actor).__name__,
    )


def purge_file(attachment: CampaignApplicationFile) -> None:
    """Delete an attachment without an actor check.

    Used by the Django admin, which has its own permission system.

    Args:
        attachment: Attachment to delete.

    Raises:
        StorageFailureError: If the object delete fails.
    """
    file_id = attachment.id
    try:
        with transaction.atomic():
            _remove(attachment)
    except STORAGE_ERRORS as error:
        logger.exception('Failed to purge file %s, row kept', file_id)
        raise StorageFailureError('Failed to delete file') from error

    logger.info('File purged: ID=%s', file_id)
