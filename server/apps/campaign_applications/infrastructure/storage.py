"""Custom storage backend for S3-compatible storage."""

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import Any, final, override

from botocore.exceptions import ClientError
from storages.backends.s3 import S3Storage
from storages.utils import clean_name

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = frozenset(('NoSuchKey', '404', 'NotFound'))


class ObjectNotFoundError(Exception):
    """Raised when a storage key has no object behind it."""

    def __init__(self, name: str) -> None:
        """Initialize ObjectNotFoundError.

        Args:
            name: Storage key that was requested.
        """
        self.name = name
        super().__init__(f'No object stored under {name}')


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for application attachments.

    Extends django-storages S3Storage with:
    - Transaction rollback support for failed DB operations
    - Streaming reads straight from the object body
    - Key listing for the orphan reconciliation sweep
    - Enhanced error logging
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage key for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the key.

        Returns:
            Actual storage key used (may differ from name if conflicts).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Deleting a key that holds no object is not an error.

        Args:
            name: Storage key of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded file for DB transaction rollback.

        Called when a database transaction or a later upload in the same
        batch fails after this file has been written to S3.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised, as the caller is already reporting
        the original failure.

        Args:
            name: Storage key of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            # The reconcile_attachments command removes what is left here
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )

    def open_stream(self, name: str) -> Any:
        """Open a live read stream for an object.

        Unlike ``open()``, nothing is spooled locally: the caller reads
        directly from the S3 response body and must close it.

        Args:
            name: Storage key of the object.

        Returns:
            botocore StreamingBody for the object.

        Raises:
            ObjectNotFoundError: If no object is stored under the key.
            ClientError: For any other S3 failure.
        """
        key = self._normalize_name(clean_name(name))
        try:
            response = self.bucket.Object(key).get()
        except ClientError as error:
            if error.response['Error']['Code'] in _MISSING_KEY_CODES:
                raise ObjectNotFoundError(name) from error
            logger.exception('Failed to open file from storage: %s', name)
            raise
        logger.debug('Opened stream for file: %s', name)
        return response['Body']

    def iter_objects(self, prefix: str) -> Iterator[tuple[str, datetime]]:
        """List objects stored under a key prefix.

        Args:
            prefix: Key prefix (e.g. 'campaign-applications/').

        Yields:
            Tuples of storage key and last modification time.
        """
        key_prefix = self._normalize_name(clean_name(prefix))
        for summary in self.bucket.objects.filter(Prefix=key_prefix):
            yield summary.key, summary.last_modified
