"""Upload handlers enforcing attachment limits while the body streams in."""

import logging
from typing import Any

from django.core.files.uploadhandler import FileUploadHandler

from server.apps.campaign_applications.exceptions import FileTooLargeError
from server.apps.campaign_applications.infrastructure.validation import (
    get_max_file_size,
)

logger = logging.getLogger(__name__)


class SizeLimitUploadHandler(FileUploadHandler):
    """Abort the request as soon as one file passes the size limit.

    Sits first in ``request.upload_handlers`` and passes every chunk on
    unchanged; the next handlers still build the uploaded files.
    """

    def __init__(self, request: Any = None) -> None:
        """Initialize SizeLimitUploadHandler.

        Args:
            request: HTTP request being parsed.
        """
        super().__init__(request)
        self.limit = get_max_file_size()
        self.received = 0

    def new_file(self, *args: Any, **kwargs: Any) -> None:
        """Start counting bytes for the next file.

        Args:
            args: Positional handler arguments.
            kwargs: Keyword handler arguments.
        """
        super().new_file(*args, **kwargs)
        self.received = 0

    def receive_data_chunk(self, raw_data: bytes, start: int) -> bytes:
        """Count a chunk and pass it on.

        Args:
            raw_data: Chunk of file content.
            start: Offset of the chunk in the file.

        Returns:
            The same chunk, for the next handler.

        Raises:
            FileTooLargeError: If the file passed the size limit.
        """
        self.received += len(raw_data)
        if self.received > self.limit:
            logger.warning(
                'Aborted upload %s after %d bytes, limit %d',
                self.file_name,
                self.received,
                self.limit,
            )
            raise FileTooLargeError(self.file_name, self.received, self.limit)
        return raw_data

    def file_complete(self, file_size: int) -> None:
        """Leave file construction to the next handler."""
        return None
