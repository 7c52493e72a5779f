"""Management command to reconcile stored objects with attachment rows."""

import logging
from datetime import timedelta
from typing import Any, Final

from django.core.files.storage import default_storage
from django.core.management.base import BaseCommand
from django.utils import timezone

from server.apps.campaign_applications.infrastructure.metadata import (
    STORAGE_KEY_PREFIX,
)
from server.apps.campaign_applications.models import CampaignApplicationFile

_DEFAULT_GRACE_MINUTES: Final = 60
_DEFAULT_BATCH_SIZE: Final = 1000

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Delete orphaned attachment objects left by failed rollbacks.

    Also reports file records whose stored object is gone, which happens
    when a delete commit fails after the object was removed. Those
    records are reported only, never deleted.
    """

    help = 'Delete stored attachment objects that no file record points to'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=_DEFAULT_BATCH_SIZE,
            help=f'Max objects to delete (default: {_DEFAULT_BATCH_SIZE})',
        )
        parser.add_argument(
            '--grace-minutes',
            type=int,
            default=_DEFAULT_GRACE_MINUTES,
            help=(
                'Skip objects newer than this, uploads may still be in '
                f'flight (default: {_DEFAULT_GRACE_MINUTES})'
            ),
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the reconciliation sweep.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        batch_size = options['batch_size']
        cutoff = timezone.now() - timedelta(minutes=options['grace_minutes'])

        self.stdout.write(
            f'Looking for orphaned objects stored before {cutoff}',
        )

        stored = dict(
            default_storage.iter_objects(f'{STORAGE_KEY_PREFIX}/'),
        )
        recorded = set(
            CampaignApplicationFile.objects.values_list(
                'storage_key',
                flat=True,
            ),
        )

        orphans = [
            storage_key
            for storage_key, last_modified in stored.items()
            if last_modified <= cutoff and storage_key not in recorded
        ][:batch_size]

        missing = self._report_missing_objects(stored, cutoff)

        count = 0
        failed = 0

        for storage_key in orphans:
            if dry_run:
                self.stdout.write(f'Would delete: {storage_key}')
                count += 1
                continue

            try:
                default_storage.delete(storage_key)
                count += 1
                logger.info('Deleted orphaned object: %s', storage_key)
            except Exception as exc:
                self.stderr.write(f'Failed to delete {storage_key}: {exc}')
                logger.exception(
                    'Failed to delete orphaned object: %s',
                    storage_key,
                )
                failed += 1

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would delete {count} orphaned objects'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Deleted {count} orphaned objects, {failed} failed',
                ),
            )
        if missing:
            self.stdout.write(
                self.style.WARNING(
                    f'{missing} file records have no stored object',
                ),
            )

    def _report_missing_objects(self, stored: dict, cutoff: Any) -> int:
        """Report file records older than the cutoff with no object.

        Args:
            stored: Stored object keys mapped to last modified time.
            cutoff: Only records uploaded before this are checked.

        Returns:
            Number of records reported.
        """
        missing = 0
        attachments = CampaignApplicationFile.objects.filter(
            uploaded_at__lte=cutoff,
        ).only('id', 'storage_key')
        for attachment in attachments.iterator():
            if attachment.storage_key in stored:
                continue
            self.stderr.write(
                f'File {attachment.id} has no stored object: '
                f'{attachment.storage_key}',
            )
            logger.error(
                'File record %s has no stored object: %s',
                attachment.id,
                attachment.storage_key,
            )
            missing += 1
        return missing
