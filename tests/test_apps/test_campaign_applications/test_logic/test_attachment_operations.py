"""Tests for attachment business logic."""

import uuid

import pytest
from botocore.exceptions import ClientError
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError

from server.apps.campaign_applications.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    NotFoundError,
    StorageFailureError,
    TooManyFilesError,
)
from server.apps.campaign_applications.infrastructure.storage import (
    FileStorage,
)
from server.apps.campaign_applications.logic.attachment_operations import (
    IMAGE_CACHE_CONTROL,
    NO_CACHE_CONTROL,
    cache_control_for,
    content_disposition_for,
    delete_file,
    fetch_file,
    purge_file,
    upload_files,
)
from server.apps.campaign_applications.models import CampaignApplicationFile


def _client_error(operation):
    return ClientError(
        {'Error': {'Code': 'InternalError', 'Message': 'S3 unavailable'}},
        operation,
    )


def _stored_keys(bucket):
    return sorted(summary.key for summary in bucket.objects.all())


@pytest.fixture
def stored_file(application, organizer_person, mock_s3, png_upload):
    """Upload one image to the application.

    Returns:
        CampaignApplicationFile instance.
    """
    return upload_files(application.id, [png_upload], organizer_person)[0]


@pytest.mark.django_db
class TestUploadFiles:
    """Tests for upload_files."""

    def test_upload_batch(
        self,
        application,
        organizer_person,
        mock_s3,
        bucket,
        png_upload,
        pdf_upload,
    ):
        """Test every file gets an object and a row."""
        attachments = upload_files(
            application.id,
            [png_upload, pdf_upload],
            organizer_person,
        )

        assert [item.filename for item in attachments] == [
            'photo.png',
            'report.pdf',
        ]
        assert attachments[0].mime_type == 'image/png'
        assert attachments[1].mime_type == 'application/pdf'
        assert attachments[0].uploaded_by == organizer_person
        assert all(len(item.checksum_sha256) == 64 for item in attachments)
        assert _stored_keys(bucket) == sorted(
            item.storage_key for item in attachments
        )
        for attachment in attachments:
            assert attachment.storage_key.startswith(
                f'campaign-applications/{application.id}/',
            )
            assert str(attachment.id) not in attachment.storage_key

    def test_upload_then_fetch_returns_same_bytes(
        self,
        application,
        organizer_person,
        organizer_actor,
        mock_s3,
    ):
        """Test uploaded bytes are served back unchanged."""
        content = b'%PDF-1.4 quarterly report'
        upload = SimpleUploadedFile(
            'report.pdf',
            content,
            content_type='application/pdf',
        )
        attachment = upload_files(application.id, [upload], organizer_person)[0]

        with fetch_file(attachment.id, organizer_actor) as handle:
            assert handle.stream.read() == content
            assert handle.mime_type == 'application/pdf'
            assert handle.size_bytes == len(content)

    def test_no_files(self, application, organizer_person):
        """Test empty upload is rejected."""
        with pytest.raises(ValidationError):
            upload_files(application.id, [], organizer_person)

    def test_too_many_files(
        self,
        application,
        organizer_person,
        settings,
        png_upload,
        pdf_upload,
    ):
        """Test the per-request file limit."""
        settings.CAMPAIGN_APPLICATION_MAX_FILES = 1

        with pytest.raises(TooManyFilesError) as exc_info:
            upload_files(application.id, [png_upload, pdf_upload], organizer_person)

        assert exc_info.value.limit == 1
        assert CampaignApplicationFile.objects.count() == 0

    def test_missing_application(self, organizer_person, mock_s3, png_upload):
        """Test uploads to unknown applications are rejected."""
        with pytest.raises(NotFoundError):
            upload_files(uuid.uuid4(), [png_upload], organizer_person)

    def test_invalid_type_rejects_whole_batch(
        self,
        application,
        organizer_person,
        mock_s3,
        bucket,
        png_upload,
    ):
        """Test one bad file stops the batch before any write."""
        script = SimpleUploadedFile(
            'script.sh',
            b'#!/bin/sh',
            content_type='application/x-sh',
        )

        with pytest.raises(InvalidFileTypeError):
            upload_files(application.id, [png_upload, script], organizer_person)

        assert CampaignApplicationFile.objects.count() == 0
        assert _stored_keys(bucket) == []

    def test_too_large_rejects_whole_batch(
        self,
        application,
        organizer_person,
        mock_s3,
        bucket,
        settings,
        png_upload,
    ):
        """Test an oversized file stops the batch before any write."""
        settings.CAMPAIGN_APPLICATION_MAX_FILE_SIZE = 30
        big = SimpleUploadedFile(
            'big.pdf',
            b'x' * 31,
            content_type='application/pdf',
        )

        with pytest.raises(FileTooLargeError):
            upload_files(application.id, [png_upload, big], organizer_person)

        assert _stored_keys(bucket) == []

    def test_storage_failure_rolls_back_batch(
        self,
        application,
        organizer_person,
        mock_s3,
        bucket,
        monkeypatch,
        png_upload,
        pdf_upload,
    ):
        """Test a failed write removes objects already written."""
        original_save = FileStorage.save
        calls = []

        def flaky_save(self, name, content, max_length=None):
            calls.append(name)
            if len(calls) == 2:
                raise _client_error('PutObject')
            return original_save(self, name, content, max_length)

        monkeypatch.setattr(FileStorage, 'save', flaky_save)

        with pytest.raises(StorageFailureError):
            upload_files(application.id, [png_upload, pdf_upload], organizer_person)

        assert CampaignApplicationFile.objects.count() == 0
        assert _stored_keys(bucket) == []

    def test_cancelled_upload_rolls_back_batch(
        self,
        application,
        organizer_person,
        mock_s3,
        bucket,
        monkeypatch,
        png_upload,
        pdf_upload,
    ):
        """Test an interrupted batch leaves no objects behind."""
        original_save = FileStorage.save
        calls = []

        def interrupted_save(self, name, content, max_length=None):
            calls.append(name)
            if len(calls) == 2:
                raise KeyboardInterrupt
            return original_save(self, name, content, max_length)

        monkeypatch.setattr(FileStorage, 'save', interrupted_save)

        with pytest.raises(KeyboardInterrupt):
            upload_files(application.id, [png_upload, pdf_upload], organizer_person)

        assert _stored_keys(bucket) == []

    def test_database_failure_rolls_back_objects(
        self,
        application,
        organizer_person,
        mock_s3,
        bucket,
        monkeypatch,
        png_upload,
    ):
        """Test a failed metadata write removes the stored objects."""
        def failing_create(**kwargs):
            raise DatabaseError('disk full')

        monkeypatch.setattr(
            CampaignApplicationFile.objects,
            'create',
            failing_create,
        )

        with pytest.raises(StorageFailureError):
            upload_files(application.id, [png_upload], organizer_person)

        assert _stored_keys(bucket) == []


@pytest.mark.django_db
class TestFetchFile:
    """Tests for fetch_file."""

    def test_owner_fetches_image(self, stored_file, organizer_actor):
        """Test image download metadata."""
        with fetch_file(stored_file.id, organizer_actor) as handle:
            assert handle.mime_type == 'image/png'
            assert handle.cache_control == IMAGE_CACHE_CONTROL
            assert handle.content_disposition == (
                'attachment; filename="photo.png"'
            )

    def test_admin_fetches_any_file(self, stored_file, admin_actor):
        """Test admins can download every file."""
        with fetch_file(stored_file.id, admin_actor) as handle:
            assert handle.filename == 'photo.png'

    def test_other_organizer_gets_not_found(
        self,
        stored_file,
        other_organizer_actor,
    ):
        """Test foreign files look absent."""
        with pytest.raises(NotFoundError):
            fetch_file(stored_file.id, other_organizer_actor)

    def test_person_gets_not_found(self, stored_file, person_actor):
        """Test persons without campaigns see no files."""
        with pytest.raises(NotFoundError):
            fetch_file(stored_file.id, person_actor)

    def test_missing_file(self, admin_actor, mock_s3):
        """Test unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            fetch_file(uuid.uuid4(), admin_actor)

    def test_missing_object(self, stored_file, admin_actor, bucket):
        """Test metadata without an object is a storage failure."""
        bucket.Object(stored_file.storage_key).delete()

        with pytest.raises(StorageFailureError, match='File content is missing'):
            fetch_file(stored_file.id, admin_actor)


@pytest.mark.django_db
class TestDeleteFile:
    """Tests for delete_file."""

    def test_owner_deletes_file(self, stored_file, organizer_actor, bucket):
        """Test row and object are both removed."""
        delete_file(stored_file.id, organizer_actor)

        assert not CampaignApplicationFile.objects.filter(
            id=stored_file.id,
        ).exists()
        assert _stored_keys(bucket) == []

    def test_second_delete_not_found(self, stored_file, admin_actor):
        """Test deleting twice reports the file as absent."""
        delete_file(stored_file.id, admin_actor)

        with pytest.raises(NotFoundError):
            delete_file(stored_file.id, admin_actor)

    def test_other_organizer_gets_not_found(
        self,
        stored_file,
        other_organizer_actor,
        bucket,
    ):
        """Test foreign files cannot be deleted."""
        with pytest.raises(NotFoundError):
            delete_file(stored_file.id, other_organizer_actor)

        assert CampaignApplicationFile.objects.filter(id=stored_file.id).exists()
        assert _stored_keys(bucket) == [stored_file.storage_key]

    def test_storage_failure_keeps_row(
        self,
        stored_file,
        organizer_actor,
        bucket,
        monkeypatch,
    ):
        """Test the row survives when the object cannot be deleted."""
        def failing_delete(self, name):
            raise _client_error('DeleteObject')

        monkeypatch.setattr(FileStorage, 'delete', failing_delete)

        with pytest.raises(StorageFailureError):
            delete_file(stored_file.id, organizer_actor)

        assert CampaignApplicationFile.objects.filter(id=stored_file.id).exists()
        assert _stored_keys(bucket) == [stored_file.storage_key]

    def test_purge_file(self, stored_file, bucket):
        """Test admin purge removes row and object."""
        purge_file(stored_file)

        assert CampaignApplicationFile.objects.count() == 0
        assert _stored_keys(bucket) == []


@pytest.mark.parametrize(
    ('mime_type', 'expected'),
    [
        ('image/png', IMAGE_CACHE_CONTROL),
        ('image/jpeg', IMAGE_CACHE_CONTROL),
        ('application/pdf', NO_CACHE_CONTROL),
        ('text/plain', NO_CACHE_CONTROL),
        ('', NO_CACHE_CONTROL),
    ],
)
def test_cache_control_for(mime_type, expected):
    """Test images are cached and everything else is not."""
    assert cache_control_for(mime_type) == expected


def test_content_disposition_escapes_quotes():
    """Test quotes and backslashes in names are escaped."""
    assert content_disposition_for('my "best" \\ report.pdf') == (
        'attachment; filename="my \\"best\\" \\\\ report.pdf"'
    )


def test_content_disposition_non_ascii():
    """Test non-ASCII names use the extended parameter."""
    assert content_disposition_for('отчёт.pdf').startswith(
        "attachment; filename*=utf-8''",
    )
