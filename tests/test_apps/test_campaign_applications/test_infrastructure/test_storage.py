"""Tests for the S3 storage backend."""

from datetime import datetime

import pytest
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from server.apps.campaign_applications.infrastructure.storage import (
    FileStorage,
    ObjectNotFoundError,
)


def test_open_stream_reads_object(mock_s3, bucket):
    """Test streaming an object's bytes."""
    bucket.put_object(Key='campaign-applications/a/b', Body=b'hello')

    stream = default_storage.open_stream('campaign-applications/a/b')
    try:
        assert stream.read() == b'hello'
    finally:
        stream.close()


def test_open_stream_missing_object(mock_s3):
    """Test missing key raises ObjectNotFoundError."""
    with pytest.raises(ObjectNotFoundError) as exc_info:
        default_storage.open_stream('campaign-applications/a/missing')

    assert exc_info.value.name == 'campaign-applications/a/missing'


def test_delete_missing_object_is_noop(mock_s3):
    """Test deleting an absent key does not raise."""
    default_storage.delete('campaign-applications/a/missing')


def test_rollback_upload_removes_object(mock_s3):
    """Test rollback deletes a saved object."""
    name = default_storage.save(
        'campaign-applications/a/rollback',
        ContentFile(b'data'),
    )

    default_storage.rollback_upload(name)

    assert not default_storage.exists(name)


def test_rollback_upload_swallows_errors(mock_s3, monkeypatch):
    """Test rollback failures are logged, not raised."""
    def failing_delete(self, name):
        raise OSError('connection reset')

    monkeypatch.setattr(FileStorage, 'delete', failing_delete)

    default_storage.rollback_upload('campaign-applications/a/orphan')


def test_iter_objects_filters_by_prefix(mock_s3, bucket):
    """Test listing only returns keys under the prefix."""
    bucket.put_object(Key='campaign-applications/a/one', Body=b'1')
    bucket.put_object(Key='campaign-applications/b/two', Body=b'2')
    bucket.put_object(Key='elsewhere/three', Body=b'3')

    objects = dict(default_storage.iter_objects('campaign-applications/'))

    assert set(objects) == {
        'campaign-applications/a/one',
        'campaign-applications/b/two',
    }
    assert all(isinstance(value, datetime) for value in objects.values())
