"""Shared fixtures for campaign applications app tests."""

import boto3
import pytest
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

from server.apps.campaign_applications.models import (
    ApplicationStatus,
    CampaignApplication,
)
from server.apps.people.logic.actors import (
    AdminActor,
    OrganizerActor,
    PersonActor,
)
from server.apps.people.models import Organizer, Person


@pytest.fixture
def mock_s3():
    """Mock S3 service with the attachments bucket.

    Yields:
        boto3 S3 resource with the configured bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket=default_storage.bucket_name)
        yield conn


@pytest.fixture
def bucket(mock_s3):
    """Bucket holding attachment objects.

    Returns:
        boto3 Bucket resource.
    """
    return mock_s3.Bucket(default_storage.bucket_name)


@pytest.fixture
def organizer_person(db):
    """Create a person who organizes campaigns.

    Returns:
        Person instance.
    """
    return Person.objects.create(
        subject='organizer-subject',
        first_name='Ivan',
        last_name='Petrov',
        email='ivan@example.com',
    )


@pytest.fixture
def organizer(organizer_person):
    """Create organizer relation for organizer_person.

    Returns:
        Organizer instance.
    """
    return Organizer.objects.create(person=organizer_person)


@pytest.fixture
def other_organizer(db):
    """Create an organizer who owns nothing of interest.

    Returns:
        Organizer instance.
    """
    person = Person.objects.create(subject='other-organizer-subject')
    return Organizer.objects.create(person=person)


@pytest.fixture
def plain_person(db):
    """Create a person without an organizer relation.

    Returns:
        Person instance.
    """
    return Person.objects.create(subject='plain-subject')


@pytest.fixture
def admin_person(db):
    """Create a person who acts as administrator.

    Returns:
        Person instance.
    """
    return Person.objects.create(subject='admin-subject')


@pytest.fixture
def admin_actor(admin_person):
    """Actor for admin_person."""
    return AdminActor(person=admin_person)


@pytest.fixture
def organizer_actor(organizer_person, organizer):
    """Actor for the owning organizer."""
    return OrganizerActor(person=organizer_person, organizer_id=organizer.id)


@pytest.fixture
def other_organizer_actor(other_organizer):
    """Actor for an organizer who does not own the application."""
    return OrganizerActor(
        person=other_organizer.person,
        organizer_id=other_organizer.id,
    )


@pytest.fixture
def person_actor(plain_person):
    """Actor for a person without campaigns."""
    return PersonActor(person=plain_person)


@pytest.fixture
def application_data():
    """Valid fields for a new application.

    Returns:
        Dictionary of application fields.
    """
    return {
        'organizer_name': 'Ivan Petrov',
        'organizer_email': 'ivan@example.com',
        'beneficiary': 'Maria Petrova',
        'campaign_name': 'Surgery for Maria',
        'goal': 'Cover the cost of surgery',
        'amount': '10000',
        'category': 'medical',
        'campaign_end': 'funds',
        'accept_terms_and_conditions': True,
        'transparency_terms_accepted': True,
        'personal_information_processing_accepted': True,
    }


@pytest.fixture
def application(organizer):
    """Create a submitted application owned by organizer.

    Returns:
        CampaignApplication instance.
    """
    return CampaignApplication.objects.create(
        organizer=organizer,
        organizer_name='Ivan Petrov',
        beneficiary='Maria Petrova',
        campaign_name='Surgery for Maria',
        goal='Cover the cost of surgery',
        amount='10000',
        accept_terms_and_conditions=True,
        transparency_terms_accepted=True,
        personal_information_processing_accepted=True,
    )


@pytest.fixture
def reviewed_application(application):
    """Application already under review.

    Returns:
        CampaignApplication instance.
    """
    application.status = ApplicationStatus.UNDER_REVIEW
    application.save(update_fields=['status'])
    return application


@pytest.fixture
def png_upload():
    """Small PNG upload.

    Returns:
        SimpleUploadedFile with image content.
    """
    return SimpleUploadedFile(
        'photo.png',
        b'\x89PNG\r\n\x1a\nfake image bytes',
        content_type='image/png',
    )


@pytest.fixture
def pdf_upload():
    """Small PDF upload.

    Returns:
        SimpleUploadedFile with document content.
    """
    return SimpleUploadedFile(
        'report.pdf',
        b'%PDF-1.4 fake report',
        content_type='application/pdf',
    )


@pytest.fixture
def login_as(client, django_user_model):
    """Log the test client in as a person.

    Returns:
        Function taking a Person and an ``is_admin`` flag.
    """
    def _login(person, *, is_admin=False):
        user = django_user_model.objects.create_user(
            username=person.subject,
            password='testpass123',
            is_staff=is_admin,
        )
        client.force_login(user)
        return client

    return _login
