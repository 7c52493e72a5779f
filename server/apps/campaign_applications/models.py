"""Database models for campaign applications app."""

import uuid
from typing import Final, final, override

from django.db import models

from server.apps.people.models import Organizer, Person

# Constants for field max lengths
_SHORT_TEXT_MAX_LENGTH: Final = 200
_PHONE_MAX_LENGTH: Final = 50
_STATUS_MAX_LENGTH: Final = 20
_PERFORMER_MAX_LENGTH: Final = 64
_FILENAME_MAX_LENGTH: Final = 255
_MIME_TYPE_MAX_LENGTH: Final = 255
_STORAGE_KEY_MAX_LENGTH: Final = 512
_CHECKSUM_MAX_LENGTH: Final = 64  # SHA256 hex length


class ApplicationStatus(models.TextChoices):
    """Review status of a campaign application."""

    SUBMITTED = 'submitted', 'Submitted'
    UNDER_REVIEW = 'under_review', 'Under review'
    REQUEST_INFO = 'request_info', 'Information requested'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class CampaignCategory(models.TextChoices):
    """Kind of cause the campaign raises money for."""

    MEDICAL = 'medical', 'Medical'
    CHARITY = 'charity', 'Charity'
    DISASTERS = 'disasters', 'Disasters'
    EDUCATION = 'education', 'Education'
    ANIMALS = 'animals', 'Animals'
    NATURE = 'nature', 'Nature'
    SPORT = 'sport', 'Sport'
    ART = 'art', 'Art'
    OTHERS = 'others', 'Others'


class CampaignEnd(models.TextChoices):
    """How the campaign is scheduled to finish."""

    FUNDS = 'funds', 'When the goal is reached'
    DATE = 'date', 'On a date'
    NEVER = 'never', 'Never'


@final
class CampaignApplication(models.Model):
    """Application for a new fundraising campaign.

    Owned by an organizer. Content fields are free-form and reviewed by
    administrators; ``status``, ``ticket_url`` and ``archived`` are
    written by administrators only.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Owner relationship
    organizer = models.ForeignKey(
        Organizer,
        on_delete=models.PROTECT,
        related_name='campaign_applications',
        db_index=True,
    )

    # Organizer and beneficiary
    organizer_name = models.CharField(max_length=_SHORT_TEXT_MAX_LENGTH)
    organizer_email = models.EmailField(blank=True)
    organizer_phone = models.CharField(
        max_length=_PHONE_MAX_LENGTH,
        blank=True,
    )
    beneficiary = models.CharField(max_length=_SHORT_TEXT_MAX_LENGTH)
    organizer_beneficiary_relation = models.CharField(
        max_length=_SHORT_TEXT_MAX_LENGTH,
        blank=True,
    )

    # Campaign content
    campaign_name = models.CharField(max_length=_SHORT_TEXT_MAX_LENGTH)
    goal = models.TextField()
    history = models.TextField(blank=True)
    amount = models.CharField(max_length=_SHORT_TEXT_MAX_LENGTH)
    description = models.TextField(blank=True)
    campaign_guarantee = models.TextField(blank=True)
    other_finance_sources = models.TextField(blank=True)
    other_notes = models.TextField(blank=True)
    category = models.CharField(
        max_length=_STATUS_MAX_LENGTH,
        choices=CampaignCategory.choices,
        default=CampaignCategory.OTHERS,
    )
    campaign_end = models.CharField(
        max_length=_STATUS_MAX_LENGTH,
        choices=CampaignEnd.choices,
        default=CampaignEnd.FUNDS,
    )
    campaign_end_date = models.DateField(null=True, blank=True)

    # Agreements, all required at submission
    accept_terms_and_conditions = models.BooleanField(default=False)
    transparency_terms_accepted = models.BooleanField(default=False)
    personal_information_processing_accepted = models.BooleanField(
        default=False,
    )

    # Review (admin only)
    status = models.CharField(
        max_length=_STATUS_MAX_LENGTH,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.SUBMITTED,
        db_index=True,
    )
    ticket_url = models.URLField(blank=True)
    archived = models.BooleanField(default=False)

    # Optimistic concurrency and audit
    version = models.PositiveIntegerField(
        default=1,
        help_text='Incremented on every update',
    )
    last_updated_by = models.CharField(
        max_length=_PERFORMER_MAX_LENGTH,
        blank=True,
        help_text="'ADMIN' or the id of the organizer who made the change",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Campaign Application'  # type: ignore[mutable-override]
        verbose_name_plural = 'Campaign Applications'  # type: ignore[mutable-override]
        ordering = ['created_at', 'id']

        indexes = [
            models.Index(
                fields=['organizer', 'created_at'],
                name='applications_organizer_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.campaign_name} ({self.status})'


@final
class CampaignApplicationFile(models.Model):
    """File attached to a campaign application.

    Bytes live in the default storage under ``storage_key``; the public
    ``id`` is never used as a storage key. The owning application is set
    at creation and never changes.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    application = models.ForeignKey(
        CampaignApplication,
        on_delete=models.PROTECT,
        related_name='files',
        db_index=True,
    )

    uploaded_by = models.ForeignKey(
        Person,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='campaign_application_files',
    )

    storage_key = models.CharField(
        max_length=_STORAGE_KEY_MAX_LENGTH,
        unique=True,
        help_text='Object key in storage: campaign-applications/{app}/{uuid}',
    )

    filename = models.CharField(
        max_length=_FILENAME_MAX_LENGTH,
        help_text='Original filename as uploaded',
    )

    mime_type = models.CharField(
        max_length=_MIME_TYPE_MAX_LENGTH,
        help_text='MIME type declared by the uploader',
    )

    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    checksum_sha256 = models.CharField(
        max_length=_CHECKSUM_MAX_LENGTH,
        help_text='SHA256 hash for integrity verification',
    )

    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Campaign Application File'  # type: ignore[mutable-override]
        verbose_name_plural = 'Campaign Application Files'  # type: ignore[mutable-override]
        # Insertion order for display
        ordering = ['uploaded_at', 'id']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.application_id}:{self.filename}'


@final
class CampaignApplicationChange(models.Model):
    """Audit record of an update to a campaign application."""

    application = models.ForeignKey(
        CampaignApplication,
        on_delete=models.CASCADE,
        related_name='changes',
    )

    performed_by = models.CharField(
        max_length=_PERFORMER_MAX_LENGTH,
        help_text="'ADMIN' or the id of the organizer who made the change",
    )

    changed_fields = models.JSONField(default=list)

    previous_status = models.CharField(max_length=_STATUS_MAX_LENGTH)
    new_status = models.CharField(max_length=_STATUS_MAX_LENGTH)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Campaign Application Change'  # type: ignore[mutable-override]
        verbose_name_plural = 'Campaign Application Changes'  # type: ignore[mutable-override]
        ordering = ['created_at', 'id']

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.application_id} by {self.performed_by}'
