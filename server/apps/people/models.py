"""Database models for people app."""

import uuid
from typing import Final, final, override

from django.db import models

# Constants for field max lengths
_SUBJECT_MAX_LENGTH: Final = 255
_NAME_MAX_LENGTH: Final = 100


@final
class Person(models.Model):
    """Registered person known to the identity provider.

    The ``subject`` is the stable identifier carried in the caller's
    token claims. Records are maintained by the identity subsystem and
    only read by campaign application logic.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    subject = models.CharField(
        max_length=_SUBJECT_MAX_LENGTH,
        unique=True,
        help_text='Subject identifier issued by the identity provider',
    )

    first_name = models.CharField(max_length=_NAME_MAX_LENGTH, blank=True)
    last_name = models.CharField(max_length=_NAME_MAX_LENGTH, blank=True)
    email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Person'  # type: ignore[mutable-override]
        verbose_name_plural = 'People'  # type: ignore[mutable-override]
        ordering = ['last_name', 'first_name']

    @override
    def __str__(self) -> str:
        """String representation."""
        full_name = f'{self.first_name} {self.last_name}'.strip()
        return full_name or self.subject

    @property
    def has_organizer(self) -> bool:
        """Whether the person organizes at least one campaign.

        Returns:
            True if the reverse ``organizer`` relation exists.
        """
        return hasattr(self, 'organizer')


@final
class Organizer(models.Model):
    """Ownership role of a person over campaign applications."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    person = models.OneToOneField(
        Person,
        on_delete=models.CASCADE,
        related_name='organizer',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'Organizer'  # type: ignore[mutable-override]
        verbose_name_plural = 'Organizers'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'organizer:{self.person}'
