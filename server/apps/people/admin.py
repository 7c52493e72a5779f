"""Django admin configuration for people app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.people.models import Organizer, Person


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    """Admin interface for Person model."""

    list_display = [
        'subject',
        'first_name',
        'last_name',
        'email',
        'is_organizer',
        'created_at',
    ]

    search_fields = [
        'subject',
        'first_name',
        'last_name',
        'email',
    ]

    readonly_fields = ['created_at']

    def is_organizer(self, obj: Person) -> bool:
        """Display whether the person organizes campaigns.

        Args:
            obj: Person instance.

        Returns:
            True if an organizer relation exists.
        """
        return obj.has_organizer
    is_organizer.boolean = True  # type: ignore[attr-defined]
    is_organizer.short_description = 'Organizer'  # type: ignore[attr-defined]

    def get_queryset(self, request: HttpRequest) -> QuerySet[Person]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('organizer')


@admin.register(Organizer)
class OrganizerAdmin(admin.ModelAdmin):
    """Admin interface for Organizer model."""

    list_display = ['person', 'created_at']
    search_fields = ['person__subject', 'person__email']
    readonly_fields = ['created_at']
    raw_id_fields = ['person']
