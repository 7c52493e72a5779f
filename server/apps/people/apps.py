"""Django app configuration for people app."""

from django.apps import AppConfig


class PeopleConfig(AppConfig):
    """Configuration for people app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.people'
    verbose_name = 'People'
