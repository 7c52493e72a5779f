"""Django app configuration for campaign applications app."""

from django.apps import AppConfig


class CampaignApplicationsConfig(AppConfig):
    """Configuration for campaign applications app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.campaign_applications'
    verbose_name = 'Campaign Applications'
