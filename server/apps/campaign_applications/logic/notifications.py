"""Email notifications about campaign applications."""

import logging

from django.conf import settings
from django.core.mail import send_mail

from server.apps.campaign_applications.models import CampaignApplication

logger = logging.getLogger(__name__)


def get_notify_emails() -> list[str]:
    """Get addresses notified about new applications.

    Returns:
        Addresses from settings, empty if notifications are off.
    """
    return [
        address
        for address in getattr(settings, 'CAMPAIGN_APPLICATION_NOTIFY_EMAILS', ())
        if address
    ]


def notify_new_application(application: CampaignApplication) -> None:
    """Tell reviewers that an application was submitted.

    Delivery problems are logged and never reach the submitter.

    Args:
        application: Newly created application.
    """
    recipients = get_notify_emails()
    if not recipients:
        logger.debug('No recipients configured, skipping notification')
        return

    try:
        send_mail(
            subject=f'New campaign application: {application.campaign_name}',
            message=(
                f'Organizer {application.organizer_name} submitted '
                f'"{application.campaign_name}" (ID: {application.id}).'
            ),
            from_email=None,
            recipient_list=recipients,
        )
    except Exception:
        logger.exception(
            'Failed to send notification for application %s',
            application.id,
        )
    else:
        logger.info(
            'Sent notification for application %s to %d recipients',
            application.id,
            len(recipients),
        )
