"""JSON representations of campaign applications and attachments."""

from typing import Any

from server.apps.campaign_applications.logic.application_operations import (
    AGREEMENT_FIELDS,
    CONTENT_FIELDS,
)
from server.apps.campaign_applications.models import (
    CampaignApplication,
    CampaignApplicationFile,
)


def serialize_file(attachment: CampaignApplicationFile) -> dict[str, Any]:
    """Represent an attachment without its storage key.

    Args:
        attachment: CampaignApplicationFile instance.

    Returns:
        JSON-serializable dictionary.
    """
    return {
        'id': attachment.id,
        'application_id': attachment.application_id,
        'filename': attachment.filename,
        'mime_type': attachment.mime_type,
        'size_bytes': attachment.size_bytes,
        'uploaded_by_id': attachment.uploaded_by_id,
        'uploaded_at': attachment.uploaded_at,
    }


def serialize_application(
    application: CampaignApplication,
) -> dict[str, Any]:
    """Represent an application with its attachments.

    Args:
        application: CampaignApplication instance, ideally with
            ``files`` prefetched.

    Returns:
        JSON-serializable dictionary.
    """
    data: dict[str, Any] = {
        'id': application.id,
        'organizer_id': application.organizer_id,
        'status': application.status,
        'ticket_url': application.ticket_url,
        'archived': application.archived,
        'version': application.version,
        'last_updated_by': application.last_updated_by,
        'created_at': application.created_at,
        'updated_at': application.updated_at,
    }
    for field in sorted(CONTENT_FIELDS) + list(AGREEMENT_FIELDS):
        data[field] = getattr(application, field)
    data['files'] = [
        serialize_file(attachment) for attachment in application.files.all()
    ]
    return data
