"""Settings for campaign applications and their attachments."""

from typing import Final

from decouple import Csv

from server.settings.components import config

# Upload limits enforced before any byte reaches storage
CAMPAIGN_APPLICATION_MAX_FILES: Final = 10
CAMPAIGN_APPLICATION_MAX_FILE_SIZE: Final = 30 * 1024 * 1024  # 30 MiB

# Multipart parsing stops at the first file over the count limit
DATA_UPLOAD_MAX_NUMBER_FILES: Final = CAMPAIGN_APPLICATION_MAX_FILES

CAMPAIGN_APPLICATION_ALLOWED_MIME_TYPES: Final = (
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'application/pdf',
    'text/plain',
    'text/csv',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'application/vnd.ms-powerpoint',
    'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    'application/vnd.oasis.opendocument.text',
    'application/vnd.oasis.opendocument.spreadsheet',
)

CAMPAIGN_APPLICATION_ALLOWED_EXTENSIONS: Final = (
    'jpg',
    'jpeg',
    'png',
    'gif',
    'webp',
    'pdf',
    'txt',
    'csv',
    'doc',
    'docx',
    'xls',
    'xlsx',
    'ppt',
    'pptx',
    'odt',
    'ods',
)

# Status -> statuses reachable from it
CAMPAIGN_APPLICATION_STATUS_TRANSITIONS: Final = {
    'submitted': ('under_review',),
    'under_review': ('request_info', 'approved', 'rejected'),
    'request_info': ('under_review',),
    'approved': (),
    'rejected': (),
}

CAMPAIGN_APPLICATION_NOTIFY_EMAILS: Final = config(
    'CAMPAIGN_APPLICATION_NOTIFY_EMAILS',
    cast=Csv(),
    default='',
)

# Identity
PEOPLE_CLAIMS_PROVIDER: Final = config(
    'PEOPLE_CLAIMS_PROVIDER',
    default='server.apps.people.logic.identity.claims_from_django_user',
)
PEOPLE_ADMIN_GROUPS: Final = config(
    'PEOPLE_ADMIN_GROUPS',
    cast=Csv(),
    default='team-support,account-manager',
)
