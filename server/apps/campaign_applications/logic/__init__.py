"""Business logic layer for campaign applications app.

This package contains all business logic for applications and their
attachments:
- Role-gated visibility (admin sees everything, organizers their own)
- Application create, list, read and update with audit tagging
- Attachment upload, download and delete

All business logic should be implemented here, separate from
models (data layer), infrastructure (external systems) and views.
"""
