"""Infrastructure layer for campaign applications app.

This package contains integrations with external systems:
- Custom storage backend (S3/MinIO)
- Metadata extraction (MIME type, checksum, storage keys)
- Upload validation against the configured allow-list

Keep infrastructure concerns separate from business logic.
"""
