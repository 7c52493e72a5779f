"""Django admin configuration for campaign applications app."""

from typing import Any

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect
from django.urls import reverse

from server.apps.campaign_applications.exceptions import StorageFailureError
from server.apps.campaign_applications.logic.attachment_operations import (
    purge_file,
)
from server.apps.campaign_applications.models import (
    CampaignApplication,
    CampaignApplicationChange,
    CampaignApplicationFile,
)


def _format_bytes(size_bytes: int) -> str:
    """Format bytes in human-readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < 1024:
        return f'{size_bytes} B'
    if size_bytes < 1024 * 1024:  # noqa: WPS531
        return f'{size_bytes / 1024:.1f} KB'
    return f'{size_bytes / (1024 * 1024):.1f} MB'


class CampaignApplicationFileInline(admin.TabularInline):
    """Read-only list of an application's attachments."""

    model = CampaignApplicationFile
    extra = 0
    can_delete = False
    fields = ['filename', 'mime_type', 'size_display', 'uploaded_at']
    readonly_fields = fields

    def size_display(self, obj: CampaignApplicationFile) -> str:
        """Display file size in human-readable format.

        Args:
            obj: CampaignApplicationFile instance.

        Returns:
            Formatted size string.
        """
        return _format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def has_add_permission(
        self,
        request: HttpRequest,
        obj: CampaignApplication | None = None,
    ) -> bool:
        """Disable adding files via admin.

        Files are only created through the upload endpoint.

        Args:
            request: HTTP request.
            obj: Parent application.

        Returns:
            False - files cannot be added manually.
        """
        return False


class CampaignApplicationChangeInline(admin.TabularInline):
    """Read-only audit trail of an application."""

    model = CampaignApplicationChange
    extra = 0
    can_delete = False
    fields = [
        'created_at',
        'performed_by',
        'previous_status',
        'new_status',
        'changed_fields',
    ]
    readonly_fields = fields

    def has_add_permission(
        self,
        request: HttpRequest,
        obj: CampaignApplication | None = None,
    ) -> bool:
        """Disable adding audit records via admin."""
        return False


@admin.register(CampaignApplication)
class CampaignApplicationAdmin(admin.ModelAdmin):
    """Admin interface for CampaignApplication model."""

    list_display = [
        'campaign_name',
        'organizer_name',
        'status',
        'archived',
        'created_at',
        'last_updated_by',
    ]

    list_filter = [
        'status',
        'archived',
        'category',
        'created_at',
    ]

    search_fields = [
        'campaign_name',
        'organizer_name',
        'organizer_email',
        'beneficiary',
    ]

    inlines = [
        CampaignApplicationFileInline,
        CampaignApplicationChangeInline,
    ]

    def get_queryset(self, request: HttpRequest) -> QuerySet[CampaignApplication]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('organizer__person')

    def has_change_permission(
        self,
        request: HttpRequest,
        obj: CampaignApplication | None = None,
    ) -> bool:
        """Show applications read-only.

        Applications change only through ``update_application``, which
        checks status transitions, bumps ``version`` and writes the
        audit record.

        Args:
            request: HTTP request.
            obj: Optional CampaignApplication instance.

        Returns:
            False - the change form is view-only.
        """
        return False

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Disable adding applications via admin."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: CampaignApplication | None = None,
    ) -> bool:
        """Disable deleting applications via admin.

        Applications are never hard-deleted.

        Args:
            request: HTTP request.
            obj: Optional CampaignApplication instance.

        Returns:
            False - applications cannot be deleted.
        """
        return False


@admin.register(CampaignApplicationFile)
class CampaignApplicationFileAdmin(admin.ModelAdmin):
    """Admin interface for CampaignApplicationFile model.

    Deletion removes the stored object together with the row.
    """

    list_display = [
        'filename',
        'application',
        'mime_type',
        'size_display',
        'uploaded_at',
    ]

    list_filter = ['mime_type', 'uploaded_at']

    search_fields = ['filename', 'storage_key', 'checksum_sha256']

    readonly_fields = [
        'application',
        'uploaded_by',
        'storage_key',
        'filename',
        'mime_type',
        'size_bytes',
        'checksum_sha256',
        'uploaded_at',
    ]

    actions = ['delete_with_content']

    def size_display(self, obj: CampaignApplicationFile) -> str:
        """Display file size in human-readable format.

        Args:
            obj: CampaignApplicationFile instance.

        Returns:
            Formatted size string.
        """
        return _format_bytes(obj.size_bytes)
    size_display.short_description = 'Size'  # type: ignore[attr-defined]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Disable adding files via admin."""
        return False

    def get_actions(self, request: HttpRequest) -> dict:
        """Replace bulk delete, which would skip storage cleanup.

        Args:
            request: HTTP request.

        Returns:
            Available actions.
        """
        actions = super().get_actions(request)
        actions.pop('delete_selected', None)
        return actions

    def delete_model(
        self,
        request: HttpRequest,
        obj: CampaignApplicationFile,
    ) -> None:
        """Delete one file and its stored object.

        Args:
            request: HTTP request.
            obj: File to delete.

        Raises:
            StorageFailureError: If the object delete fails.
        """
        purge_file(obj)

    def delete_view(
        self,
        request: HttpRequest,
        object_id: str,
        extra_context: dict[str, Any] | None = None,
    ) -> HttpResponse:
        """Delete confirmation page that reports storage failures.

        A failed object delete keeps the row and returns to its page.

        Args:
            request: HTTP request.
            object_id: ID of the file.
            extra_context: Extra template context.

        Returns:
            HTTP response.
        """
        try:
            return super().delete_view(request, object_id, extra_context)
        except StorageFailureError:
            self.message_user(
                request,
                'Failed to delete the stored file, the record was kept',
                level=messages.ERROR,
            )
            opts = self.model._meta
            return HttpResponseRedirect(
                reverse(
                    f'admin:{opts.app_label}_{opts.model_name}_change',
                    args=[object_id],
                ),
            )

    @admin.action(description='Delete selected files and their content')
    def delete_with_content(
        self,
        request: HttpRequest,
        queryset: QuerySet[CampaignApplicationFile],
    ) -> None:
        """Delete selected files one by one, each with its object.

        Args:
            request: HTTP request.
            queryset: Selected files.
        """
        deleted = 0
        failed = 0
        for attachment in queryset:
            try:
                purge_file(attachment)
            except StorageFailureError:
                failed += 1
            else:
                deleted += 1

        if deleted:
            self.message_user(request, f'Deleted {deleted} files')
        if failed:
            self.message_user(
                request,
                f'Failed to delete {failed} files, their records were kept',
                level=messages.ERROR,
            )
