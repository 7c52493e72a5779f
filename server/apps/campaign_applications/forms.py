"""Forms validating campaign application request bodies."""

from typing import Any, Final

from django import forms

from server.apps.campaign_applications.logic.application_operations import (
    AGREEMENT_FIELDS,
    CONTENT_FIELDS,
    UPDATABLE_FIELDS,
)
from server.apps.campaign_applications.models import CampaignApplication

_VERSION_FIELD: Final = 'version'


class CampaignApplicationCreateForm(forms.ModelForm):
    """Fields a person submits with a new application."""

    class Meta:
        """Form metadata."""

        model = CampaignApplication
        fields = sorted(CONTENT_FIELDS) + list(AGREEMENT_FIELDS)


class CampaignApplicationUpdateForm(forms.Form):
    """Partial update of an application.

    Every field is optional; only keys present in the request body are
    applied. ``version`` enables optimistic concurrency checks.
    """

    version = forms.IntegerField(required=False, min_value=1)

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Build optional fields from the model.

        Args:
            args: Positional form arguments.
            kwargs: Keyword form arguments.
        """
        super().__init__(*args, **kwargs)
        self.fields.update(
            forms.fields_for_model(
                CampaignApplication,
                fields=sorted(UPDATABLE_FIELDS),
            ),
        )
        for field in self.fields.values():
            field.required = False

    def clean(self) -> dict[str, Any]:
        """Reject keys that are not updatable fields.

        Returns:
            Cleaned data.

        Raises:
            ValidationError: If the body names unknown fields.
        """
        cleaned_data = super().clean()
        unknown_fields = sorted(set(self.data) - set(self.fields))
        if unknown_fields:
            raise forms.ValidationError(
                'Unknown fields: %(fields)s',
                code='unknown_fields',
                params={'fields': ', '.join(unknown_fields)},
            )
        return cleaned_data

    def get_changes(self) -> dict[str, Any]:
        """Values of the fields the request actually sent.

        Returns:
            Field name to cleaned value, without ``version``.
        """
        return {
            name: self.cleaned_data[name]
            for name in self.data
            if name in self.fields and name != _VERSION_FIELD
        }

    def get_expected_version(self) -> int | None:
        """Version the client based its change on.

        Returns:
            Version number or None when not sent.
        """
        return self.cleaned_data.get(_VERSION_FIELD)
