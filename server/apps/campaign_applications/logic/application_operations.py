"""Business logic for campaign application operations."""

import logging
import uuid
from collections.abc import Mapping
from typing import Any, Final

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from server.apps.campaign_applications.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
)
from server.apps.campaign_applications.logic.access import visible_applications
from server.apps.campaign_applications.logic.notifications import (
    notify_new_application,
)
from server.apps.campaign_applications.models import (
    CampaignApplication,
    CampaignApplicationChange,
)
from server.apps.people.logic.actors import (
    Actor,
    AdminActor,
    OrganizerActor,
    PersonActor,
)
from server.apps.people.models import Organizer, Person

logger = logging.getLogger(__name__)

AGREEMENT_FIELDS: Final = (
    'accept_terms_and_conditions',
    'transparency_terms_accepted',
    'personal_information_processing_accepted',
)

CONTENT_FIELDS: Final = frozenset((
    'organizer_name',
    'organizer_email',
    'organizer_phone',
    'beneficiary',
    'organizer_beneficiary_relation',
    'campaign_name',
    'goal',
    'history',
    'amount',
    'description',
    'campaign_guarantee',
    'other_finance_sources',
    'other_notes',
    'category',
    'campaign_end',
    'campaign_end_date',
))

# Only administrators may write these
ADMIN_ONLY_FIELDS: Final = frozenset(('status', 'ticket_url', 'archived'))

UPDATABLE_FIELDS: Final = CONTENT_FIELDS | ADMIN_ONLY_FIELDS

_STATUS_FIELD: Final = 'status'


def get_status_transitions() -> Mapping[str, tuple[str, ...]]:
    """Get the status transition table.

    Returns:
        Mapping of status to the statuses reachable from it.
    """
    return getattr(settings, 'CAMPAIGN_APPLICATION_STATUS_TRANSITIONS', {})


def check_transition(current: str, requested: str) -> None:
    """Check that a status change is allowed.

    Keeping the current status is always allowed.

    Args:
        current: Current status.
        requested: Requested status.

    Raises:
        InvalidTransitionError: If ``requested`` is not reachable.
    """
    if requested == current:
        return
    if requested not in get_status_transitions().get(current, ()):
        raise InvalidTransitionError(current, requested)


def create_application(
    data: Mapping[str, Any],
    creator: Person,
) -> CampaignApplication:
    """Create an application owned by the creator's organizer relation.

    A person submitting their first application becomes an organizer.
    Reviewers are notified once the transaction commits.

    Args:
        data: Validated application fields.
        creator: Person submitting the application.

    Returns:
        Created CampaignApplication instance.

    Raises:
        ValidationError: If an agreement is not accepted.
    """
    missing_agreements = [
        field for field in AGREEMENT_FIELDS if not data.get(field)
    ]
    if missing_agreements:
        raise ValidationError(
            'All agreements must be checked',
            code='agreements_required',
            params={'fields': missing_agreements},
        )

    content = {
        field: value
        for field, value in data.items()
        if field in CONTENT_FIELDS
    }

    with transaction.atomic():
        organizer, created = Organizer.objects.get_or_create(person=creator)
        if created:
            logger.info(
                'Created organizer %s for person %s',
                organizer.id,
                creator.id,
            )

        application = CampaignApplication.objects.create(
            organizer=organizer,
            accept_terms_and_conditions=True,
            transparency_terms_accepted=True,
            personal_information_processing_accepted=True,
            **content,
        )
        logger.info(
            'Campaign application created: %s (organizer: %s)',
            application.id,
            organizer.id,
        )
        transaction.on_commit(lambda: notify_new_application(application))

    return application


def list_applications(actor: Actor) -> list[CampaignApplication]:
    """List every application.

    Args:
        actor: Acting role for the request.

    Returns:
        All applications, oldest first.

    Raises:
        ForbiddenError: If the actor is not an administrator.
    """
    if not isinstance(actor, AdminActor):
        logger.warning(
            'Non-admin person %s tried to list applications',
            actor.person.id,
        )
        raise ForbiddenError('Must be admin to get all campaign-applications')

    return list(
        CampaignApplication.objects.select_related('organizer__person')
        .prefetch_related('files')
        .order_by('created_at', 'id'),
    )


def get_application(
    application_id: uuid.UUID,
    actor: Actor,
) -> CampaignApplication:
    """Get one application visible to the actor.

    Args:
        application_id: ID of the application.
        actor: Acting role for the request.

    Returns:
        CampaignApplication with files prefetched.

    Raises:
        NotFoundError: If absent or not owned by a non-admin actor.
    """
    try:
        return (
            visible_applications(actor)
            .select_related('organizer__person')
            .prefetch_related('files')
            .get(pk=application_id)
        )
    except CampaignApplication.DoesNotExist as error:
        raise NotFoundError('Campaign application not found') from error


def update_application(
    application_id: uuid.UUID,
    changes: Mapping[str, Any],
    actor: Actor,
    expected_version: int | None = None,
) -> CampaignApplication:
    """Apply a partial update to an application.

    Administrators may change any updatable field. Organizers may change
    content fields of their own applications. Every successful update
    increments ``version`` and is recorded with who authorized it.

    Args:
        application_id: ID of the application.
        changes: Field values to apply.
        actor: Acting role for the request.
        expected_version: Version the caller based the change on, if any.

    Returns:
        Updated CampaignApplication instance.

    Raises:
        NotFoundError: If the caller has no campaigns, or the application
            is absent or owned by someone else.
        ForbiddenError: If an organizer changes an admin-only field.
        ValidationError: If ``changes`` names unknown fields.
        ConflictError: If ``expected_version`` is stale.
        InvalidTransitionError: If the status change is not allowed.
    """
    match actor:
        case PersonActor(person=person):
            logger.warning('Person %s has no campaigns to update', person.id)
            raise NotFoundError('User has no campaigns')
        case AdminActor() | OrganizerActor():
            pass

    unknown_fields = set(changes) - UPDATABLE_FIELDS
    if unknown_fields:
        raise ValidationError(
            'Unknown fields: %(fields)s',
            code='unknown_fields',
            params={'fields': ', '.join(sorted(unknown_fields))},
        )

    with transaction.atomic():
        try:
            application = (
                visible_applications(actor)
                .select_for_update()
                .get(pk=application_id)
            )
        except CampaignApplication.DoesNotExist as error:
            raise NotFoundError('Campaign application not found') from error

        if isinstance(actor, OrganizerActor):
            restricted = sorted(ADMIN_ONLY_FIELDS.intersection(changes))
            if restricted:
                raise ForbiddenError(
                    f'Only admins may change: {", ".join(restricted)}',
                )

        if (
            expected_version is not None
            and expected_version != application.version
        ):
            raise ConflictError(expected_version, application.version)

        previous_status = application.status
        new_status = changes.get(_STATUS_FIELD, previous_status)
        check_transition(previous_status, new_status)

        changed_fields = sorted(
            field
            for field, value in changes.items()
            if getattr(application, field) != value
        )
        for field in changed_fields:
            setattr(application, field, changes[field])

        application.version += 1
        application.last_updated_by = actor.performed_by
        application.save()

        CampaignApplicationChange.objects.create(
            application=application,
            performed_by=actor.performed_by,
            changed_fields=changed_fields,
            previous_status=previous_status,
            new_status=new_status,
        )

    logger.info(
        'Campaign application %s updated by %s: %s',
        application.id,
        actor.performed_by,
        ', '.join(changed_fields) or 'no changes',
    )
    return application
