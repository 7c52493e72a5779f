"""Resolution of request identity to people and actors.

Token verification happens upstream (an authentication backend or an
identity-aware proxy). This module only consumes the resulting claim set:
a subject identifier and an admin flag.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from django.conf import settings
from django.http import HttpRequest
from django.utils.module_loading import import_string

from server.apps.people.exceptions import (
    PersonNotFoundError,
    UnauthenticatedError,
)
from server.apps.people.logic.actors import (
    Actor,
    AdminActor,
    OrganizerActor,
    PersonActor,
)
from server.apps.people.models import Person

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Claims:
    """Verified facts about the caller."""

    subject: str
    is_admin: bool = False


ClaimsProvider = Callable[[HttpRequest], Claims | None]


def get_admin_groups() -> tuple[str, ...]:
    """Get names of groups whose members act as administrators.

    Returns:
        Group names from settings or an empty tuple.
    """
    return tuple(getattr(settings, 'PEOPLE_ADMIN_GROUPS', ()))


def claims_from_django_user(request: HttpRequest) -> Claims | None:
    """Build claims from the Django-authenticated user.

    Works with any authentication backend that populates
    ``request.user`` (sessions, OIDC, remote user).

    Args:
        request: Incoming HTTP request.

    Returns:
        Claims for an authenticated user, None for anonymous requests.
    """
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return None

    is_admin = user.is_staff or user.groups.filter(
        name__in=get_admin_groups(),
    ).exists()
    return Claims(subject=user.get_username(), is_admin=is_admin)


def get_claims_provider() -> ClaimsProvider:
    """Load the configured claims provider.

    Returns:
        Callable named by ``PEOPLE_CLAIMS_PROVIDER``.
    """
    dotted_path = getattr(
        settings,
        'PEOPLE_CLAIMS_PROVIDER',
        'server.apps.people.logic.identity.claims_from_django_user',
    )
    return import_string(dotted_path)


def get_claims(request: HttpRequest) -> Claims:
    """Get verified claims for the request.

    Args:
        request: Incoming HTTP request.

    Returns:
        Claims of the caller.

    Raises:
        UnauthenticatedError: If the request carries no identity.
    """
    claims = get_claims_provider()(request)
    if claims is None:
        raise UnauthenticatedError('Authentication required')
    return claims


def resolve_person(claims: Claims) -> Person:
    """Look up the stored person for the caller.

    Args:
        claims: Verified caller claims.

    Returns:
        Person with the claimed subject, organizer relation preloaded.

    Raises:
        PersonNotFoundError: If no person has this subject.
    """
    try:
        return Person.objects.select_related('organizer').get(
            subject=claims.subject,
        )
    except Person.DoesNotExist as error:
        logger.error('No person found in database for subject %s', claims.subject)
        raise PersonNotFoundError(claims.subject) from error


def actor_for(person: Person, *, is_admin: bool) -> Actor:
    """Decide the role a person acts in.

    Args:
        person: Resolved person.
        is_admin: Admin flag from the caller's claims.

    Returns:
        AdminActor, OrganizerActor or PersonActor.
    """
    if is_admin:
        return AdminActor(person=person)
    if person.has_organizer:
        return OrganizerActor(
            person=person,
            organizer_id=person.organizer.id,
        )
    return PersonActor(person=person)


def resolve_actor(claims: Claims) -> Actor:
    """Resolve claims to the acting role.

    Args:
        claims: Verified caller claims.

    Returns:
        Actor for the request.

    Raises:
        PersonNotFoundError: If no person has the claimed subject.
    """
    person = resolve_person(claims)
    actor = actor_for(person, is_admin=claims.is_admin)
    logger.debug('Resolved %s as %s', claims.subject, type(actor).__name__)
    return actor


def actor_from_request(request: HttpRequest) -> Actor:
    """Resolve the acting role for an HTTP request.

    Args:
        request: Incoming HTTP request.

    Returns:
        Actor for the request.

    Raises:
        UnauthenticatedError: If the request carries no identity.
        PersonNotFoundError: If the identity maps to no stored person.
    """
    return resolve_actor(get_claims(request))
