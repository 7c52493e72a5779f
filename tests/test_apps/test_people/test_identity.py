"""Tests for identity resolution."""

import pytest
from django.contrib.auth.models import Group

from server.apps.people.exceptions import (
    PersonNotFoundError,
    UnauthenticatedError,
)
from server.apps.people.logic.actors import (
    ADMIN_PERFORMER,
    AdminActor,
    OrganizerActor,
    PersonActor,
)
from server.apps.people.logic.identity import (
    Claims,
    actor_for,
    actor_from_request,
    claims_from_django_user,
    get_claims,
    resolve_actor,
    resolve_person,
)


def test_anonymous_has_no_claims(request_as):
    """Test anonymous requests carry no identity."""
    assert claims_from_django_user(request_as()) is None


def test_get_claims_anonymous_raises(request_as):
    """Test missing identity raises UnauthenticatedError."""
    with pytest.raises(UnauthenticatedError):
        get_claims(request_as())


@pytest.mark.django_db
class TestClaimsFromDjangoUser:
    """Tests for claims built from request.user."""

    def test_regular_user(self, request_as, django_user_model):
        """Test plain users are not admins."""
        user = django_user_model.objects.create_user(username='subject-1')

        claims = claims_from_django_user(request_as(user))

        assert claims == Claims(subject='subject-1', is_admin=False)

    def test_staff_user(self, request_as, django_user_model):
        """Test staff users are admins."""
        user = django_user_model.objects.create_user(
            username='subject-1',
            is_staff=True,
        )

        assert claims_from_django_user(request_as(user)).is_admin is True

    def test_admin_group_member(self, request_as, django_user_model, settings):
        """Test members of configured groups are admins."""
        settings.PEOPLE_ADMIN_GROUPS = ['account-manager']
        user = django_user_model.objects.create_user(username='subject-1')
        user.groups.add(Group.objects.create(name='account-manager'))

        assert claims_from_django_user(request_as(user)).is_admin is True

    def test_other_group_member(self, request_as, django_user_model, settings):
        """Test other groups grant nothing."""
        settings.PEOPLE_ADMIN_GROUPS = ['account-manager']
        user = django_user_model.objects.create_user(username='subject-1')
        user.groups.add(Group.objects.create(name='volunteers'))

        assert claims_from_django_user(request_as(user)).is_admin is False


@pytest.mark.django_db
class TestResolvePerson:
    """Tests for resolve_person and resolve_actor."""

    def test_resolves_by_subject(self, person):
        """Test lookup by subject."""
        assert resolve_person(Claims(subject='subject-1')) == person

    def test_unknown_subject(self, db):
        """Test unknown subjects raise PersonNotFoundError."""
        with pytest.raises(PersonNotFoundError) as exc_info:
            resolve_person(Claims(subject='nobody'))

        assert exc_info.value.subject == 'nobody'
        assert str(exc_info.value) == 'No person found in database'

    def test_admin_claim_wins(self, person, organizer):
        """Test admins act as admins even when they organize."""
        actor = resolve_actor(Claims(subject='subject-1', is_admin=True))

        assert isinstance(actor, AdminActor)
        assert actor.performed_by == ADMIN_PERFORMER

    def test_organizer(self, person, organizer):
        """Test persons with an organizer relation act as organizers."""
        actor = resolve_actor(Claims(subject='subject-1'))

        assert actor == OrganizerActor(person=person, organizer_id=organizer.id)
        assert actor.performed_by == str(organizer.id)

    def test_plain_person(self, person):
        """Test persons without a relation act as plain persons."""
        assert actor_for(person, is_admin=False) == PersonActor(person=person)

    def test_actor_from_request(self, request_as, django_user_model, person):
        """Test full resolution from an HTTP request."""
        user = django_user_model.objects.create_user(username='subject-1')

        actor = actor_from_request(request_as(user))

        assert actor == PersonActor(person=person)

    def test_actor_from_request_unknown_person(
        self,
        request_as,
        django_user_model,
    ):
        """Test authenticated users without a person record."""
        user = django_user_model.objects.create_user(username='stranger')

        with pytest.raises(PersonNotFoundError):
            actor_from_request(request_as(user))

