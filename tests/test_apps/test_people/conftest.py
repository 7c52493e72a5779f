"""Shared fixtures for people app tests."""

import pytest
from django.contrib.auth.models import AnonymousUser

from server.apps.people.models import Organizer, Person


@pytest.fixture
def person(db):
    """Create a person.

    Returns:
        Person instance.
    """
    return Person.objects.create(
        subject='subject-1',
        first_name='Maria',
        last_name='Ivanova',
    )


@pytest.fixture
def organizer(person):
    """Make person an organizer.

    Returns:
        Organizer instance.
    """
    return Organizer.objects.create(person=person)


@pytest.fixture
def request_as(rf):
    """Build a GET request carrying a user.

    Returns:
        Function taking a user (or None for anonymous).
    """
    def _request(user=None):
        request = rf.get('/')
        request.user = user or AnonymousUser()
        return request

    return _request
