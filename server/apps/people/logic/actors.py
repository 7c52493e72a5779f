"""Authorization actors resolved once per request."""

import uuid
from dataclasses import dataclass
from typing import Final

from server.apps.people.models import Person

# Audit tag for changes authorized by an administrator
ADMIN_PERFORMER: Final = 'ADMIN'


@dataclass(frozen=True, slots=True)
class AdminActor:
    """Caller acting with administrator rights."""

    person: Person

    @property
    def performed_by(self) -> str:
        return ADMIN_PERFORMER


@dataclass(frozen=True, slots=True)
class OrganizerActor:
    """Caller acting as the organizer that owns applications."""

    person: Person
    organizer_id: uuid.UUID

    @property
    def performed_by(self) -> str:
        return str(self.organizer_id)


@dataclass(frozen=True, slots=True)
class PersonActor:
    """Resolvable caller with no organizer relation and no admin rights."""

    person: Person


Actor = AdminActor | OrganizerActor | PersonActor
