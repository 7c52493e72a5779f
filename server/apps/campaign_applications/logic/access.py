"""Role-gated visibility of applications and attachments.

Absent and not-owned entities look the same to callers: both are simply
missing from the querysets returned here.
"""

from django.db.models import QuerySet

from server.apps.campaign_applications.models import (
    CampaignApplication,
    CampaignApplicationFile,
)
from server.apps.people.logic.actors import (
    Actor,
    AdminActor,
    OrganizerActor,
    PersonActor,
)


def visible_applications(actor: Actor) -> QuerySet[CampaignApplication]:
    """Applications the actor may see.

    Args:
        actor: Acting role for the request.

    Returns:
        QuerySet limited to the actor's visibility scope.
    """
    applications = CampaignApplication.objects.all()
    match actor:
        case AdminActor():
            return applications
        case OrganizerActor(organizer_id=organizer_id):
            return applications.filter(organizer_id=organizer_id)
        case PersonActor():
            return applications.none()


def visible_files(actor: Actor) -> QuerySet[CampaignApplicationFile]:
    """Attachments the actor may see.

    A file is visible exactly when its application is.

    Args:
        actor: Acting role for the request.

    Returns:
        QuerySet limited to the actor's visibility scope.
    """
    files = CampaignApplicationFile.objects.all()
    match actor:
        case AdminActor():
            return files
        case OrganizerActor(organizer_id=organizer_id):
            return files.filter(application__organizer_id=organizer_id)
        case PersonActor():
            return files.none()
