"""Exceptions for people app."""


class UnauthenticatedError(Exception):
    """Raised when a request carries no authenticated identity at all."""


class PersonNotFoundError(Exception):
    """Raised when authenticated claims do not map to a stored person.

    Surfaced to callers as not-found so that the response does not reveal
    whether an identity is known to the system.
    """

    def __init__(self, subject: str) -> None:
        """Initialize PersonNotFoundError.

        Args:
            subject: Subject identifier from the caller's claims.
        """
        self.subject = subject
        super().__init__('No person found in database')
