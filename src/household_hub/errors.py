"""Exception hierarchy for household operations."""


class HouseholdError(Exception):
    """Base exception for all household errors."""


class ValidationError(HouseholdError):
    """Raised when a command has a bad input shape."""


class NotFoundError(HouseholdError):
    """Raised when a referenced entity does not exist."""


class PolicyViolation(HouseholdError):
    """Raised when a command is well-formed but not allowed in the current state."""


class SelfVoteError(PolicyViolation):
    """Raised when a payer votes on their own expense."""


class DuplicateVoteError(PolicyViolation):
    """Raised when a member votes twice on the same expense."""


class TerminalStateError(PolicyViolation):
    """Raised when voting on an expense that is no longer pending."""


class ResourceBusyError(PolicyViolation):
    """Raised when claiming an appliance that is already in use."""


class SpotOccupiedError(PolicyViolation):
    """Raised when claiming a parking spot that is already taken."""


class AlreadyParkedError(PolicyViolation):
    """Raised when a member already holds another parking spot."""


class NotOccupantError(PolicyViolation):
    """Raised when someone other than the occupant releases a resource."""


class NotAuthorError(PolicyViolation):
    """Raised when someone other than the author modifies a chat message."""


class IdentityError(HouseholdError):
    """Raised when an external identity cannot be bound to a role."""


class IncorrectAnswerError(IdentityError):
    """Raised when the security answer does not match."""


class RoleTakenError(IdentityError):
    """Raised when the requested role is already bound."""


class NoRolesAvailableError(IdentityError):
    """Raised when every role is bound and the caller has none."""


class TransportError(HouseholdError):
    """Raised when storage or the network fails."""
