"""Resolve external identities to household members."""

import logging
from dataclasses import dataclass
from typing import Protocol

from household_hub.domain.members import SECURITY_QUESTIONS, Member, Role
from household_hub.errors import (
    IncorrectAnswerError,
    NoRolesAvailableError,
    RoleTakenError,
)

logger = logging.getLogger(__name__)


class MemberRepository(Protocol):
    """Persistence interface for member bindings."""

    def get_by_external_id(self, external_id: str) -> Member | None:
        """Return the member bound to an external identity, if present."""

    def list_members(self) -> list[Member]:
        """Return every role row, bound or not."""

    def bind_role(self, external_id: str, role: Role) -> Member:
        """Attach an external identity to an unbound role and return the member.

        Raises RoleTakenError when the role or identity is already bound.
        """

    def clear_binding(self, role: Role) -> bool:
        """Detach the identity from a role; return True if one was bound."""


@dataclass
class IdentityService:
    """Application service for role binding."""

    repository: MemberRepository
    security_answers: dict[Role, str]

    def resolve(self, external_id: str) -> Member | None:
        """Return the member bound to the identity, if any."""
        return self.repository.get_by_external_id(external_id)

    def list_members(self) -> list[Member]:
        """Return bound members in role order."""
        order = {role: index for index, role in enumerate(Role)}
        bound = [member for member in self.repository.list_members() if member.bound]
        return sorted(bound, key=lambda m: order[m.role])

    def available_roles(self) -> list[Role]:
        """Return roles nobody has bound yet."""
        taken = {m.role for m in self.repository.list_members() if m.bound}
        return [role for role in Role if role not in taken]

    def question_for(self, role: Role) -> str:
        """Return the security question for a role."""
        return SECURITY_QUESTIONS[role]

    def bind(self, external_id: str, role: Role, answer: str) -> Member:
        """Bind the identity to a role after checking the security answer."""
        existing = self.repository.get_by_external_id(external_id)
        if existing:
            return existing

        available = self.available_roles()
        if not available:
            raise NoRolesAvailableError("All household roles are already taken")
        if role not in available:
            raise RoleTakenError(f"{role.value} is already taken")

        expected = self.security_answers.get(role)
        if expected is None or not _answers_match(answer, expected):
            raise IncorrectAnswerError("Incorrect answer. Please try again.")

        member = self.repository.bind_role(external_id, role)
        logger.info("Bound %s to a new identity", role.value)
        return member

    def unbind(self, role: Role) -> bool:
        """Release a role so another identity can claim it."""
        removed = self.repository.clear_binding(role)
        if removed:
            logger.info("Unbound %s", role.value)
        return removed


def _answers_match(given: str, expected: str) -> bool:
    return given.strip().lower() == expected.strip().lower()
