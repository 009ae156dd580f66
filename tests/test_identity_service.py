"""Tests for identity binding."""

import pytest

from household_hub.domain.members import Role
from household_hub.errors import (
    IncorrectAnswerError,
    NoRolesAvailableError,
    RoleTakenError,
)
from household_hub.services.identity import IdentityService
from tests.conftest import InMemoryMemberRepository, bind_all

ANSWERS = {
    Role.RAM: "67",
    Role.MUNNA: "panipuri",
    Role.SURIYA: "tea",
    Role.KAUSHIK: "kamal",
}


def _service(repository: InMemoryMemberRepository) -> IdentityService:
    return IdentityService(repository=repository, security_answers=dict(ANSWERS))


def test_bind_accepts_answer_ignoring_case_and_whitespace() -> None:
    repository = InMemoryMemberRepository()
    service = _service(repository)

    member = service.bind("user-a", Role.KAUSHIK, "  KaMaL ")

    assert member.role is Role.KAUSHIK
    assert service.resolve("user-a") == member
    assert Role.KAUSHIK not in service.available_roles()


def test_bind_rejects_wrong_answer() -> None:
    repository = InMemoryMemberRepository()
    service = _service(repository)

    with pytest.raises(IncorrectAnswerError):
        service.bind("user-a", Role.SURIYA, "coffee")

    assert service.resolve("user-a") is None
    assert not any(member.bound for member in repository.members.values())


def test_bind_returns_existing_member_without_checking_answer() -> None:
    repository = InMemoryMemberRepository()
    service = _service(repository)
    first = service.bind("user-a", Role.RAM, "67")

    again = service.bind("user-a", Role.MUNNA, "wrong")

    assert again == first
    assert [m.role for m in repository.members.values() if m.bound] == [Role.RAM]


def test_bind_rejects_taken_role() -> None:
    repository = InMemoryMemberRepository()
    service = _service(repository)
    service.bind("user-a", Role.RAM, "67")

    with pytest.raises(RoleTakenError):
        service.bind("user-b", Role.RAM, "67")


def test_bind_denies_access_when_all_roles_taken() -> None:
    repository = InMemoryMemberRepository()
    bind_all(repository)
    service = _service(repository)

    assert service.available_roles() == []
    with pytest.raises(NoRolesAvailableError):
        service.bind("newcomer", Role.RAM, "67")


def test_bind_rejects_role_without_configured_answer() -> None:
    repository = InMemoryMemberRepository()
    service = IdentityService(repository=repository, security_answers={})

    with pytest.raises(IncorrectAnswerError):
        service.bind("user-a", Role.RAM, "67")


def test_list_members_follows_role_order() -> None:
    repository = InMemoryMemberRepository()
    service = _service(repository)
    service.bind("user-k", Role.KAUSHIK, "kamal")
    service.bind("user-r", Role.RAM, "67")

    roles = [member.role for member in service.list_members()]

    assert roles == [Role.RAM, Role.KAUSHIK]
    assert service.available_roles() == [Role.MUNNA, Role.SURIYA]


def test_unbind_releases_role() -> None:
    repository = InMemoryMemberRepository()
    service = _service(repository)
    service.bind("user-a", Role.MUNNA, "panipuri")

    assert service.unbind(Role.MUNNA) is True
    assert service.unbind(Role.MUNNA) is False
    assert service.resolve("user-a") is None
    assert Role.MUNNA in service.available_roles()


def test_question_for_role() -> None:
    service = _service(InMemoryMemberRepository())

    assert service.question_for(Role.RAM) == "What is your favorite meme?"


def test_rebinding_keeps_member_id() -> None:
    repository = InMemoryMemberRepository()
    service = _service(repository)
    original = service.bind("user-a", Role.RAM, "67")

    service.unbind(Role.RAM)
    rebound = service.bind("user-a-recovered", Role.RAM, "67")

    assert rebound.id == original.id
    assert rebound.external_id == "user-a-recovered"
    assert service.resolve("user-a") is None
    assert len(repository.members) == len(Role)
