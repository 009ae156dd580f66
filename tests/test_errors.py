"""Tests for the household error hierarchy."""

from household_hub.errors import (
    AlreadyParkedError,
    DuplicateVoteError,
    HouseholdError,
    IdentityError,
    IncorrectAnswerError,
    NoRolesAvailableError,
    NotAuthorError,
    NotFoundError,
    NotOccupantError,
    PolicyViolation,
    ResourceBusyError,
    RoleTakenError,
    SelfVoteError,
    SpotOccupiedError,
    TerminalStateError,
    TransportError,
    ValidationError,
)


class TestErrorHierarchy:
    """Test exception inheritance chain."""

    def test_household_error_is_exception(self) -> None:
        assert isinstance(HouseholdError("test"), Exception)

    def test_top_level_kinds_are_household_errors(self) -> None:
        for error_type in (
            ValidationError,
            NotFoundError,
            PolicyViolation,
            IdentityError,
            TransportError,
        ):
            assert isinstance(error_type("test"), HouseholdError)

    def test_policy_violations(self) -> None:
        for error_type in (
            SelfVoteError,
            DuplicateVoteError,
            TerminalStateError,
            ResourceBusyError,
            SpotOccupiedError,
            AlreadyParkedError,
            NotOccupantError,
            NotAuthorError,
        ):
            err = error_type("test")
            assert isinstance(err, PolicyViolation)
            assert not isinstance(err, IdentityError)

    def test_identity_errors(self) -> None:
        for error_type in (IncorrectAnswerError, RoleTakenError, NoRolesAvailableError):
            assert isinstance(error_type("test"), IdentityError)

    def test_exception_message(self) -> None:
        err = SpotOccupiedError("Spot 3 is already occupied")
        assert str(err) == "Spot 3 is already occupied"
