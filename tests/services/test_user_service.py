"""Tests for the local user directory."""

import pytest
from sqlmodel import Session

from taskmatch.models.enums import UserRole
from taskmatch.models.user import User, UserCreate
from taskmatch.services import user as user_service
from taskmatch.exceptions import (
    AlreadyExistsError,
    InsufficientPermissionsError,
    NotFoundError,
)
from tests.factories import principal_of

TEST_USER_NAME = "Sam Helper"
TEST_USER_EMAIL = "sam@example.com"
NONEXISTENT_ID = 99999


@pytest.fixture(name="created_user")
def created_user_fixture(session: Session) -> User:
    user = user_service.create_user(
        session, UserCreate(name=TEST_USER_NAME, email=TEST_USER_EMAIL)
    )
    assert user.id_user is not None
    return user


class TestCreateUser:
    def test_defaults(self, created_user: User):
        assert created_user.role == UserRole.VOLUNTEER
        assert created_user.total_hours == 0
        assert created_user.completed_tasks == []
        assert created_user.is_active is True

    def test_duplicate_email(self, session: Session, created_user: User):
        with pytest.raises(AlreadyExistsError) as exc_info:
            user_service.create_user(
                session, UserCreate(name="Someone Else", email=TEST_USER_EMAIL)
            )
        assert exc_info.value.field == "email"

    def test_get_by_email(self, session: Session, created_user: User):
        assert user_service.get_user_by_email(session, TEST_USER_EMAIL) == created_user
        assert user_service.get_user_by_email(session, "nobody@example.com") is None


class TestGetUser:
    def test_own_profile(self, session: Session, created_user: User):
        user = user_service.get_user(
            session, principal_of(created_user), created_user.id_user
        )
        assert user.email == TEST_USER_EMAIL

    def test_admin_reads_anyone(self, session: Session, created_user: User, admin: User):
        user = user_service.get_user(session, principal_of(admin), created_user.id_user)
        assert user.id_user == created_user.id_user

    def test_other_user_forbidden(
        self, session: Session, created_user: User, volunteer: User
    ):
        with pytest.raises(InsufficientPermissionsError):
            user_service.get_user(session, principal_of(volunteer), created_user.id_user)

    def test_not_found(self, session: Session, admin: User):
        with pytest.raises(NotFoundError):
            user_service.get_user(session, principal_of(admin), NONEXISTENT_ID)

    def test_public_view(self, created_user: User):
        public = user_service.to_user_public(created_user)
        assert public.name == TEST_USER_NAME
        assert public.completed_tasks == []
