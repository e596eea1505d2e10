from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.container import wire
from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.main import create_app
from tests.fakes import in_memory_repositories

import config.testing as test_settings


@pytest.fixture
def repos():
    return in_memory_repositories()


@pytest.fixture
def container(repos):
    return wire(repos, settings=test_settings)


@pytest.fixture
def app(container):
    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def people(repos):
    return {
        "admin": repos.accounts.add(username="admin", role=Role.ADMIN, user_code="ADMIN-001", password="rootpass"),
        "instructor": repos.accounts.add(username="tina", role=Role.INSTRUCTOR, user_code="T-2024", password="T-2024"),
        "other_instructor": repos.accounts.add(username="otto", role=Role.INSTRUCTOR, user_code="T-2025"),
        "student": repos.accounts.add(username="ana", role=Role.STUDENT, user_code="2024-0001", password="2024-0001"),
        "other_student": repos.accounts.add(username="ben", role=Role.STUDENT, user_code="2024-0002"),
    }


@pytest.fixture
def auth(container, people):
    """Authorization headers per person."""

    def headers(who: str) -> dict:
        token = container.auth_service.issue_token(people[who])
        return {"Authorization": f"Bearer {token}"}

    return headers
