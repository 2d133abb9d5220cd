"""
HTTP tests for the membership sync endpoint.
"""

import pytest

from apps.directory.client import DirectoryOrganization, DirectoryUser
from apps.directory.exceptions import DirectoryError
from tests.accounts.factories import UserFactory


@pytest.fixture
def user():
    return UserFactory.create(email="jane@example.com")


@pytest.mark.django_db
class TestSyncMembershipsEndpoint:
    def test_requires_authentication(self, api_client):
        response = api_client.post("/api/v1/auth/sync")

        assert response.status_code == 401

    def test_returns_reconcile_counts(self, login, user, directory):
        client = login(user)
        directory.get_user_by_email.return_value = DirectoryUser(id="kc-jane", email=user.email)
        directory.list_user_organizations.return_value = [
            DirectoryOrganization(id="kc-org-5", name="Five", alias="five")
        ]

        response = client.post("/api/v1/auth/sync")

        assert response.status_code == 200
        assert response.json() == {
            "new_organizations": 1,
            "new_memberships": 1,
            "accepted_invitations": 0,
            "errors": [],
        }

    def test_directory_outage_is_reported_not_raised(self, login, user, directory):
        client = login(user)
        directory.get_user_by_email.side_effect = DirectoryError("down", operation="get_user")

        response = client.post("/api/v1/auth/sync")

        assert response.status_code == 200
        assert len(response.json()["errors"]) == 1
