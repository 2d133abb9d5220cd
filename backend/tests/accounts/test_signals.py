"""
Tests for the login reconciliation hook.
"""

from unittest.mock import patch

import pytest

from apps.accounts.models import Member
from apps.directory.client import DirectoryOrganization, DirectoryUser
from apps.directory.exceptions import DirectoryError
from apps.sync.reconcile import ReconcileResult

from .factories import UserFactory


@pytest.mark.django_db
class TestReconcileOnLogin:
    def test_login_mirrors_memberships(self, login, directory):
        user = UserFactory.create(email="jane@example.com")
        directory.get_user_by_email.return_value = DirectoryUser(id="kc-jane", email=user.email)
        directory.list_user_organizations.return_value = [
            DirectoryOrganization(id="kc-org-7", name="Seven", alias="seven")
        ]

        login(user)

        member = Member.objects.get(user=user)
        assert member.organization.slug == "seven"

    def test_login_runs_reconcile_for_user(self, login):
        user = UserFactory.create()

        with patch(
            "apps.accounts.signals.reconcile_user", return_value=ReconcileResult()
        ) as mock_reconcile:
            login(user)

        mock_reconcile.assert_called_once_with(user.pk, user.email)

    def test_directory_failure_does_not_block_login(self, login, api_client, directory):
        user = UserFactory.create()
        directory.get_user_by_email.side_effect = DirectoryError("down", operation="get_user")

        login(user)

        assert api_client.session["_auth_user_id"] == str(user.pk)
