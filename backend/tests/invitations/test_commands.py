"""
Tests for the expire_invitations management command.
"""

from io import StringIO

import pytest
from django.core.management import call_command

from apps.invitations.models import Invitation
from tests.invitations.factories import InvitationFactory


@pytest.mark.django_db
class TestExpireInvitations:
    def test_expires_stale_invitations(self):
        stale = InvitationFactory.create(expired=True)
        live = InvitationFactory.create()

        out = StringIO()
        call_command("expire_invitations", stdout=out)

        assert "Expired 1 pending invitations" in out.getvalue()
        stale.refresh_from_db()
        live.refresh_from_db()
        assert stale.status == Invitation.Status.EXPIRED
        assert live.status == Invitation.Status.PENDING

    def test_dry_run_changes_nothing(self):
        stale = InvitationFactory.create(expired=True)

        out = StringIO()
        call_command("expire_invitations", "--dry-run", stdout=out)

        assert "Would expire 1 pending invitations" in out.getvalue()
        stale.refresh_from_db()
        assert stale.status == Invitation.Status.PENDING

    def test_terminal_invitations_untouched(self):
        accepted = InvitationFactory.create(expired=True, status=Invitation.Status.ACCEPTED)

        call_command("expire_invitations", stdout=StringIO())

        accepted.refresh_from_db()
        assert accepted.status == Invitation.Status.ACCEPTED
