"""
Tests for organizations app models.
"""

from datetime import timedelta

import pytest
from django.db import IntegrityError
from django.utils import timezone

from apps.organizations.models import Organization
from tests.accounts.factories import OrganizationFactory


@pytest.mark.django_db
class TestOrganizationModel:
    """Tests for Organization model."""

    def test_create_organization(self) -> None:
        """Should create an organization with required fields."""
        org = Organization.objects.create(
            external_org_id="kc-org-123",
            name="Test Org",
            slug="test-org",
        )

        assert org.id is not None
        assert org.external_org_id == "kc-org-123"
        assert org.subscription_plan == Organization.Plan.FREE
        assert org.custom_domain is None
        assert org.domain_verified is False

    def test_str_returns_name(self) -> None:
        org = OrganizationFactory.create(name="Acme Corp")

        assert str(org) == "Acme Corp"

    def test_slug_unique(self) -> None:
        """Should enforce unique slug."""
        OrganizationFactory.create(slug="unique-slug")

        with pytest.raises(IntegrityError):
            OrganizationFactory.create(slug="unique-slug")

    def test_external_org_id_unique(self) -> None:
        OrganizationFactory.create(external_org_id="kc-org-unique")

        with pytest.raises(IntegrityError):
            OrganizationFactory.create(external_org_id="kc-org-unique")

    def test_unlinked_organizations_may_coexist(self) -> None:
        """NULL external ids do not collide."""
        OrganizationFactory.create(external_org_id=None)
        OrganizationFactory.create(external_org_id=None)

        assert Organization.objects.filter(external_org_id__isnull=True).count() == 2

    def test_is_provisioned(self) -> None:
        assert OrganizationFactory.build(external_org_id="kc-1").is_provisioned
        assert not OrganizationFactory.build(external_org_id=None).is_provisioned


class TestDomainToken:
    """Tests for has_live_domain_token."""

    def test_no_token(self) -> None:
        assert not Organization(domain_verification_token="").has_live_domain_token

    def test_token_without_expiry(self) -> None:
        assert Organization(domain_verification_token="abc").has_live_domain_token

    def test_token_before_expiry(self) -> None:
        org = Organization(
            domain_verification_token="abc",
            domain_token_expires_at=timezone.now() + timedelta(hours=1),
        )
        assert org.has_live_domain_token

    def test_token_after_expiry(self) -> None:
        org = Organization(
            domain_verification_token="abc",
            domain_token_expires_at=timezone.now() - timedelta(seconds=1),
        )
        assert not org.has_live_domain_token
