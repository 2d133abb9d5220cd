"""
Shared pytest fixtures for all tests.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import UserFactory, OrganizationFactory, MemberFactory
    from tests.invitations.factories import InvitationFactory
    from tests.sync.factories import SyncStateFactory

Identity Directory
------------------
The `directory` fixture is autouse: every service that calls
get_directory_client() receives the same MagicMock, so no test can reach
a real identity provider. Configure return values per test:

    def test_something(directory):
        directory.get_user_by_email.return_value = DirectoryUser(id="kc-user-1", email="a@b.co")
"""

from collections.abc import Iterator
from contextlib import ExitStack
from unittest.mock import MagicMock, patch

import pytest
from django.test import Client, RequestFactory

from apps.core.logging import clear_contextvars
from apps.directory.client import KeycloakDirectoryClient

# Modules that import get_directory_client by name
DIRECTORY_CONSUMERS = [
    "apps.organizations.services",
    "apps.organizations.domains",
    "apps.invitations.services",
    "apps.sync.reconcile",
]


@pytest.fixture(autouse=True)
def directory() -> Iterator[MagicMock]:
    """Mock Identity Directory shared by every service module."""
    client = MagicMock(spec=KeycloakDirectoryClient)
    client.search_organizations_by_alias.return_value = []
    client.create_organization.return_value = "kc-org-1"
    client.get_organization.return_value = None
    client.get_user_by_email.return_value = None
    client.list_user_organizations.return_value = []

    with ExitStack() as stack:
        for module in DIRECTORY_CONSUMERS:
            stack.enter_context(patch(f"{module}.get_directory_client", return_value=client))
        yield client


@pytest.fixture(autouse=True)
def _clear_log_context() -> Iterator[None]:
    """Keep structlog context from leaking between tests."""
    clear_contextvars()
    yield
    clear_contextvars()


@pytest.fixture
def request_factory() -> RequestFactory:
    """
    Django request factory for unit testing views.

    Example:
        def test_endpoint(request_factory, user):
            request = request_factory.get("/api/v1/endpoint")
            request.user = user
            result = my_endpoint(request)
    """
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def login(api_client: Client):
    """
    Log a user into the test client.

    Logging in fires user_logged_in, which runs reconciliation against the
    mocked directory.

    Example:
        def test_endpoint(login, user):
            client = login(user)
            client.post("/api/v1/organizations/", ...)
    """

    def _login(user) -> Client:
        api_client.force_login(user)
        return api_client

    return _login
