"""
Tests for the Keycloak directory adapter.

Uses httpx.MockTransport so every request the adapter sends can be
inspected without a running identity provider.
"""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from apps.directory.client import (
    DirectoryOrganization,
    KeycloakDirectoryClient,
)
from apps.directory.exceptions import (
    DirectoryAuthError,
    DirectoryError,
    DirectoryNotConfiguredError,
)

BASE_URL = "https://kc.example.com"
REALM = "acme"
ADMIN = f"{BASE_URL}/admin/realms/{REALM}"
TOKEN_URL = f"{BASE_URL}/realms/{REALM}/protocol/openid-connect/token"


class Recorder:
    """Routes requests to per-path handlers and records them."""

    def __init__(self, routes: dict) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []
        self.token_requests = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url).split("?")[0]
        if url == TOKEN_URL:
            self.token_requests += 1
            return httpx.Response(
                200, json={"access_token": f"tok-{self.token_requests}", "expires_in": 300}
            )

        self.requests.append(request)
        handler = self.routes.get((request.method, url))
        if handler is None:
            return httpx.Response(404)
        return handler(request) if callable(handler) else handler


def make_client(routes: dict) -> tuple[KeycloakDirectoryClient, Recorder]:
    recorder = Recorder(routes)
    client = KeycloakDirectoryClient(
        base_url=BASE_URL,
        realm=REALM,
        client_id="org-sync",
        client_secret="s3cret",
        http_client=httpx.Client(transport=httpx.MockTransport(recorder)),
    )
    return client, recorder


class TestConfiguration:
    def test_missing_base_url_raises(self):
        with pytest.raises(DirectoryNotConfiguredError):
            KeycloakDirectoryClient(base_url="", realm=REALM, client_id="x", client_secret="y")


class TestAdminToken:
    """Token acquisition and reuse."""

    def test_token_request_uses_client_credentials(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "abc", "expires_in": 60})

        client = KeycloakDirectoryClient(
            base_url=BASE_URL,
            realm=REALM,
            client_id="org-sync",
            client_secret="s3cret",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        assert client._fetch_admin_token() == ("abc", 60)
        assert seen["form"]["grant_type"] == ["client_credentials"]
        assert seen["form"]["client_id"] == ["org-sync"]

    def test_token_is_reused_across_calls(self):
        client, recorder = make_client(
            {("GET", f"{ADMIN}/organizations"): httpx.Response(200, json=[])}
        )

        client.search_organizations_by_alias("a")
        client.search_organizations_by_alias("b")

        assert recorder.token_requests == 1
        assert all(r.headers["Authorization"] == "Bearer tok-1" for r in recorder.requests)

    def test_rejected_token_is_refreshed_and_retried_once(self):
        responses = iter([httpx.Response(401), httpx.Response(200, json=[])])
        client, recorder = make_client(
            {("GET", f"{ADMIN}/organizations"): lambda request: next(responses)}
        )

        assert client.search_organizations_by_alias("acme") == []
        assert recorder.token_requests == 2
        assert recorder.requests[-1].headers["Authorization"] == "Bearer tok-2"

    def test_second_401_is_an_error(self):
        client, _ = make_client({("GET", f"{ADMIN}/organizations"): httpx.Response(401)})

        with pytest.raises(DirectoryError) as exc_info:
            client.search_organizations_by_alias("acme")

        assert exc_info.value.status_code == 401
        assert exc_info.value.retryable is False

    def test_token_endpoint_failure_raises_auth_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_client"})

        client = KeycloakDirectoryClient(
            base_url=BASE_URL,
            realm=REALM,
            client_id="org-sync",
            client_secret="wrong",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        with pytest.raises(DirectoryAuthError):
            client.get_user_by_email("a@example.com")


class TestOrganizations:
    """Organization endpoints."""

    def test_search_filters_exact_alias(self):
        client, recorder = make_client(
            {
                ("GET", f"{ADMIN}/organizations"): httpx.Response(
                    200,
                    json=[
                        {"id": "1", "name": "Acme", "alias": "acme"},
                        {"id": "2", "name": "Acme Labs", "alias": "acme-labs"},
                    ],
                )
            }
        )

        result = client.search_organizations_by_alias("acme")

        assert [org.id for org in result] == ["1"]
        assert recorder.requests[0].url.params["search"] == "acme"

    def test_create_returns_id_from_location(self):
        client, recorder = make_client(
            {
                ("POST", f"{ADMIN}/organizations"): httpx.Response(
                    201, headers={"Location": f"{ADMIN}/organizations/new-org-id"}
                )
            }
        )

        org_id = client.create_organization(
            name="Acme", alias="acme", attributes={"slug": ["acme"]}
        )

        assert org_id == "new-org-id"
        body = json.loads(recorder.requests[0].content)
        assert body == {"name": "Acme", "alias": "acme", "attributes": {"slug": ["acme"]}}

    def test_create_without_location_is_an_error(self):
        client, _ = make_client({("POST", f"{ADMIN}/organizations"): httpx.Response(201)})

        with pytest.raises(DirectoryError):
            client.create_organization(name="Acme", alias="acme", attributes={})

    def test_create_conflict_is_not_retryable(self):
        client, _ = make_client({("POST", f"{ADMIN}/organizations"): httpx.Response(409)})

        with pytest.raises(DirectoryError) as exc_info:
            client.create_organization(name="Acme", alias="acme", attributes={})

        assert exc_info.value.retryable is False

    def test_get_missing_organization_returns_none(self):
        client, _ = make_client({})

        assert client.get_organization("nope") is None

    def test_update_sends_full_representation(self):
        client, recorder = make_client(
            {("PUT", f"{ADMIN}/organizations/org-1"): httpx.Response(204)}
        )
        org = DirectoryOrganization(
            id="org-1",
            name="Acme",
            alias="acme",
            domains=[{"name": "acme.com", "verified": True}],
            attributes={"domain_verified": ["true"]},
        )

        client.update_organization(org)

        body = json.loads(recorder.requests[0].content)
        assert body["domains"] == [{"name": "acme.com", "verified": True}]
        assert body["attributes"] == {"domain_verified": ["true"]}

    def test_list_user_organizations(self):
        client, _ = make_client(
            {
                ("GET", f"{ADMIN}/organizations/members/user-1/organizations"): httpx.Response(
                    200, json=[{"id": "org-1", "name": "Acme", "alias": "acme"}]
                )
            }
        )

        orgs = client.list_user_organizations("user-1")

        assert orgs == [DirectoryOrganization(id="org-1", name="Acme", alias="acme")]


class TestMembers:
    """Member and invitation endpoints."""

    def test_add_member_posts_bare_user_id(self):
        client, recorder = make_client(
            {("POST", f"{ADMIN}/organizations/org-1/members"): httpx.Response(201)}
        )

        client.add_member("org-1", "user-1")

        assert json.loads(recorder.requests[0].content) == "user-1"

    def test_get_user_by_email_uses_exact_match(self):
        client, recorder = make_client(
            {
                ("GET", f"{ADMIN}/users"): httpx.Response(
                    200, json=[{"id": "user-1", "email": "a@example.com"}]
                )
            }
        )

        user = client.get_user_by_email("a@example.com")

        assert user.id == "user-1"
        assert recorder.requests[0].url.params["exact"] == "true"

    def test_get_user_by_email_returns_none_when_missing(self):
        client, _ = make_client({("GET", f"{ADMIN}/users"): httpx.Response(200, json=[])})

        assert client.get_user_by_email("ghost@example.com") is None

    def test_invite_user_is_form_encoded(self):
        client, recorder = make_client(
            {
                ("POST", f"{ADMIN}/organizations/org-1/members/invite-user"): httpx.Response(204)
            }
        )

        client.invite_user("org-1", "new@example.com", first_name="Ada")

        request = recorder.requests[0]
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {
            "email": ["new@example.com"],
            "firstName": ["Ada"],
        }


class TestTransportErrors:
    def test_timeout_is_retryable_directory_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == TOKEN_URL:
                return httpx.Response(200, json={"access_token": "t", "expires_in": 300})
            raise httpx.ReadTimeout("timed out", request=request)

        client = KeycloakDirectoryClient(
            base_url=BASE_URL,
            realm=REALM,
            client_id="org-sync",
            client_secret="s3cret",
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

        with pytest.raises(DirectoryError) as exc_info:
            client.get_organization("org-1")

        assert exc_info.value.status_code is None
        assert exc_info.value.retryable is True

    def test_server_error_is_retryable(self):
        client, _ = make_client({("GET", f"{ADMIN}/users"): httpx.Response(503)})

        with pytest.raises(DirectoryError) as exc_info:
            client.get_user_by_email("a@example.com")

        assert exc_info.value.status_code == 503
        assert exc_info.value.retryable is True
