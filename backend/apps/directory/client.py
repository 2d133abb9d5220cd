"""
Identity Directory client.

The engine talks to the directory only through the IdentityDirectory
protocol below. KeycloakDirectoryClient is the concrete adapter for a
Keycloak realm with the Organizations feature enabled.

References:
- https://www.keycloak.org/docs-api/latest/rest-api/index.html#_organizations
"""

import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Protocol

import httpx
from django.conf import settings

from apps.core.logging import get_logger
from apps.directory.credentials import AdminTokenHolder
from apps.directory.exceptions import (
    DirectoryAuthError,
    DirectoryError,
    DirectoryNotConfiguredError,
)

logger = get_logger(__name__)

# Longest response body kept in logs for failed calls
_LOGGED_BODY_LIMIT = 500


@dataclass
class DirectoryOrganization:
    """An organization as the Identity Directory represents it."""

    id: str
    name: str
    alias: str = ""
    domains: list[dict[str, Any]] = field(default_factory=list)
    attributes: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "DirectoryOrganization":
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            alias=data.get("alias") or "",
            domains=list(data.get("domains") or []),
            attributes=dict(data.get("attributes") or {}),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "alias": self.alias,
            "domains": self.domains,
            "attributes": self.attributes,
        }
        if self.id:
            payload["id"] = self.id
        return payload


@dataclass
class DirectoryUser:
    """A user account in the Identity Directory."""

    id: str
    email: str


class IdentityDirectory(Protocol):
    """Operations the engine needs from the Identity Directory."""

    def search_organizations_by_alias(self, alias: str) -> list[DirectoryOrganization]: ...

    def create_organization(
        self, name: str, alias: str, attributes: dict[str, list[str]]
    ) -> str: ...

    def get_organization(self, org_id: str) -> DirectoryOrganization | None: ...

    def update_organization(self, organization: DirectoryOrganization) -> None: ...

    def add_member(self, org_id: str, user_id: str) -> None: ...

    def get_user_by_email(self, email: str) -> DirectoryUser | None: ...

    def invite_user(
        self, org_id: str, email: str, first_name: str = "", last_name: str = ""
    ) -> None: ...

    def list_user_organizations(self, user_id: str) -> list[DirectoryOrganization]: ...


class KeycloakDirectoryClient:
    """
    IdentityDirectory adapter for the Keycloak admin REST API.

    Every call gets an admin token from the AdminTokenHolder. A 401 drops
    the cached token and retries the call once with a fresh one.
    """

    def __init__(
        self,
        base_url: str,
        realm: str,
        client_id: str,
        client_secret: str,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not base_url or not realm:
            raise DirectoryNotConfiguredError(
                "KEYCLOAK_BASE_URL and KEYCLOAK_REALM must be set",
                operation="configure",
            )
        self.base_url = base_url.rstrip("/")
        self.realm = realm
        self.client_id = client_id
        self.client_secret = client_secret
        self.http = http_client or httpx.Client(timeout=timeout)
        self.tokens = AdminTokenHolder(self._fetch_admin_token)

    @property
    def admin_url(self) -> str:
        return f"{self.base_url}/admin/realms/{self.realm}"

    # --- Token ---

    def _fetch_admin_token(self) -> tuple[str, int]:
        token_url = f"{self.base_url}/realms/{self.realm}/protocol/openid-connect/token"
        try:
            response = self.http.post(
                token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
            )
        except httpx.HTTPError as e:
            logger.warning("directory_token_request_failed", error=str(e))
            raise DirectoryAuthError(f"Admin token request failed: {e}", operation="token") from e

        if response.status_code != 200:
            logger.error(
                "directory_token_rejected",
                status_code=response.status_code,
                body=response.text[:_LOGGED_BODY_LIMIT],
            )
            raise DirectoryAuthError(
                f"Failed to get admin token: {response.status_code}",
                operation="token",
                status_code=response.status_code,
            )

        data = response.json()
        return data["access_token"], int(data.get("expires_in", 60))

    # --- Transport ---

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        expected: tuple[int, ...] = (200, 201, 204),
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send an authenticated admin API request.

        Raises:
            DirectoryError: on transport errors, timeouts and unexpected statuses
        """
        url = f"{self.admin_url}{path}"
        started = time.monotonic()

        for attempt in (1, 2):
            headers = {"Authorization": f"Bearer {self.tokens.get()}"}
            try:
                response = self.http.request(method, url, headers=headers, **kwargs)
            except httpx.HTTPError as e:
                logger.warning(
                    "directory_request_failed",
                    operation=operation,
                    method=method,
                    path=path,
                    error=str(e),
                )
                raise DirectoryError(f"{operation} failed: {e}", operation=operation) from e

            if response.status_code == 401 and attempt == 1:
                logger.info("directory_token_rejected_retrying", operation=operation)
                self.tokens.invalidate()
                continue
            break

        logger.debug(
            "directory_request",
            operation=operation,
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=(time.monotonic() - started) * 1000,
        )

        if response.status_code not in expected:
            logger.warning(
                "directory_request_failed",
                operation=operation,
                method=method,
                path=path,
                status_code=response.status_code,
                body=response.text[:_LOGGED_BODY_LIMIT],
            )
            raise DirectoryError(
                f"{operation} failed with status {response.status_code}",
                operation=operation,
                status_code=response.status_code,
            )

        return response

    # --- Organizations ---

    def search_organizations_by_alias(self, alias: str) -> list[DirectoryOrganization]:
        """Return organizations whose alias equals the given value exactly."""
        response = self._request(
            "GET",
            "/organizations",
            operation="search_organizations_by_alias",
            params={"search": alias},
        )
        return [
            org
            for org in (DirectoryOrganization.from_payload(o) for o in response.json())
            if org.alias == alias
        ]

    def create_organization(
        self, name: str, alias: str, attributes: dict[str, list[str]]
    ) -> str:
        """
        Create an organization and return its directory id.

        Keycloak answers 201 with the new resource in the Location header.
        """
        response = self._request(
            "POST",
            "/organizations",
            operation="create_organization",
            expected=(201,),
            json={"name": name, "alias": alias, "attributes": attributes},
        )
        location = response.headers.get("Location", "")
        org_id = location.rstrip("/").rsplit("/", 1)[-1] if location else ""
        if not org_id:
            raise DirectoryError(
                "create_organization returned no Location header",
                operation="create_organization",
                status_code=response.status_code,
            )
        return org_id

    def get_organization(self, org_id: str) -> DirectoryOrganization | None:
        response = self._request(
            "GET",
            f"/organizations/{org_id}",
            operation="get_organization",
            expected=(200, 404),
        )
        if response.status_code == 404:
            return None
        return DirectoryOrganization.from_payload(response.json())

    def update_organization(self, organization: DirectoryOrganization) -> None:
        self._request(
            "PUT",
            f"/organizations/{organization.id}",
            operation="update_organization",
            json=organization.to_payload(),
        )

    def list_user_organizations(self, user_id: str) -> list[DirectoryOrganization]:
        """List the organizations a directory user is a member of."""
        response = self._request(
            "GET",
            f"/organizations/members/{user_id}/organizations",
            operation="list_user_organizations",
        )
        return [DirectoryOrganization.from_payload(o) for o in response.json()]

    # --- Members ---

    def add_member(self, org_id: str, user_id: str) -> None:
        """Add an existing directory user to an organization."""
        # Keycloak expects the bare user id as a JSON string body
        self._request(
            "POST",
            f"/organizations/{org_id}/members",
            operation="add_member",
            expected=(201, 204),
            json=user_id,
        )

    def get_user_by_email(self, email: str) -> DirectoryUser | None:
        response = self._request(
            "GET",
            "/users",
            operation="get_user_by_email",
            params={"email": email, "exact": "true"},
        )
        users = response.json()
        if not users:
            return None
        return DirectoryUser(id=users[0]["id"], email=users[0].get("email", email))

    def invite_user(
        self, org_id: str, email: str, first_name: str = "", last_name: str = ""
    ) -> None:
        """
        Send the directory's own invitation email.

        The directory handles delivery, registration and adding the user to
        the organization once they accept.
        """
        form = {"email": email}
        if first_name:
            form["firstName"] = first_name
        if last_name:
            form["lastName"] = last_name

        self._request(
            "POST",
            f"/organizations/{org_id}/members/invite-user",
            operation="invite_user",
            data=form,
        )


@lru_cache(maxsize=1)
def get_directory_client() -> IdentityDirectory:
    """
    Get the configured Identity Directory client (singleton).

    Uses lru_cache so the admin token cache is shared by all requests in
    the process.
    """
    return KeycloakDirectoryClient(
        base_url=settings.KEYCLOAK_BASE_URL,
        realm=settings.KEYCLOAK_REALM,
        client_id=settings.KEYCLOAK_CLIENT_ID,
        client_secret=settings.KEYCLOAK_CLIENT_SECRET,
        timeout=settings.DIRECTORY_HTTP_TIMEOUT_SECONDS,
    )
