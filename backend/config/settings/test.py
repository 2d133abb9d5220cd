"""
Test settings.

SQLite in memory and a fixed, unreachable Identity Directory: tests patch
the directory client or inject an httpx.MockTransport.
"""

from .base import *  # noqa: F403

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

KEYCLOAK_BASE_URL = "https://keycloak.test"
KEYCLOAK_REALM = "test"
KEYCLOAK_CLIENT_ID = "org-sync"
KEYCLOAK_CLIENT_SECRET = "test-secret"
DIRECTORY_HTTP_TIMEOUT_SECONDS = 1.0

INVITATION_EXPIRY_DAYS = 7
DOMAIN_VERIFICATION_PRODUCT = "jithub"
DOMAIN_VERIFICATION_TOKEN_TTL_DAYS = 7
DNS_RESOLVER_TIMEOUT_SECONDS = 1.0

LOG_JSON = False
LOG_LEVEL = "WARNING"
