"""
Organization slug generation and validation.

Slugs are URL-safe organization identifiers. Everything here is pure:
uniqueness against stored data is checked by the callers.

    generate_slug("Acme Inc.")             # "acme-inc"
    validate_slug("admin")                 # SlugValidation(valid=False, error="Slug 'admin' is reserved ...")
    generate_slug_suggestions("acme-inc")  # ["acme-inc-2", "acme-inc-3", "acme-inc-4"]
"""

import re
from dataclasses import dataclass

SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 50
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")

# System routes and identifiers that cannot be organization slugs
RESERVED_SLUGS = frozenset(
    {
        "admin",
        "api",
        "auth",
        "dashboard",
        "settings",
        "billing",
        "support",
        "onboarding",
        "account",
        "profile",
        "organization",
        "organizations",
        "team",
        "teams",
        "user",
        "users",
        "login",
        "logout",
        "signup",
        "signin",
        "register",
        "callback",
        "oauth",
        "saml",
        "oidc",
        "sso",
        "health",
        "status",
        "metrics",
        "docs",
        "documentation",
        "help",
        "about",
        "contact",
        "privacy",
        "terms",
        "tos",
    }
)


@dataclass(frozen=True)
class SlugValidation:
    """Result of validate_slug."""

    valid: bool
    error: str | None = None


def generate_slug(name: str) -> str:
    """
    Generate a URL-safe slug from an organization name.

    Lowercases, collapses every run of characters outside [a-z0-9] into a
    single hyphen, strips edge hyphens and truncates to SLUG_MAX_LENGTH.
    Applying it to its own output is a no-op.
    """
    slug = _NON_ALNUM_RUN.sub("-", name.strip().lower()).strip("-")
    # Truncation can expose a hyphen at the cut point
    return slug[:SLUG_MAX_LENGTH].rstrip("-")


def validate_slug(slug: str) -> SlugValidation:
    """
    Validate a slug against length, format and reserved-word rules.

    Checks run in that order and the first failure is reported.
    """
    if len(slug) < SLUG_MIN_LENGTH:
        return SlugValidation(
            valid=False,
            error=f"Slug must be at least {SLUG_MIN_LENGTH} characters",
        )

    if len(slug) > SLUG_MAX_LENGTH:
        return SlugValidation(
            valid=False,
            error=f"Slug must be at most {SLUG_MAX_LENGTH} characters",
        )

    if not SLUG_PATTERN.match(slug):
        return SlugValidation(
            valid=False,
            error=(
                "Slug must contain only lowercase letters, numbers, and hyphens "
                "(no leading/trailing hyphens)"
            ),
        )

    if slug in RESERVED_SLUGS:
        return SlugValidation(
            valid=False,
            error=f"Slug '{slug}' is reserved and cannot be used",
        )

    return SlugValidation(valid=True)


def generate_slug_suggestions(base_slug: str, count: int = 3) -> list[str]:
    """
    Suggest alternatives for a taken slug: base-2, base-3, ...

    Candidates longer than SLUG_MAX_LENGTH are skipped rather than
    replaced, so fewer than count suggestions may be returned.
    """
    suggestions = []
    for i in range(2, count + 2):
        candidate = f"{base_slug}-{i}"
        if len(candidate) <= SLUG_MAX_LENGTH:
            suggestions.append(candidate)
    return suggestions


def is_reserved_slug(slug: str) -> bool:
    """Check if a slug is reserved (case-insensitive)."""
    return slug.lower() in RESERVED_SLUGS
