"""
Tests for slug generation and validation.
"""

import pytest

from apps.organizations.slugs import (
    RESERVED_SLUGS,
    SLUG_MAX_LENGTH,
    generate_slug,
    generate_slug_suggestions,
    is_reserved_slug,
    validate_slug,
)


class TestGenerateSlug:
    """Tests for generate_slug."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Acme Inc.", "acme-inc"),
            ("  Hello   World  ", "hello-world"),
            ("ACME__Corp!!", "acme-corp"),
            ("Café Société", "caf-soci-t"),
            ("Test & Co", "test-co"),
            ("---x---", "x"),
            ("---", ""),
            ("2024 Ventures", "2024-ventures"),
        ],
    )
    def test_generates_expected_slug(self, name, expected):
        assert generate_slug(name) == expected

    def test_is_deterministic(self):
        assert generate_slug("Acme Inc.") == generate_slug("Acme Inc.")

    def test_is_idempotent(self):
        once = generate_slug("Some  Weird--Name!!")
        assert generate_slug(once) == once

    def test_truncates_to_max_length(self):
        slug = generate_slug("a" * 80)
        assert len(slug) == SLUG_MAX_LENGTH

    def test_truncation_never_leaves_trailing_hyphen(self):
        # Character 50 would be the hyphen between the two words
        name = "a" * 49 + " b"
        slug = generate_slug(name)
        assert not slug.endswith("-")
        assert validate_slug(slug).valid


class TestValidateSlug:
    """Tests for validate_slug."""

    def test_accepts_valid_slug(self):
        result = validate_slug("acme-corp")
        assert result.valid is True
        assert result.error is None

    def test_rejects_too_short(self):
        result = validate_slug("ab")
        assert result.valid is False
        assert "at least 3" in result.error

    def test_rejects_too_long(self):
        result = validate_slug("a" * (SLUG_MAX_LENGTH + 1))
        assert result.valid is False
        assert "at most 50" in result.error

    @pytest.mark.parametrize("slug", ["Acme", "-acme", "acme-", "ac--me", "ac_me", "ac me"])
    def test_rejects_bad_format(self, slug):
        result = validate_slug(slug)
        assert result.valid is False
        assert "lowercase letters" in result.error

    def test_rejects_reserved(self):
        result = validate_slug("admin")
        assert result.valid is False
        assert "reserved" in result.error

    @pytest.mark.parametrize("word", sorted(RESERVED_SLUGS))
    def test_rejects_every_reserved_word(self, word):
        assert not validate_slug(word).valid

    def test_length_is_checked_before_format(self):
        assert "at least" in validate_slug("A").error


class TestSuggestions:
    """Tests for generate_slug_suggestions."""

    def test_default_count(self):
        assert generate_slug_suggestions("acme") == ["acme-2", "acme-3", "acme-4"]

    def test_custom_count(self):
        assert generate_slug_suggestions("acme", count=2) == ["acme-2", "acme-3"]

    def test_skips_candidates_over_max_length(self):
        base = "a" * (SLUG_MAX_LENGTH - 2)
        assert generate_slug_suggestions(base) == [f"{base}-2", f"{base}-3", f"{base}-4"]

        too_long = "a" * (SLUG_MAX_LENGTH - 1)
        assert generate_slug_suggestions(too_long) == []


class TestReservedSlugs:
    """Tests for the reserved list."""

    def test_is_case_insensitive(self):
        assert is_reserved_slug("ADMIN")
        assert is_reserved_slug("Api")

    def test_ordinary_slug_is_not_reserved(self):
        assert not is_reserved_slug("acme")

    @pytest.mark.parametrize("slug", ["api", "auth", "login", "sso", "tos", "organizations"])
    def test_contains_system_routes(self, slug):
        assert slug in RESERVED_SLUGS
