"""
Tests for Identity Directory exceptions.
"""

import pytest

from apps.directory.exceptions import DirectoryAuthError, DirectoryError


class TestDirectoryErrorRetryable:
    @pytest.mark.parametrize(
        ("status_code", "retryable"),
        [
            (None, True),
            (429, True),
            (500, True),
            (503, True),
            (400, False),
            (404, False),
            (409, False),
        ],
    )
    def test_retryable_follows_status(self, status_code, retryable):
        error = DirectoryError("failed", operation="get_organization", status_code=status_code)

        assert error.retryable is retryable

    def test_subclasses_share_the_rule(self):
        assert DirectoryAuthError("token endpoint unreachable").retryable is True
        assert DirectoryAuthError("bad credentials", status_code=401).retryable is False

    def test_class_default_is_untouched(self):
        DirectoryError("failed", status_code=400)

        assert DirectoryError.retryable is True
