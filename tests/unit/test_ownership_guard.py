"""Tests for the ownership guard."""

import pytest

from rmce.auth.ownership import Decision, authorize_mutation, ensure_owner
from rmce.errors import ForbiddenError


class TestAuthorizeMutation:
    def test_owner_allowed(self):
        assert authorize_mutation(5, 5) is Decision.ALLOW

    def test_other_user_denied(self):
        assert authorize_mutation(5, 6) is Decision.DENY

    def test_ownerless_resource_denied(self):
        assert authorize_mutation(None, 5) is Decision.DENY


class TestEnsureOwner:
    def test_owner_passes(self):
        ensure_owner("Route", 1, 5, 5)

    def test_non_owner_forbidden(self):
        with pytest.raises(ForbiddenError) as exc_info:
            ensure_owner("Route", 1, 5, 6)
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "You do not own this route"
