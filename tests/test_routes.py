"""
Tests for request path classification.
"""

import pytest

from northstar.access.routes import RouteClass, classify


class TestClassify:
    """Prefix matching in public > root > wizard > protected order."""

    @pytest.mark.parametrize("path", [
        "/login",
        "/login/",
        "/login?next=/today",
        "/signup",
        "/signup/confirm",
        "/reset-password",
        "/reset-password/token/abc",
        "/loginx",  # prefix match, not segment match
    ])
    def test_public_prefixes(self, path):
        assert classify(path) == RouteClass.PUBLIC

    def test_root_is_exact(self):
        assert classify("/") == RouteClass.ROOT

    @pytest.mark.parametrize("path", ["/wizard", "/wizard/0", "/wizard/13", "/wizard/finish"])
    def test_wizard_prefix(self, path):
        assert classify(path) == RouteClass.WIZARD

    @pytest.mark.parametrize("path", [
        "/today",
        "/vision",
        "/inbox",
        "/settings",
        "/api/storage/sign",
        "",
        "//",
    ])
    def test_everything_else_is_protected(self, path):
        assert classify(path) == RouteClass.PROTECTED

    @pytest.mark.parametrize("path", ["/Login", "/SIGNUP", "/Wizard/0"])
    def test_matching_is_case_sensitive(self, path):
        assert classify(path) == RouteClass.PROTECTED
