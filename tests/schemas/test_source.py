"""Tests for amphitheatre.schemas.source.

Tests cover:
- Source locator composition and parsing
- Partner validation, locator and serialization
"""

import pytest

from amphitheatre.errors import ValidationError
from amphitheatre.schemas import DEFAULT_PATH, Partner, parse_url, url


REPO = "https://example.com/r.git"


class TestUrl:
    """Tests for url()."""

    def test_repository_only(self):
        """Without a reference the locator is the repository."""
        assert url(REPO) == REPO
        assert url(REPO, None, None) == REPO

    def test_path_without_reference_is_not_embedded(self):
        """A path alone does not change the locator."""
        assert url(REPO, None, "svc/.amp.toml") == REPO

    def test_reference(self):
        """Reference is appended after '#'."""
        assert url(REPO, "main") == f"{REPO}#main"

    def test_reference_and_path(self):
        """Path follows the reference after ':'."""
        locator = url(REPO, "main", "svc/.amp.toml")
        assert locator == f"{REPO}#main:svc/.amp.toml"
        assert locator.index("main") < locator.index("svc/.amp.toml")

    def test_deterministic(self):
        """Same triple, same locator."""
        assert url(REPO, "v1.2.0", "a/b.toml") == url(REPO, "v1.2.0", "a/b.toml")

    def test_distinct_triples_do_not_collide(self):
        """Different triples produce different locators."""
        locators = {
            url(REPO),
            url(REPO, "main"),
            url(REPO, "main", "a.toml"),
            url(REPO, "dev", "a.toml"),
            url(REPO, "main", "b.toml"),
        }
        assert len(locators) == 5


class TestParseUrl:
    """Tests for parse_url()."""

    def test_repository_only(self):
        assert parse_url(REPO) == (REPO, None, None)

    def test_reference(self):
        assert parse_url(f"{REPO}#main") == (REPO, "main", None)

    def test_reference_and_path(self):
        assert parse_url(f"{REPO}#main:svc/.amp.toml") == (REPO, "main", "svc/.amp.toml")

    def test_inverts_url(self):
        """parse_url recovers what url composed."""
        triple = ("git@example.com:org/r.git", "release/1.0", "deploy/.amp.toml")
        assert parse_url(url(*triple)) == triple


class TestPartner:
    """Tests for Partner."""

    def test_url_shares_derivation(self):
        """Partner locator matches the shared url() derivation."""
        partner = Partner(name="db", repository=REPO, reference="v1", path="db/.amp.toml")
        assert partner.url() == url(REPO, "v1", "db/.amp.toml")

    def test_url_without_reference(self):
        partner = Partner(name="db", repository=REPO)
        assert partner.url() == REPO

    def test_manifest_path_default(self):
        """Absent path falls back to the default configuration file."""
        assert Partner(name="db", repository=REPO).manifest_path == DEFAULT_PATH
        assert DEFAULT_PATH == "./.amp.toml"

    def test_name_required(self):
        with pytest.raises(ValidationError, match="'name' is required"):
            Partner(name="", repository=REPO)

    def test_repository_required(self):
        with pytest.raises(ValidationError, match="'repository' is required"):
            Partner.from_dict({"name": "db"})

    def test_to_dict_omits_absent_fields(self):
        partner = Partner(name="db", repository=REPO)
        assert partner.to_dict() == {"name": "db", "repository": REPO}

    def test_from_dict(self):
        partner = Partner.from_dict(
            {"name": "db", "repository": REPO, "reference": "v1", "path": "x.toml"}
        )
        assert partner == Partner(name="db", repository=REPO, path="x.toml", reference="v1")
        assert partner.to_dict() == {
            "name": "db",
            "repository": REPO,
            "path": "x.toml",
            "reference": "v1",
        }

    def test_from_dict_rejects_non_string_reference(self):
        with pytest.raises(ValidationError, match="'reference' must be a string"):
            Partner.from_dict({"name": "db", "repository": REPO, "reference": 1})
