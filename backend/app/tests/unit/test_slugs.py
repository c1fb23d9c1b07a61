############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# test_slugs.py: Unit tests for slug helpers and tag normalization
#
############################################################

"""Unit tests for slug derivation and tag snapshot normalization."""

from backend.app.core.slugs import dedupe_by_slug, resolve_slug, slugify
from backend.app.services.posts import normalize_tags


class TestSlugify:
    def test_basic(self):
        assert slugify("Hello World") == "hello-world"

    def test_strips_punctuation_and_collapses_separators(self):
        assert slugify("  What's New -- in  v2?! ") == "whats-new-in-v2"

    def test_underscores_become_hyphens(self):
        assert slugify("snake_case_title") == "snake-case-title"


class TestResolveSlug:
    def test_explicit_slug_is_normalized(self):
        assert resolve_slug("My Slug", "Ignored Title") == "my-slug"

    def test_blank_slug_falls_back(self):
        assert resolve_slug("  ", "Release Notes") == "release-notes"
        assert resolve_slug(None, "Release Notes") == "release-notes"


class TestTags:
    def test_dedupe_keeps_first(self):
        items = [{"name": "A", "slug": "a"}, {"name": "A again", "slug": "a"}, {"name": "B", "slug": "b"}]
        assert dedupe_by_slug(items) == [{"name": "A", "slug": "a"}, {"name": "B", "slug": "b"}]

    def test_normalize_derives_missing_slug(self):
        assert normalize_tags([{"name": "Cloud Native"}]) == [{"name": "Cloud Native", "slug": "cloud-native"}]

    def test_normalize_fills_missing_name_from_slug(self):
        assert normalize_tags([{"slug": "python"}]) == [{"name": "python", "slug": "python"}]

    def test_normalize_drops_empty_entries(self):
        assert normalize_tags([{"name": "", "slug": ""}, {"name": "Go"}]) == [{"name": "Go", "slug": "go"}]

    def test_normalize_none(self):
        assert normalize_tags(None) == []
