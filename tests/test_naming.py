"""
Resourceful — Naming Strategy Tests
====================================

What we test:
    ✅ Resource name pluralization (s, es, ies, irregular overrides)
    ✅ Camel-case and snake-case wire names
    ✅ Strategy selection from settings
"""

import pytest
from unittest.mock import patch

from resourceful.naming import (
    CamelCaseNaming,
    SnakeCaseNaming,
    default_naming,
    pluralize,
    snake_to_camel,
)


class TestPluralize:

    @pytest.mark.parametrize(
        "word, plural",
        [
            ("post", "posts"),
            ("user", "users"),
            ("box", "boxes"),
            ("status", "statuses"),
            ("match", "matches"),
            ("wish", "wishes"),
            ("buzz", "buzzes"),
            ("category", "categories"),
            ("day", "days"),
        ],
    )
    def test_regular_plurals(self, word, plural):
        assert pluralize(word) == plural

    def test_empty_word(self):
        assert pluralize("") == ""


class TestResourceName:

    def test_class_name_is_lowercased_then_pluralized(self):
        assert CamelCaseNaming().resource_name("Post") == "posts"
        assert CamelCaseNaming().resource_name("BlogPost") == "blogposts"

    def test_irregular_override(self):
        naming = CamelCaseNaming(irregular={"Person": "people"})
        assert naming.resource_name("Person") == "people"
        assert naming.resource_name("Post") == "posts"


class TestWireNames:

    def test_snake_to_camel(self):
        assert snake_to_camel("created_at") == "createdAt"
        assert snake_to_camel("id") == "id"
        assert snake_to_camel("view_count_total") == "viewCountTotal"

    def test_camel_strategy(self):
        assert CamelCaseNaming().wire_name("view_count") == "viewCount"

    def test_snake_strategy_is_identity(self):
        assert SnakeCaseNaming().wire_name("view_count") == "view_count"

    def test_default_naming_follows_settings(self):
        with patch("resourceful.naming.settings") as mock_settings:
            mock_settings.field_naming = "snake"
            assert isinstance(default_naming(), SnakeCaseNaming)
            mock_settings.field_naming = "camel"
            assert isinstance(default_naming(), CamelCaseNaming)
