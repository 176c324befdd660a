"""
Resourceful — Naming Strategies
================================

What:  Derives resource names from record class names and wire field names
       from Python field names.
Why:   English pluralization and field casing have no single right answer
       (irregular plurals, acronyms), so the rules are a replaceable strategy
       instead of being baked into the registry and codec.

Rules of the default strategies:
    Resource name:  class name → lowercase → pluralize
        Post     → posts
        Box      → boxes        (s, x, z, ch, sh take "es")
        Category → categories   (consonant + y takes "ies")
        Person   → persons      (unless irregular={"person": "people"})

    Field name (CamelCaseNaming):
        created_at ↔ createdAt
        id         ↔ id
    Field name (SnakeCaseNaming): identity.

The codec asks the strategy for one wire name per declared field and builds
its lookup table from those answers, so encode and decode are inverse even
when the casing function itself is not (e.g. "field_2" → "field2").
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from resourceful.config import settings

_ES_SUFFIXES = ("s", "x", "z", "ch", "sh")
_VOWELS = "aeiou"


def pluralize(word: str) -> str:
    """Simple English plural of an already-lowercased word."""
    if not word:
        return word
    if word.endswith(_ES_SUFFIXES):
        return word + "es"
    if word.endswith("y") and len(word) > 1 and word[-2] not in _VOWELS:
        return word[:-1] + "ies"
    return word + "s"


def snake_to_camel(name: str) -> str:
    """created_at → createdAt. Leading/trailing underscores are dropped."""
    parts = [p for p in name.split("_") if p]
    if not parts:
        return name
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


class NamingStrategy(ABC):
    """
    Pluggable naming rules for one API.

    Args:
        irregular: lowercase singular → plural overrides, e.g. {"person": "people"}
    """

    def __init__(self, irregular: Optional[Dict[str, str]] = None):
        self.irregular = {k.lower(): v for k, v in (irregular or {}).items()}

    def resource_name(self, type_name: str) -> str:
        """Bare class name → routable resource name."""
        singular = type_name.lower()
        if singular in self.irregular:
            return self.irregular[singular]
        return pluralize(singular)

    @abstractmethod
    def wire_name(self, field_name: str) -> str:
        """Python field name → key used in wire documents."""
        ...


class CamelCaseNaming(NamingStrategy):
    """Lower camel case wire keys (the default)."""

    def wire_name(self, field_name: str) -> str:
        return snake_to_camel(field_name)


class SnakeCaseNaming(NamingStrategy):
    """Wire keys are the Python field names unchanged."""

    def wire_name(self, field_name: str) -> str:
        return field_name


def default_naming() -> NamingStrategy:
    """Strategy selected by the `field_naming` setting."""
    if settings.field_naming == "snake":
        return SnakeCaseNaming()
    return CamelCaseNaming()
