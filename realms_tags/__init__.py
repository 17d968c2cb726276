"""
Realms Tag Registry
===================

Bounded Context: Tag vocabulary for realm regions.

Tags are key:value strings drawn from an open vocabulary. A few reserved
namespaces carry semantic rules (numeric ranges, module paths) and a
cardinality (single-valued keys replace, multi-valued keys accumulate).

Architecture:

    realms_tags/
    ├── namespaces.py   # Static namespace table (data only)
    ├── scoring.py      # Levenshtein + relevance scoring
    └── registry.py     # TagRegistry: validate, suggest, detect_conflicts

Usage:

    from realms_tags import TagRegistry, TagValidationError

    registry = TagRegistry()
    registry.validate("biome:forest")

    try:
        registry.validate("travel_speed:0.05")
    except TagValidationError as e:
        print(e.reason)

    [s.tag for s in registry.suggest("swamp")]   # ['biome:swamp']
"""

from realms_tags.namespaces import (
    Cardinality,
    ValueRule,
    Namespace,
    BUILTIN_NAMESPACES,
    BIOME_PATTERNS,
)
from realms_tags.scoring import levenshtein, relevance_score
from realms_tags.registry import (
    TagRegistry,
    TagSuggestion,
    TagValidationError,
    DEFAULT_REGISTRY,
    split_tag,
    validate_tag,
    is_valid_tag,
    explain_tag,
    suggest_tags,
    detect_conflicts,
)

__all__ = [
    # Namespaces
    "Cardinality",
    "ValueRule",
    "Namespace",
    "BUILTIN_NAMESPACES",
    "BIOME_PATTERNS",
    # Scoring
    "levenshtein",
    "relevance_score",
    # Registry
    "TagRegistry",
    "TagSuggestion",
    "TagValidationError",
    "DEFAULT_REGISTRY",
    "split_tag",
    "validate_tag",
    "is_valid_tag",
    "explain_tag",
    "suggest_tags",
    "detect_conflicts",
]

__version__ = "1.0.0"
