"""
Tag Registry
============

Bounded Context: Tag validation, suggestion and conflict detection.

Responsibilities:
- Enforce the key:value micro-grammar (with the module:* exception)
- Apply per-namespace semantic rules (numeric ranges, module paths)
- Rank autocomplete suggestions
- Report soft conflicts between tags

Design:
- Pure queries over an immutable namespace table
- Fail-fast validation via TagValidationError (carries tag + reason)
- Classifies cardinality only; replace-on-add is enforced by Region
- No singletons: DEFAULT_REGISTRY is an immutable module constant

Example:
    >>> registry = TagRegistry()
    >>> registry.is_valid("biome:forest")
    True
    >>> registry.explain("biome:")
    'Tag must have a value after the colon'
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from realms_tags.namespaces import (
    BIOME_PATTERNS,
    BUILTIN_NAMESPACES,
    MODULE_PREFIX,
    Namespace,
    ValueRule,
)
from realms_tags.scoring import relevance_score


KEY_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')
VALUE_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')
MODULE_VALUE_PATTERN = re.compile(r'^[A-Za-z0-9_.:/-]+$')

DEFAULT_SUGGESTION_LIMIT = 10

SPEED_TERRAIN_CONFLICT = "High travel speed conflicts with dense/rocky terrain"


class TagValidationError(ValueError):
    """Raised when a tag fails syntax or namespace rules."""

    def __init__(self, tag: str, reason: str):
        self.tag = tag
        self.reason = reason
        super().__init__(f"Invalid tag {tag!r}: {reason}")


@dataclass(frozen=True)
class TagSuggestion:
    """
    One autocomplete candidate.

    Attributes:
        tag: Fully-qualified key:value tag
        display_label: Human-readable label for pickers
        namespace: Human name of the namespace
        score: Relevance in [0, 100]
    """
    tag: str
    display_label: str
    namespace: str
    score: float


def split_tag(tag: str) -> Tuple[str, str]:
    """Split at the first colon. A tag without a colon yields an empty value."""
    key, _, value = tag.partition(':')
    return key, value


class TagRegistry:
    """
    Validation, suggestion and conflict rules over a namespace table.

    Attributes:
        suggestion_limit: Maximum number of suggestions returned per call

    Usage:
        registry = TagRegistry()

        registry.validate("travel_speed:0.75")   # ok
        registry.validate("travel_speed:0.05")   # raises TagValidationError

        for suggestion in registry.suggest("swa"):
            print(suggestion.tag, suggestion.score)
    """

    def __init__(
        self,
        namespaces: Iterable[Namespace] = BUILTIN_NAMESPACES,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT
    ):
        """
        Args:
            namespaces: Namespace table (order drives suggestion tie-breaks)
            suggestion_limit: Cap on suggestions per call (>= 1)

        Raises:
            ValueError: On duplicate prefixes or a non-positive limit
        """
        if suggestion_limit < 1:
            raise ValueError(f"suggestion_limit must be >= 1, got {suggestion_limit}")

        self.suggestion_limit = suggestion_limit
        self._namespaces: Dict[str, Namespace] = {}
        for namespace in namespaces:
            if namespace.prefix in self._namespaces:
                raise ValueError(f"Namespace '{namespace.prefix}' defined twice")
            self._namespaces[namespace.prefix] = namespace

    # ========== Namespace Queries ==========

    @property
    def namespaces(self) -> Tuple[Namespace, ...]:
        return tuple(self._namespaces.values())

    def get_namespace(self, tag_or_key: str) -> Optional[Namespace]:
        """Namespace for a full tag or a bare key, None if not reserved."""
        key, _ = split_tag(tag_or_key)
        return self._namespaces.get(key)

    def is_single_valued(self, key: str) -> bool:
        """Unknown keys are multi-valued."""
        namespace = self._namespaces.get(key)
        return namespace is not None and namespace.is_single_valued

    def namespace_suggestions(self, prefix: str) -> List[str]:
        """Raw suggestion values for a namespace (empty if unknown)."""
        namespace = self._namespaces.get(prefix)
        return list(namespace.suggestions) if namespace else []

    @staticmethod
    def biome_tag_suggestions(biome: str) -> List[str]:
        """Companion tags commonly applied with a biome (case-insensitive)."""
        return list(BIOME_PATTERNS.get(biome.lower(), ()))

    @staticmethod
    def normalize_tag(tag: str) -> str:
        return tag.strip().lower()

    # ========== Validation ==========

    def explain(self, tag: str) -> Optional[str]:
        """
        Return why a tag is invalid, or None if it is valid.

        Syntax is checked first; the namespace rule only runs on
        syntactically valid tags. Unknown keys are accepted.
        """
        if not isinstance(tag, str) or not tag:
            return "Tag must be a non-empty string"

        colon = tag.find(':')
        if colon < 0:
            return "Tag must contain a colon (:) separating key and value"
        if colon == 0:
            return "Tag must have a key before the colon"

        key, value = tag[:colon], tag[colon + 1:]
        if not value:
            return "Tag must have a value after the colon"

        is_module = key == MODULE_PREFIX
        if not is_module and ':' in value:
            return "Tag can only contain one colon (except module tags)"

        if not KEY_PATTERN.match(key):
            return "Tag key can only contain letters, numbers, underscores, and hyphens"

        if is_module:
            if not MODULE_VALUE_PATTERN.match(value):
                return (
                    "Tag value can only contain letters, numbers, underscores, periods, "
                    "hyphens, colons, and forward slashes"
                )
        elif not VALUE_PATTERN.match(value):
            return "Tag value can only contain letters, numbers, underscores, periods, hyphens"

        namespace = self._namespaces.get(key)
        if namespace is not None:
            return self._check_rule(namespace, value)
        if is_module:
            return _check_module_path(value)
        return None

    def _check_rule(self, namespace: Namespace, value: str) -> Optional[str]:
        if namespace.rule == ValueRule.NUMERIC_RANGE:
            try:
                number = float(value)
            except ValueError:
                return f"{namespace.name} value must be a number"
            if not namespace.min_value <= number <= namespace.max_value:
                return (
                    f"{namespace.name} value must be between "
                    f"{namespace.min_value} and {namespace.max_value}"
                )
            return None

        if namespace.rule == ValueRule.MODULE_PATH:
            return _check_module_path(value)

        return None

    def validate(self, tag: str) -> None:
        """
        Validate a tag.

        Raises:
            TagValidationError: With the offending tag and a readable reason
        """
        reason = self.explain(tag)
        if reason is not None:
            raise TagValidationError(tag, reason)

    def is_valid(self, tag: str) -> bool:
        return self.explain(tag) is None

    # ========== Suggestions ==========

    def suggest(
        self,
        partial: str,
        existing_tags: Sequence[str] = (),
        limit: Optional[int] = None
    ) -> List[TagSuggestion]:
        """
        Rank autocomplete candidates for partial input.

        With a colon ("biome:fo"), the text after it is matched against that
        namespace's suggestion values. Without one ("swa"), the fragment is
        matched against namespace prefixes and every namespace's candidate
        values. Single-valued namespaces already present in existing_tags
        are skipped in the second mode.

        Args:
            partial: What the user typed so far
            existing_tags: Tags already on the region
            limit: Override for suggestion_limit

        Returns:
            Suggestions sorted by descending score (stable), capped at limit
        """
        limit = self.suggestion_limit if limit is None else limit
        candidates: Dict[str, TagSuggestion] = {}

        def offer(tag: str, label: str, namespace: Namespace, score: float) -> None:
            # Re-offering a tag keeps its first position but the best score
            current = candidates.get(tag)
            if current is None or score > current.score:
                candidates[tag] = TagSuggestion(
                    tag=tag,
                    display_label=label,
                    namespace=namespace.name,
                    score=score
                )

        if ':' in partial:
            prefix, fragment = partial.split(':', 1)
            namespace = self._namespaces.get(prefix)
            if namespace is not None:
                fragment_lower = fragment.lower()
                for value in namespace.suggestions:
                    if fragment_lower in value.lower():
                        offer(
                            f"{namespace.prefix}:{value}",
                            f"{namespace.name}: {value}",
                            namespace,
                            relevance_score(value, fragment)
                        )
        else:
            fragment = partial.lower()
            existing_keys = {split_tag(tag)[0] for tag in existing_tags}

            for namespace in self._namespaces.values():
                if namespace.is_single_valued and namespace.prefix in existing_keys:
                    continue

                if fragment in namespace.prefix.lower():
                    prefix_score = relevance_score(namespace.prefix, fragment)
                    for example in namespace.examples:
                        offer(
                            example,
                            f"{namespace.name}: {namespace.description}",
                            namespace,
                            prefix_score
                        )

                for value in dict.fromkeys(namespace.example_values + namespace.suggestions):
                    if fragment in value.lower():
                        offer(
                            f"{namespace.prefix}:{value}",
                            f"{namespace.name}: {value}",
                            namespace,
                            relevance_score(value, fragment)
                        )

        ranked = [suggestion for suggestion in candidates.values() if suggestion.score > 0]
        ranked.sort(key=lambda suggestion: suggestion.score, reverse=True)
        return ranked[:limit]

    # ========== Conflicts ==========

    def detect_conflicts(self, tags: Iterable[str]) -> List[str]:
        """
        Report soft conflicts in a tag set.

        Checks:
        1. A single-valued namespace holding two or more tags (possible when
           tags were injected directly, e.g. by import)
        2. travel_speed above 1.0 together with terrain:dense or terrain:rocky

        Returns:
            Human-readable warnings (empty list if none)
        """
        tags = list(tags)
        conflicts: List[str] = []

        tags_by_key: Dict[str, List[str]] = {}
        for tag in tags:
            key, _ = split_tag(tag)
            tags_by_key.setdefault(key, []).append(tag)

        for namespace in self._namespaces.values():
            key_tags = tags_by_key.get(namespace.prefix, [])
            if namespace.is_single_valued and len(key_tags) > 1:
                conflicts.append(
                    f"Multiple {namespace.prefix} tags found: {', '.join(key_tags)}"
                )

        speed_tags = tags_by_key.get("travel_speed", [])
        speed = _parse_float(split_tag(speed_tags[0])[1]) if speed_tags else None
        rough_terrain = "terrain:dense" in tags or "terrain:rocky" in tags

        if speed is not None and speed > 1.0 and rough_terrain:
            conflicts.append(SPEED_TERRAIN_CONFLICT)

        return conflicts


def _check_module_path(value: str) -> Optional[str]:
    segments = value.split(':')
    if len(segments) < 2 or not all(segments):
        return "Module tags must use the form module:<name>:<property>[:<value>]"
    return None


def _parse_float(value: str) -> Optional[float]:
    try:
        return float(value)
    except ValueError:
        return None


DEFAULT_REGISTRY = TagRegistry()


# ========== Module-level shortcuts (default registry) ==========

def validate_tag(tag: str) -> None:
    """Raise TagValidationError if the tag is invalid."""
    DEFAULT_REGISTRY.validate(tag)


def is_valid_tag(tag: str) -> bool:
    return DEFAULT_REGISTRY.is_valid(tag)


def explain_tag(tag: str) -> Optional[str]:
    return DEFAULT_REGISTRY.explain(tag)


def suggest_tags(partial: str, existing_tags: Sequence[str] = ()) -> List[TagSuggestion]:
    return DEFAULT_REGISTRY.suggest(partial, existing_tags)


def detect_conflicts(tags: Iterable[str]) -> List[str]:
    return DEFAULT_REGISTRY.detect_conflicts(tags)
