"""
Tag Namespace Table
===================

Bounded Context: Tag Vocabulary

Static, data-driven description of the reserved tag namespaces.

Design:
- Plain frozen dataclasses in a tuple (no reflection, no callbacks)
- ValueRule discriminant selects the semantic check
- Cardinality decides replace-on-add (enforced by Region, not here)
- Table order is the enumeration order used for suggestion ties
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Cardinality(str, Enum):
    """How many tags of one namespace a region may carry."""
    SINGLE = "single"  # new tag replaces the old one
    MULTI = "multi"    # tags accumulate


class ValueRule(str, Enum):
    """Semantic rule applied to a namespace's value after syntax checks."""
    FREE = "free"
    NUMERIC_RANGE = "numeric_range"
    MODULE_PATH = "module_path"


@dataclass(frozen=True)
class Namespace:
    """
    Immutable namespace descriptor.

    Attributes:
        prefix: Tag key (text before the colon)
        name: Human-readable name
        description: One-line description for display
        color: Display color (hex)
        examples: Fully-qualified example tags
        suggestions: Candidate values offered by autocomplete
        cardinality: SINGLE or MULTI
        rule: Semantic value rule
        min_value: Inclusive lower bound for NUMERIC_RANGE
        max_value: Inclusive upper bound for NUMERIC_RANGE
    """

    prefix: str
    name: str
    description: str
    color: str
    examples: Tuple[str, ...] = ()
    suggestions: Tuple[str, ...] = ()
    cardinality: Cardinality = Cardinality.MULTI
    rule: ValueRule = ValueRule.FREE
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    def __post_init__(self):
        """Validate descriptor."""
        if not self.prefix:
            raise ValueError("Namespace prefix cannot be empty")
        if self.rule == ValueRule.NUMERIC_RANGE:
            if self.min_value is None or self.max_value is None:
                raise ValueError(
                    f"Namespace '{self.prefix}' uses NUMERIC_RANGE but has no bounds"
                )
            if self.min_value > self.max_value:
                raise ValueError(
                    f"Namespace '{self.prefix}' min_value ({self.min_value}) "
                    f"exceeds max_value ({self.max_value})"
                )

    @property
    def is_single_valued(self) -> bool:
        return self.cardinality == Cardinality.SINGLE

    @property
    def example_values(self) -> Tuple[str, ...]:
        """Value portion of each example tag."""
        return tuple(example.split(':', 1)[1] for example in self.examples if ':' in example)


# ========== Built-in Namespaces ==========

BUILTIN_NAMESPACES: Tuple[Namespace, ...] = (
    Namespace(
        prefix="biome",
        name="Biome",
        description="Primary ecosystem type",
        color="#28a745",
        examples=("biome:forest", "biome:desert", "biome:mountain", "biome:swamp"),
        suggestions=(
            "forest", "desert", "mountain", "swamp", "grassland", "tundra",
            "jungle", "coast", "hills", "valley", "plateau", "canyon",
        ),
        cardinality=Cardinality.SINGLE,
    ),
    Namespace(
        prefix="terrain",
        name="Terrain",
        description="Terrain difficulty and features",
        color="#dc3545",
        examples=("terrain:dense", "terrain:rocky", "terrain:marshy"),
        suggestions=(
            "dense", "sparse", "rocky", "marshy", "rugged", "smooth",
            "steep", "flat", "broken", "cultivated", "wild", "clear",
        ),
    ),
    Namespace(
        prefix="climate",
        name="Climate",
        description="Weather patterns and temperature",
        color="#17a2b8",
        examples=("climate:temperate", "climate:arctic", "climate:tropical"),
        suggestions=(
            "temperate", "arctic", "tropical", "arid", "humid", "dry",
            "wet", "mild", "harsh", "seasonal", "stable", "volatile",
        ),
        cardinality=Cardinality.SINGLE,
    ),
    Namespace(
        prefix="travel_speed",
        name="Travel Speed",
        description="Movement speed modifier (0.1 to 2.0)",
        color="#ffc107",
        examples=("travel_speed:0.5", "travel_speed:1.0", "travel_speed:1.5"),
        suggestions=("0.25", "0.5", "0.75", "1.0", "1.25", "1.5", "2.0"),
        cardinality=Cardinality.SINGLE,
        rule=ValueRule.NUMERIC_RANGE,
        min_value=0.1,
        max_value=2.0,
    ),
    Namespace(
        prefix="resources",
        name="Resources",
        description="Available natural resources",
        color="#6f42c1",
        examples=("resources:timber", "resources:game", "resources:minerals"),
        suggestions=(
            "timber", "game", "fish", "minerals", "herbs", "stone",
            "water", "food", "fuel", "rare_metals", "gems", "magical",
        ),
    ),
    Namespace(
        prefix="elevation",
        name="Elevation",
        description="Height classification",
        color="#6c757d",
        examples=("elevation:lowland", "elevation:highland", "elevation:peak"),
        suggestions=(
            "sea_level", "lowland", "highland", "mountain", "peak",
            "underground", "elevated", "deep", "surface",
        ),
        cardinality=Cardinality.SINGLE,
    ),
    Namespace(
        prefix="custom",
        name="Custom",
        description="User-defined properties",
        color="#e83e8c",
        examples=("custom:haunted", "custom:sacred", "custom:dangerous"),
        suggestions=(
            "haunted", "sacred", "dangerous", "peaceful", "magical",
            "cursed", "blessed", "ancient", "ruined", "inhabited",
        ),
    ),
    Namespace(
        prefix="module",
        name="Module",
        description="Module-specific properties (module:name:key:value)",
        color="#fd7e14",
        examples=("module:jj:encounter_chance:0.3", "module:weather:severity:high"),
        rule=ValueRule.MODULE_PATH,
    ),
)

# Key under which values may carry extra colons and slashes
MODULE_PREFIX = "module"


# Companion tags commonly painted alongside a biome
BIOME_PATTERNS: Dict[str, Tuple[str, ...]] = {
    "forest": (
        "terrain:dense", "travel_speed:0.75", "resources:timber",
        "resources:game", "climate:temperate",
    ),
    "desert": ("terrain:rocky", "travel_speed:0.5", "resources:minerals", "climate:arid"),
    "mountain": (
        "terrain:rugged", "travel_speed:0.25", "elevation:highland",
        "resources:stone", "resources:minerals",
    ),
    "swamp": ("terrain:marshy", "travel_speed:0.5", "resources:herbs", "climate:humid"),
    "grassland": ("terrain:flat", "travel_speed:1.25", "resources:game", "climate:temperate"),
}
