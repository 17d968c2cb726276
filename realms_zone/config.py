"""
Configuration schema for RegionStore.

Defines per-scope defaults (author, default tags, placeholder names),
suggestion limits and the optional plane size exported with documents.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from realms_tags import DEFAULT_REGISTRY
from realms_tags.registry import DEFAULT_SUGGESTION_LIMIT
from realms_zone.logging import LogEvent, create_logger

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class StoreConfig:
    """
    Configuration for a RegionStore.

    Loaded from YAML (or built directly) and validated at construction.
    Immutable after construction (frozen dataclass).

    default_tags are checked against the built-in tag grammar only. A store
    built with a custom TagRegistry validates them again on every create(),
    so tags that pass here can still be rejected by that store.
    """

    # Scope identification (one store per scene/document)
    scope_id: str = "global"

    # Region defaults
    author: str = "Unknown"
    default_tags: Tuple[str, ...] = ()
    placeholder_prefix: str = "Realm"
    id_length: int = 16

    # Tag suggestions
    suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT

    # Plane size (exported as document bounds when set)
    plane_width: Optional[float] = None
    plane_height: Optional[float] = None

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate store configuration."""
        if not self.scope_id:
            raise ValueError("scope_id cannot be empty")

        if not self.placeholder_prefix:
            raise ValueError("placeholder_prefix cannot be empty")

        if not 8 <= self.id_length <= 64:
            raise ValueError(
                f"id_length must be in [8, 64], got {self.id_length}"
            )

        if self.suggestion_limit < 1:
            raise ValueError(
                f"suggestion_limit must be >= 1, got {self.suggestion_limit}"
            )

        if (self.plane_width is None) != (self.plane_height is None):
            raise ValueError(
                "plane_width and plane_height must be set together"
            )
        if self.plane_width is not None and (self.plane_width <= 0 or self.plane_height <= 0):
            raise ValueError(
                f"plane size must be positive, got {self.plane_width}x{self.plane_height}"
            )

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. "
                f"Must be one of {sorted(VALID_LOG_LEVELS)}"
            )

        object.__setattr__(self, 'default_tags', tuple(self.default_tags))
        for tag in self.default_tags:
            reason = DEFAULT_REGISTRY.explain(tag)
            if reason is not None:
                raise ValueError(f"Invalid default tag {tag!r}: {reason}")

    @property
    def logging_level(self) -> int:
        """log_level as a logging module constant."""
        return getattr(logging, self.log_level.upper())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfig":
        """
        Build from a plain mapping; unknown keys are rejected.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        data = dict(data or {})
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown store config keys: {sorted(unknown)}")

        if "default_tags" in data:
            default_tags = data["default_tags"] or ()
            if isinstance(default_tags, str):
                # Comma-separated form: "biome:unknown, climate:temperate"
                default_tags = [tag.strip() for tag in default_tags.split(",") if tag.strip()]
            data["default_tags"] = tuple(default_tags)

        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "StoreConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            scope_id: "scene_01"
            author: "gm"
            default_tags: ["biome:unknown"]
            placeholder_prefix: "Realm"
            suggestion_limit: 10
            plane_width: 4000
            plane_height: 4000
            log_level: "INFO"
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Store config must be a mapping, got {type(data).__name__}")

        config = cls.from_dict(data)
        create_logger("config", level=config.logging_level).info(
            event=LogEvent.CONFIG_LOADED,
            message=f"Loaded store config from {yaml_path}",
            metadata={'scope_id': config.scope_id, 'path': str(yaml_path)}
        )
        return config
