"""Service configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class CatalogsConfig:
    """Where catalogs come from and how strictly schemas are checked."""
    definition_file: str | None = None  # registry file or directory of catalog files
    strict_schema: bool = False  # refuse catalogs whose entries break their schema


@dataclass
class GraphConfig:
    definition_file: str | None = None  # e.g., "graph.yaml"


@dataclass
class ProjectionConfig:
    """Defaults for projections that do not pass their own options."""
    use_refs: bool = True
    use_tags: bool = True
    tag_mode: str = "any"
    require_capability: bool = False
    pointer_tags_as_tags: bool = False


@dataclass
class AppConfig:
    title: str = "Catalog Engine"
    log_level: str = "INFO"
    validate_on_startup: bool = True


@dataclass
class Config:
    """Main configuration."""
    catalogs: CatalogsConfig = field(default_factory=CatalogsConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    app: AppConfig = field(default_factory=AppConfig)

    @classmethod
    def from_dict(cls, data: dict) -> Config:
        """Create config from dictionary."""
        return cls(
            catalogs=CatalogsConfig(**(data.get("catalogs") or {})),
            graph=GraphConfig(**(data.get("graph") or {})),
            projection=ProjectionConfig(**(data.get("projection") or {})),
            app=AppConfig(**(data.get("app") or {})),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load config from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})
