"""Shared initialisation helpers for the query service.

Each function constructs exactly one component of the engine stack.
query_app.py calls them from its lifespan; tests and scripts can call them
directly to get the same wiring.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

def load_config(config_path: str | None = None):
    """Load config from file or fall back to defaults.

    Returns ``(config, resolved_config_path)`` where *resolved_config_path*
    is the string that was actually used (needed to resolve relative paths
    such as ``catalogs.definition_file``).
    """
    from .config import Config

    config_path = config_path or os.environ.get("CATALOG_ENGINE_CONFIG", "config.yaml")
    if Path(config_path).exists():
        config = Config.from_yaml(config_path)
        logger.info("Loaded config from %s", config_path)
    else:
        config = Config()
        logger.info("Using default config (no file at %s)", config_path)
    return config, config_path


def configure_logging(config) -> None:
    """Configure root logging from ``app.log_level``."""
    level = getattr(logging, str(config.app.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve(config_path: str, definition_file: str) -> Path:
    config_dir = Path(config_path).parent.resolve()
    return (config_dir / definition_file).resolve()


# ---------------------------------------------------------------------------
# Catalogs
# ---------------------------------------------------------------------------

def build_catalog_registry(config, config_path: str):
    """Load the catalog registry as written, keys included.

    Returns ``(registry, definition_path)``. With no definition file the
    registry is empty and *definition_path* is ``None``.
    """
    from .catalog.loader import load_catalogs

    if not config.catalogs.definition_file:
        logger.info("No catalogs.definition_file configured, starting with no catalogs")
        return {}, None

    definition_path = _resolve(config_path, config.catalogs.definition_file)
    logger.info("Loading catalogs from: %s", definition_path)
    registry = load_catalogs(definition_path)
    return registry, definition_path


def build_catalog_store(registry, config):
    """Register every loaded catalog into a fresh store, under its registry key."""
    from .catalog.store import CatalogStore

    store = CatalogStore()
    mismatch_count = 0
    for key, catalog in registry.items():
        mismatch_count += len(
            store.register(catalog, strict=config.catalogs.strict_schema, key=key)
        )

    logger.info(
        "Catalog store ready with %d catalogs, %d entries (%d schema mismatches)",
        len(store),
        store.total_entries(),
        mismatch_count,
    )
    return store


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------

def build_graph(config, config_path: str):
    """Load the graph, or an empty one when none is configured."""
    from .graph.loader import load_graph

    if not config.graph.definition_file:
        logger.info("No graph.definition_file configured, using an empty graph")
        return load_graph(None)

    graph_path = _resolve(config_path, config.graph.definition_file)
    logger.info("Loading graph from: %s", graph_path)
    return load_graph(graph_path)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def build_projection_defaults(config):
    from .operators.projector import ProjectOptions

    proj = config.projection
    return ProjectOptions(
        use_refs=proj.use_refs,
        use_tags=proj.use_tags,
        tag_mode=proj.tag_mode,
        require_capability=proj.require_capability,
        pointer_tags_as_tags=proj.pointer_tags_as_tags,
    )


def build_engine(config, config_path: str):
    """Load catalogs and graph, validate them, and return ``(engine, validation)``.

    *validation* is ``None`` when ``app.validate_on_startup`` is off. A failed
    validation is logged, not raised: queries and projections stay usable
    over imperfect data.
    """
    from .operators.engine import OperatorEngine

    registry, _definition_path = build_catalog_registry(config, config_path)
    graph = build_graph(config, config_path)
    store = build_catalog_store(registry, config)
    engine = OperatorEngine(graph, store, defaults=build_projection_defaults(config))

    validation = None
    if config.app.validate_on_startup:
        validation = engine.validate()
        for message in validation.errors:
            logger.error("Validation error: %s", message)
        for message in validation.warnings:
            logger.warning("Validation warning: %s", message)

    return engine, validation
