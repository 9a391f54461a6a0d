"""Catalog loader - loads catalog registries from YAML/JSON files."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ..errors import CatalogLoadError
from .types import Catalog


logger = logging.getLogger(__name__)

# Registry-file keys that describe the file itself rather than a catalog
_RESERVED_KEYS = frozenset({"version", "description"})

_CATALOG_SUFFIXES = (".yaml", ".yml", ".json")


def resolve_path(relative_path: str, base_path: str | Path | None) -> Path:
    """Resolve a catalog file reference against the registry file's directory."""
    path = Path(relative_path)
    if path.is_absolute() or not base_path:
        return path
    return Path(base_path) / path


def read_data_file(path: str | Path) -> Any:
    """Parse a YAML or JSON file, choosing the parser by suffix."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(f)
        return json.load(f)


class CatalogLoader:
    """
    Loads catalog registries from YAML or JSON files.

    A registry maps catalog ids to either an inline catalog or a path to a
    file holding one catalog. Paths are relative to the registry file.

    File format:
    ```yaml
    version: "1.0"
    catalogs:
      people:
        id: people
        schema:
          age: number
        entries:
          - id: a
            tags: [x]
            age: 30
      tools: ./catalogs/tools.json
    ```

    The returned registry keeps the keys exactly as written, so a key that
    disagrees with its catalog's ``id`` survives for the validator to report.
    """

    def load_file(self, path: str | Path) -> dict[str, Catalog]:
        """Load a catalog registry from a YAML or JSON file."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Catalog registry file not found: {path}")

        try:
            data = read_data_file(path)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise CatalogLoadError(f"Cannot parse catalog registry {path}: {e}") from e

        return self.load_dict(data or {}, base_path=path.parent)

    def load_dict(
        self,
        data: Mapping[str, Any],
        base_path: str | Path | None = None,
    ) -> dict[str, Catalog]:
        """Load a catalog registry from a dictionary."""
        if not isinstance(data, Mapping):
            raise CatalogLoadError(f"Catalog registry must be a mapping, got {type(data).__name__}")

        catalogs_map = data.get("catalogs", data)
        if not isinstance(catalogs_map, Mapping):
            raise CatalogLoadError("Catalog registry 'catalogs' must be a mapping")

        registry: dict[str, Catalog] = {}
        for key, value in catalogs_map.items():
            catalog_id = str(key)
            if catalog_id.startswith("$") or catalog_id in _RESERVED_KEYS:
                continue

            if isinstance(value, str):
                catalog = self._load_reference(catalog_id, value, base_path)
                if catalog is None:
                    continue
            else:
                catalog = Catalog.from_dict(value, catalog_id=catalog_id)

            registry[catalog_id] = catalog
            logger.debug(f"Loaded catalog: {catalog_id} ({len(catalog.entries)} entries)")

        logger.info(f"Loaded {len(registry)} catalogs")
        return registry

    def _load_reference(
        self,
        catalog_id: str,
        reference: str,
        base_path: str | Path | None,
    ) -> Catalog | None:
        """Load a catalog held in its own file. Unreadable files are skipped."""
        path = resolve_path(reference, base_path)
        try:
            data = read_data_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            logger.warning(f"Skipping catalog '{catalog_id}': cannot read {path}: {e}")
            return None

        if data is None:
            logger.warning(f"Skipping catalog '{catalog_id}': {path} is empty")
            return None

        return Catalog.from_dict(data, catalog_id=catalog_id)

    def load_directory(self, directory: str | Path) -> dict[str, Catalog]:
        """
        Load every catalog file in a directory, one catalog per file.

        Files are loaded in alphabetical order and keyed by the catalog's own
        id, falling back to the file stem. Later files override earlier ones.
        """
        directory = Path(directory)

        if not directory.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory}")

        files = sorted(p for p in directory.iterdir() if p.suffix in _CATALOG_SUFFIXES)

        registry: dict[str, Catalog] = {}
        for file_path in files:
            logger.info(f"Loading catalog file: {file_path}")
            try:
                data = read_data_file(file_path)
            except (yaml.YAMLError, json.JSONDecodeError) as e:
                raise CatalogLoadError(f"Cannot parse catalog file {file_path}: {e}") from e
            catalog = Catalog.from_dict(data or {}, catalog_id=file_path.stem)
            registry[catalog.id] = catalog

        return registry


def load_catalogs(source: str | Path | Mapping[str, Any]) -> dict[str, Catalog]:
    """
    Convenience function to load a catalog registry.

    Args:
        source: Registry file path, directory of catalog files, or dictionary

    Returns:
        Mapping of catalog id -> Catalog, in definition order
    """
    loader = CatalogLoader()

    if isinstance(source, Mapping):
        return loader.load_dict(source)

    path = Path(source)
    if path.is_dir():
        return loader.load_directory(path)
    else:
        return loader.load_file(path)
