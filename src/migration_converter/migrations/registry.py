"""Migration registry and plugin discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
import logging
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType

from pydantic import ValidationError

from migration_converter.application.ports import MigrationStrategy
from migration_converter.errors import PluginError
from migration_converter.migrations.builtins import InventoryMigration
from migration_converter.schemas import MigrationSelection

logger = logging.getLogger(__name__)


class MigrationRegistry:
    """Registry of migration strategies keyed by name."""

    def __init__(self) -> None:
        self._migrations: dict[str, MigrationStrategy] = {}

    def register(self, migration: MigrationStrategy) -> None:
        """Register a migration instance by unique name.

        Parameters
        ----------
        migration : MigrationStrategy
            Strategy to register. A later registration with the same name
            replaces the earlier one.

        Raises
        ------
        PluginError
            If the migration has no name or lacks a pipeline phase.
        """
        name = str(getattr(migration, "name", "") or "").strip()
        if not name:
            raise PluginError("Migration must define a non-empty 'name'.")
        if not isinstance(migration, MigrationStrategy):
            raise PluginError(
                f"Migration '{name}' must implement analyze, validate and transform."
            )
        if name in self._migrations:
            logger.debug("replacing registered migration %s", name)
        self._migrations[name] = migration

    def names(self) -> list[str]:
        """Return registered migration names, sorted."""
        return sorted(self._migrations.keys())

    def get(self, name: str) -> MigrationStrategy:
        """Get migration by name.

        Raises
        ------
        PluginError
            If no migration is registered under ``name``.
        """
        try:
            return self._migrations[name]
        except KeyError as exc:
            raise PluginError(
                f"Unknown migration '{name}'. "
                f"Available migrations: {', '.join(self.names())}",
                "UNKNOWN_MIGRATION",
            ) from exc

    def load_module(self, module_or_path: str) -> None:
        """Load migrations from module name or file path.

        .. warning::
            This executes code from the specified module. Only load plugins
            from trusted sources.
        """
        module = _import_module_or_path(module_or_path)
        _register_from_module(module, self)


def _import_module_or_path(module_or_path: str) -> ModuleType:
    """Import module by import path or filesystem path.

    Raises
    ------
    PluginError
        If import cannot be completed.
    """
    candidate = Path(module_or_path)
    if candidate.exists():
        spec = importlib.util.spec_from_file_location(candidate.stem, candidate)
        if spec is None or spec.loader is None:
            raise PluginError(f"Unable to load plugin module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise PluginError(
            f"Unable to import plugin module '{module_or_path}': {exc}"
        ) from exc


def _register_from_module(module: ModuleType, registry: MigrationRegistry) -> None:
    """Register migrations exposed by ``module``.

    Supported hooks, in order: ``register_migrations(registry)``,
    ``MIGRATIONS`` (iterable) and ``MIGRATION`` (single instance).
    """
    if hasattr(module, "register_migrations"):
        module.register_migrations(registry)
        return

    migrations_obj = getattr(module, "MIGRATIONS", None)
    if migrations_obj is not None:
        for migration in migrations_obj:
            registry.register(migration)
        return

    migration_obj = getattr(module, "MIGRATION", None)
    if migration_obj is not None:
        registry.register(migration_obj)
        return

    raise PluginError(
        "Plugin module must expose register_migrations(registry), MIGRATIONS, "
        "or MIGRATION."
    )


def create_default_registry(
    extra_modules: Iterable[str] | None = None,
) -> MigrationRegistry:
    """Create registry with built-in and plugin-module migrations."""
    registry = MigrationRegistry()
    registry.register(InventoryMigration())
    for module in extra_modules or []:
        registry.load_module(module)
    return registry


def resolve_migration(
    migration: str,
    plugin_modules: Iterable[str] | None = None,
) -> MigrationStrategy:
    """Validate a selection and return the matching migration.

    Raises
    ------
    PluginError
        If the selection is invalid or the migration is unknown.
    """
    try:
        selection = MigrationSelection(
            migration=migration,
            plugin_modules=list(plugin_modules or []),
        )
    except ValidationError as exc:
        raise PluginError(f"Invalid migration selection: {exc}") from exc
    registry = create_default_registry(extra_modules=selection.plugin_modules)
    return registry.get(selection.migration)
