"""Migration strategies, registry and plugin discovery."""

from .builtins import InventoryMigration
from .registry import MigrationRegistry, create_default_registry, resolve_migration

__all__ = [
    "InventoryMigration",
    "MigrationRegistry",
    "create_default_registry",
    "resolve_migration",
]
