"""
Schema Registry - provider-scoped catalog of resource config schemas.

The default registry is built once per process, filled with the
built-in provider schemas and frozen. Validation only ever reads it.
"""

import logging
import threading
from typing import Dict, List, Optional

from infragraph.errors import SchemaRegistrationError
from infragraph.schema.types import ResourceSchema

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    In-memory registry keyed by provider, then resource type.

    Usage:
        registry = SchemaRegistry()
        registry.register(schema)
        vpc = registry.get("vpc", "aws")
    """

    def __init__(self):
        self._schemas: Dict[str, Dict[str, ResourceSchema]] = {}
        self._lock = threading.RLock()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, schema: Optional[ResourceSchema]) -> None:
        if schema is None:
            raise SchemaRegistrationError("schema cannot be None")
        if not schema.resource_type:
            raise SchemaRegistrationError("resource type is required")
        if not schema.provider:
            raise SchemaRegistrationError("provider is required")

        with self._lock:
            if self._frozen:
                raise SchemaRegistrationError(
                    f"registry is frozen, cannot register '{schema.resource_type}' ({schema.provider})"
                )
            provider_schemas = self._schemas.setdefault(schema.provider.lower(), {})
            provider_schemas[schema.resource_type.lower()] = schema

    def register_all(self, schemas: List[ResourceSchema]) -> None:
        for schema in schemas:
            self.register(schema)

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    def get(self, resource_type: str, provider: str) -> Optional[ResourceSchema]:
        with self._lock:
            provider_schemas = self._schemas.get((provider or "").lower())
            if not provider_schemas:
                return None
            return provider_schemas.get((resource_type or "").lower())

    def has(self, resource_type: str, provider: str) -> bool:
        return self.get(resource_type, provider) is not None

    def list_all(self, provider: str) -> List[ResourceSchema]:
        with self._lock:
            return list(self._schemas.get((provider or "").lower(), {}).values())

    def providers(self) -> List[str]:
        with self._lock:
            return list(self._schemas.keys())


# Global registry instance
_default_registry: Optional[SchemaRegistry] = None
_default_registry_lock = threading.Lock()


def get_schema_registry() -> SchemaRegistry:
    """Get or create the process-wide schema registry"""
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                from infragraph.schema.loader import register_builtin_schemas

                registry = SchemaRegistry()
                register_builtin_schemas(registry)
                registry.freeze()
                logger.info(
                    "[REGISTRY] Default schema registry ready: %s",
                    {p: len(registry.list_all(p)) for p in registry.providers()},
                )
                _default_registry = registry
    return _default_registry
