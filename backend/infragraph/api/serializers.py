from enum import Enum
from typing import Any

from infragraph.domain.architecture import Architecture
from infragraph.domain.resource import Resource

PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize(obj: Any):
    """
    Serialize domain objects into JSON-compatible structures.
    Dataclasses become dicts, enums their values; private attributes are skipped.
    """
    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, (list, tuple)):
        return [serialize(item) for item in obj]

    if isinstance(obj, dict):
        return {k: serialize(v) for k, v in obj.items()}

    if hasattr(obj, "__dict__"):
        return {
            key: serialize(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    return str(obj)


def serialize_resource(resource: Resource) -> dict:
    return {
        "id": resource.id,
        "name": resource.name,
        "type": serialize(resource.type),
        "provider": resource.provider.value,
        "region": resource.region,
        "parent_id": resource.parent_id,
        "depends_on": list(resource.depends_on),
        "metadata": serialize(resource.metadata),
    }


def serialize_architecture(architecture: Architecture) -> dict:
    return {
        "provider": architecture.provider.value,
        "region": architecture.region,
        "resources": [serialize_resource(r) for r in architecture.resources],
        "containments": serialize(architecture.containments),
        "dependencies": serialize(architecture.dependencies),
        "variables": serialize(architecture.variables),
        "outputs": serialize(architecture.outputs),
    }
