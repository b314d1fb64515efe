"""
Loads provider resource schemas from YAML files.

Directory structure:
    providers/
        aws.yaml
        azure.yaml      (optional)
        ...

Each file declares one provider:

    provider: aws
    schemas:
      - resource_type: vpc
        category: networking
        fields:
          - {name: cidr, type: cidr, required: true}
        valid_parent_types: [region]
"""

import logging
import os
from typing import Any, Dict, List, Optional

import yaml

from infragraph import config
from infragraph.errors import SchemaRegistrationError
from infragraph.schema.types import FieldConstraint, FieldSpec, FieldType, ResourceSchema

logger = logging.getLogger(__name__)

BUILTIN_SCHEMA_DIR = os.path.join(os.path.dirname(__file__), "providers")

CONSTRAINT_KEYS = {
    "min_length", "max_length", "pattern", "min_value",
    "max_value", "enum", "prefix", "cidr_version",
}


def _parse_field_type(raw: str, where: str) -> FieldType:
    try:
        return FieldType(raw)
    except ValueError:
        raise SchemaRegistrationError(f"unknown field type '{raw}' in {where}")


def _parse_constraints(raw: Optional[Dict[str, Any]], where: str) -> Optional[FieldConstraint]:
    if not raw:
        return None
    unknown = set(raw) - CONSTRAINT_KEYS
    if unknown:
        raise SchemaRegistrationError(f"unknown constraint(s) {sorted(unknown)} in {where}")
    return FieldConstraint(
        min_length=raw.get("min_length"),
        max_length=raw.get("max_length"),
        pattern=raw.get("pattern"),
        min_value=raw.get("min_value"),
        max_value=raw.get("max_value"),
        enum=[str(v) for v in raw.get("enum", [])],
        prefix=raw.get("prefix"),
        cidr_version=raw.get("cidr_version"),
    )


def _parse_field(raw: Dict[str, Any], where: str) -> FieldSpec:
    name = raw.get("name")
    if not name:
        raise SchemaRegistrationError(f"field without a name in {where}")
    field_where = f"{where}.{name}"
    item_type = raw.get("item_type")
    return FieldSpec(
        name=name,
        type=_parse_field_type(raw.get("type", "any"), field_where),
        required=bool(raw.get("required", False)),
        description=raw.get("description", ""),
        default=raw.get("default"),
        constraints=_parse_constraints(raw.get("constraints"), field_where),
        item_type=_parse_field_type(item_type, field_where) if item_type else None,
    )


def parse_provider_document(data: Dict[str, Any], source: str = "<memory>") -> List[ResourceSchema]:
    """Build ResourceSchema objects from a parsed provider document."""
    provider = (data or {}).get("provider")
    if not provider:
        raise SchemaRegistrationError(f"provider is required in {source}")

    schemas = []
    for entry in data.get("schemas", []):
        resource_type = entry.get("resource_type", "")
        where = f"{source}:{resource_type or '?'}"
        schemas.append(
            ResourceSchema(
                resource_type=resource_type,
                provider=provider,
                category=entry.get("category", ""),
                description=entry.get("description", ""),
                fields=[_parse_field(f, where) for f in entry.get("fields", [])],
                valid_parent_types=[t.lower() for t in entry.get("valid_parent_types", [])],
                valid_child_types=[t.lower() for t in entry.get("valid_child_types", [])],
            )
        )
    return schemas


def load_schema_file(path: str) -> List[ResourceSchema]:
    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SchemaRegistrationError(f"invalid schema file {path}: {e}") from e
    schemas = parse_provider_document(data, source=os.path.basename(path))
    logger.debug("[SchemaLoader] Loaded %d schemas from %s", len(schemas), path)
    return schemas


def load_provider_schemas(provider: str, schema_dir: Optional[str] = None) -> List[ResourceSchema]:
    """Load the schemas of one provider, or an empty list if none ship."""
    path = os.path.join(schema_dir or BUILTIN_SCHEMA_DIR, f"{provider}.yaml")
    if not os.path.exists(path):
        logger.info("[SchemaLoader] No schemas found for provider %s", provider)
        return []
    return load_schema_file(path)


def _schema_files(schema_dir: str) -> List[str]:
    if not os.path.isdir(schema_dir):
        return []
    return sorted(
        os.path.join(schema_dir, name)
        for name in os.listdir(schema_dir)
        if name.endswith((".yaml", ".yml"))
    )


def register_builtin_schemas(registry) -> int:
    """
    Register every shipped provider file, then the files from
    INFRAGRAPH_SCHEMA_DIR (which may override built-in entries).
    """
    count = 0
    directories = [BUILTIN_SCHEMA_DIR]
    if config.SCHEMA_DIR:
        directories.append(config.SCHEMA_DIR)

    for directory in directories:
        for path in _schema_files(directory):
            schemas = load_schema_file(path)
            registry.register_all(schemas)
            count += len(schemas)
    return count
