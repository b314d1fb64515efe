from infragraph.schema.loader import load_provider_schemas, parse_provider_document
from infragraph.schema.registry import SchemaRegistry, get_schema_registry
from infragraph.schema.types import FieldConstraint, FieldSpec, FieldType, ResourceSchema

__all__ = [
    "FieldConstraint",
    "FieldSpec",
    "FieldType",
    "ResourceSchema",
    "SchemaRegistry",
    "get_schema_registry",
    "load_provider_schemas",
    "parse_provider_document",
]
