from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class FieldType(Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    CIDR = "cidr"
    ARRAY = "array"
    OBJECT = "object"
    ANY = "any"


@dataclass
class FieldConstraint:
    min_length: Optional[int] = None        # strings
    max_length: Optional[int] = None        # strings
    pattern: Optional[str] = None           # regex
    min_value: Optional[float] = None       # numbers
    max_value: Optional[float] = None       # numbers
    enum: List[str] = field(default_factory=list)
    prefix: Optional[str] = None            # e.g. "ami-"
    cidr_version: Optional[str] = None      # "ipv4" | "ipv6"


@dataclass
class FieldSpec:
    name: str
    type: FieldType
    required: bool = False
    description: str = ""
    default: Any = None
    constraints: Optional[FieldConstraint] = None
    item_type: Optional[FieldType] = None   # arrays only


@dataclass
class ResourceSchema:
    """Config schema for one resource type of one provider."""
    resource_type: str                      # e.g. "vpc", "ec2", "subnet"
    provider: str                           # e.g. "aws"
    category: str = ""                      # e.g. "networking"
    description: str = ""
    fields: List[FieldSpec] = field(default_factory=list)
    valid_parent_types: List[str] = field(default_factory=list)
    valid_child_types: List[str] = field(default_factory=list)

    def required_fields(self) -> List[FieldSpec]:
        return [f for f in self.fields if f.required]

    def get_field(self, name: str) -> Optional[FieldSpec]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def has_field(self, name: str) -> bool:
        return self.get_field(name) is not None
