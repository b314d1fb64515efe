from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class CloudProvider(Enum):
    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"


class ResourceCategory(Enum):
    """Broad grouping used by generators and pricing"""
    NETWORKING = "Networking"
    COMPUTE = "Compute"
    STORAGE = "Storage"
    DATABASE = "Database"
    IAM = "IAM"


@dataclass(frozen=True)
class ResourceType:
    """
    Cloud-level resource type an IR type maps to.

    Immutable so instances can be shared by mapping tables and resources.
    """
    id: str                         # e.g. "vpc", "nat-gateway"
    name: str                       # e.g. "VPC", "NATGateway"
    category: ResourceCategory
    kind: str                       # e.g. "Network", "VirtualMachine"
    is_regional: bool = True
    is_global: bool = False


@dataclass
class Resource:
    """One architecture resource, derived from a diagram node."""
    id: str
    name: str
    type: ResourceType
    provider: CloudProvider
    region: str = ""
    parent_id: Optional[str] = None
    depends_on: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
