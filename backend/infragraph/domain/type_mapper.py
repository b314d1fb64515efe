"""
IR type -> ResourceType resolution.

Each provider may register a ResourceTypeMapper that knows its aliases
and naming. Lookups fall back to the static table below, keyed by
provider and lower-case IR type.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional, Union

from infragraph.domain.resource import CloudProvider, ResourceCategory, ResourceType
from infragraph.errors import ResourceTypeResolutionError, UnsupportedProviderError

logger = logging.getLogger(__name__)


def _rt(type_id, name, category, kind, regional=True):
    return ResourceType(
        id=type_id,
        name=name,
        category=category,
        kind=kind,
        is_regional=regional,
        is_global=not regional,
    )


_NET = ResourceCategory.NETWORKING
_COMPUTE = ResourceCategory.COMPUTE
_STORAGE = ResourceCategory.STORAGE
_DB = ResourceCategory.DATABASE
_IAM = ResourceCategory.IAM

STATIC_RESOURCE_TYPES: Dict[CloudProvider, Dict[str, ResourceType]] = {
    CloudProvider.AWS: {
        rt.id: rt
        for rt in [
            _rt("vpc", "VPC", _NET, "Network"),
            _rt("subnet", "Subnet", _NET, "Network"),
            _rt("route-table", "RouteTable", _NET, "Network"),
            _rt("security-group", "SecurityGroup", _NET, "Network"),
            _rt("nat-gateway", "NATGateway", _NET, "Gateway"),
            _rt("internet-gateway", "InternetGateway", _NET, "Gateway"),
            _rt("elastic-ip", "ElasticIP", _NET, "Network"),
            _rt("ec2", "EC2", _COMPUTE, "VirtualMachine"),
            _rt("lambda", "Lambda", _COMPUTE, "Function"),
            _rt("load-balancer", "LoadBalancer", _COMPUTE, "LoadBalancer"),
            _rt("auto-scaling-group", "AutoScalingGroup", _COMPUTE, "VirtualMachine"),
            _rt("s3", "S3", _STORAGE, "Storage", regional=False),
            _rt("ebs", "EBS", _STORAGE, "Storage"),
            _rt("rds", "RDS", _DB, "Database"),
            _rt("dynamodb", "DynamoDB", _DB, "Database"),
            _rt("iam-policy", "IAMPolicy", _IAM, "Policy", regional=False),
            _rt("iam-user", "IAMUser", _IAM, "User", regional=False),
            _rt("iam-role", "IAMRole", _IAM, "Role", regional=False),
            _rt("iam-role-policy-attachment", "IAMRolePolicyAttachment", _IAM, "Attachment", regional=False),
        ]
    },
}


class ResourceTypeMapper(ABC):
    """Provider-specific IR type resolution."""

    @abstractmethod
    def map_ir_type(self, ir_type: str) -> Optional[ResourceType]:
        """Return the ResourceType for ir_type, or None if unknown."""


_mappers: Dict[CloudProvider, ResourceTypeMapper] = {}
_mappers_lock = threading.Lock()
_defaults_loaded = False


def as_provider(provider: Union[CloudProvider, str]) -> CloudProvider:
    if isinstance(provider, CloudProvider):
        return provider
    try:
        return CloudProvider((provider or "").lower())
    except ValueError:
        raise UnsupportedProviderError(provider)


def _ensure_default_mappers() -> None:
    global _defaults_loaded
    if _defaults_loaded:
        return
    with _mappers_lock:
        if _defaults_loaded:
            return
        from infragraph.providers import default_mappers

        _mappers.update(default_mappers())
        # set last: a caller that sees the flag must also see the mappers
        _defaults_loaded = True
        logger.debug("[MAPPER] Registered default resource type mappers")


def register_resource_type_mapper(provider: Union[CloudProvider, str], mapper: ResourceTypeMapper) -> None:
    """Register (or replace) the mapper of a provider. Built-in mappers load first."""
    if mapper is None:
        raise ValueError("resource type mapper cannot be None")
    cloud = as_provider(provider)
    _ensure_default_mappers()
    with _mappers_lock:
        _mappers[cloud] = mapper


def get_resource_type_mapper(provider: Union[CloudProvider, str]) -> Optional[ResourceTypeMapper]:
    _ensure_default_mappers()
    return _mappers.get(as_provider(provider))


def resolve_resource_type(ir_type: str, provider: Union[CloudProvider, str],
                          node_id: Optional[str] = None) -> ResourceType:
    """
    Dynamic mapper first, then the static table.

    Raises ResourceTypeResolutionError when neither knows ir_type.
    """
    cloud = as_provider(provider)

    mapper = get_resource_type_mapper(cloud)
    if mapper is not None:
        resolved = mapper.map_ir_type(ir_type)
        if resolved is not None:
            return resolved

    resolved = STATIC_RESOURCE_TYPES.get(cloud, {}).get((ir_type or "").lower())
    if resolved is not None:
        return resolved

    logger.debug("[MAPPER] No resource type for '%s' (%s)", ir_type, cloud.value)
    raise ResourceTypeResolutionError(ir_type, cloud.value, node_id)
