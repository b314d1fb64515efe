"""
Provider-specific plug-ins.
"""

from typing import Dict

from infragraph.domain.resource import CloudProvider
from infragraph.domain.type_mapper import ResourceTypeMapper


def default_mappers() -> Dict[CloudProvider, ResourceTypeMapper]:
    """Resource type mappers shipped with the package, keyed by provider."""
    from infragraph.providers.aws import AWSResourceTypeMapper

    return {CloudProvider.AWS: AWSResourceTypeMapper()}
