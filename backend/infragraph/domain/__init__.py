from infragraph.domain.architecture import Architecture, ArchitectureGraph
from infragraph.domain.mapper import (
    ArchitectureGenerator,
    get_generator,
    map_diagram_to_architecture,
    register_generator,
)
from infragraph.domain.resource import CloudProvider, Resource, ResourceCategory, ResourceType
from infragraph.domain.toposort import TopologicalSortResult, get_sorted_resources, topological_sort
from infragraph.domain.type_mapper import (
    ResourceTypeMapper,
    get_resource_type_mapper,
    register_resource_type_mapper,
    resolve_resource_type,
)

__all__ = [
    "Architecture",
    "ArchitectureGenerator",
    "ArchitectureGraph",
    "CloudProvider",
    "Resource",
    "ResourceCategory",
    "ResourceType",
    "ResourceTypeMapper",
    "TopologicalSortResult",
    "get_generator",
    "get_resource_type_mapper",
    "get_sorted_resources",
    "map_diagram_to_architecture",
    "register_generator",
    "register_resource_type_mapper",
    "resolve_resource_type",
    "topological_sort",
]
