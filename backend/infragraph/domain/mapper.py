"""
Architecture Mapper - NormalizedGraph -> Architecture.

A provider may register its own ArchitectureGenerator, which then fully
replaces the default translation below.

Default translation:
- region nodes become project-level config (Architecture.region)
- visual-only nodes are dropped
- every other node becomes one Resource with the node's id
- a node whose type cannot be resolved aborts the whole mapping
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from infragraph.diagram.graph import Node, NormalizedGraph
from infragraph.domain.architecture import Architecture
from infragraph.domain.resource import CloudProvider, Resource
from infragraph.domain.type_mapper import as_provider, resolve_resource_type
from infragraph.errors import GraphRequiredError

logger = logging.getLogger(__name__)

UNNAMED_RESOURCE = "unnamed-resource"


class ArchitectureGenerator(ABC):
    """Provider-specific graph -> architecture translation."""

    @property
    @abstractmethod
    def provider(self) -> CloudProvider:
        ...

    @abstractmethod
    def generate(self, graph: NormalizedGraph) -> Architecture:
        ...


_generators: Dict[CloudProvider, ArchitectureGenerator] = {}


def register_generator(generator: ArchitectureGenerator) -> None:
    if generator is None:
        raise ValueError("architecture generator cannot be None")
    _generators[generator.provider] = generator


def get_generator(provider: Union[CloudProvider, str]) -> Optional[ArchitectureGenerator]:
    return _generators.get(as_provider(provider))


def unregister_generator(provider: Union[CloudProvider, str]) -> None:
    _generators.pop(as_provider(provider), None)


def map_diagram_to_architecture(graph: NormalizedGraph,
                                provider: Union[CloudProvider, str] = CloudProvider.AWS) -> Architecture:
    if graph is None:
        raise GraphRequiredError()
    cloud = as_provider(provider)

    generator = _generators.get(cloud)
    if generator is not None:
        logger.info("[MAPPER] Using %s generator", cloud.value)
        return generator.generate(graph)

    return _map_default(graph, cloud)


def _resource_name(node: Node) -> str:
    name = (node.config or {}).get("name")
    if isinstance(name, str) and name:
        return name
    return node.label or UNNAMED_RESOURCE


def _region_name(graph: NormalizedGraph) -> str:
    region = graph.find_region_node()
    if region is None:
        return ""
    name = (region.config or {}).get("name")
    return name if isinstance(name, str) else ""


def _metadata(node: Node) -> Dict[str, Any]:
    metadata = dict(node.config or {})
    metadata["position"] = {"x": node.position_x, "y": node.position_y}
    metadata["isVisualOnly"] = node.is_visual_only
    return metadata


def _map_default(graph: NormalizedGraph, provider: CloudProvider) -> Architecture:
    architecture = Architecture(
        provider=provider,
        region=_region_name(graph),
        variables=list(graph.variables),
        outputs=list(graph.outputs),
    )

    # first pass: every mappable node, so parent lookups do not depend on order
    mapped: Dict[str, str] = {
        node.id: node.id
        for node in graph.nodes.values()
        if not node.is_region() and not node.is_visual_only
    }

    dependency_edges = graph.dependency_edges()

    for node in graph.nodes.values():
        if node.id not in mapped:
            continue

        resource_type = resolve_resource_type(node.resource_type, provider, node.id)

        parent_id = None
        parent = graph.get_parent(node.id)
        if parent is not None and not parent.is_region():
            parent_id = mapped.get(parent.id)

        depends_on: List[str] = [
            mapped[edge.target]
            for edge in dependency_edges
            if edge.source == node.id and edge.target in mapped
        ]

        architecture.resources.append(
            Resource(
                id=mapped[node.id],
                name=_resource_name(node),
                type=resource_type,
                provider=provider,
                region=architecture.region,
                parent_id=parent_id,
                depends_on=depends_on,
                metadata=_metadata(node),
            )
        )

    for resource in architecture.resources:
        if resource.parent_id:
            architecture.containments.setdefault(resource.parent_id, []).append(resource.id)
        if resource.depends_on:
            architecture.dependencies[resource.id] = list(resource.depends_on)

    logger.info(
        "[MAPPER] Mapped %d nodes to %d %s resources (region=%s)",
        len(graph.nodes), len(architecture.resources), provider.value, architecture.region or "-",
    )
    return architecture
