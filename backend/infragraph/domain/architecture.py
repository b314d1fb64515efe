"""
Architecture - the provider-level aggregate produced from a diagram.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from infragraph.diagram.graph import Output, Variable
from infragraph.domain.resource import CloudProvider, Resource


@dataclass
class Architecture:
    resources: List[Resource] = field(default_factory=list)
    region: str = ""
    provider: CloudProvider = CloudProvider.AWS
    # parent id -> child ids
    containments: Dict[str, List[str]] = field(default_factory=dict)
    # resource id -> ids it depends on
    dependencies: Dict[str, List[str]] = field(default_factory=dict)
    variables: List[Variable] = field(default_factory=list)
    outputs: List[Output] = field(default_factory=list)

    def get_resource(self, resource_id: str) -> Optional[Resource]:
        for resource in self.resources:
            if resource.id == resource_id:
                return resource
        return None

    def resource_ids(self) -> List[str]:
        return [r.id for r in self.resources]


class ArchitectureGraph:
    """
    Read-only query view over an Architecture.

    Indexes are built once; the architecture must not be mutated while
    a view is in use.
    """

    def __init__(self, architecture: Architecture):
        self.architecture = architecture
        self._by_id: Dict[str, Resource] = {r.id: r for r in architecture.resources}
        self._parent_of: Dict[str, str] = {}
        for parent_id, child_ids in architecture.containments.items():
            for child_id in child_ids:
                self._parent_of[child_id] = parent_id
        for resource in architecture.resources:
            if resource.parent_id and resource.id not in self._parent_of:
                self._parent_of[resource.id] = resource.parent_id

    def get_resource(self, resource_id: str) -> Optional[Resource]:
        return self._by_id.get(resource_id)

    def get_parent(self, resource_id: str) -> Optional[Resource]:
        parent_id = self._parent_of.get(resource_id)
        return self._by_id.get(parent_id) if parent_id else None

    def get_children(self, resource_id: str) -> List[Resource]:
        return [
            r for r in self.architecture.resources
            if self._parent_of.get(r.id) == resource_id
        ]

    def get_dependencies(self, resource_id: str) -> List[Resource]:
        ids = self.architecture.dependencies.get(resource_id, [])
        return [self._by_id[i] for i in ids if i in self._by_id]

    def get_dependents(self, resource_id: str) -> List[Resource]:
        return [
            self._by_id[rid]
            for rid, deps in self.architecture.dependencies.items()
            if resource_id in deps and rid in self._by_id
        ]

    def roots(self) -> List[Resource]:
        return [r for r in self.architecture.resources if self.get_parent(r.id) is None]

    def containment_tree(self) -> Dict[str, List[str]]:
        tree: Dict[str, List[str]] = {}
        for resource in self.architecture.resources:
            parent_id = self._parent_of.get(resource.id)
            if parent_id:
                tree.setdefault(parent_id, []).append(resource.id)
        return tree
