from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


NODE_KIND_CONTAINER = "container"
NODE_KIND_RESOURCE = "resource"

EDGE_KIND_CONTAINMENT = "containment"
EDGE_KIND_DEPENDENCY = "dependency"
EDGE_KIND_REFERENCE = "reference"

REGION_TYPE = "region"


@dataclass
class Node:
    id: str
    kind: str = NODE_KIND_RESOURCE          # container | resource
    resource_type: str = ""                 # IR type tag, e.g. "vpc"
    label: str = ""
    config: Optional[Dict[str, Any]] = field(default_factory=dict)
    position_x: float = 0
    position_y: float = 0
    parent_id: Optional[str] = None         # None = root
    is_visual_only: bool = False

    def is_region(self) -> bool:
        return (self.resource_type or "").lower() == REGION_TYPE

    def is_container(self) -> bool:
        return self.kind == NODE_KIND_CONTAINER

    def is_resource(self) -> bool:
        return self.kind == NODE_KIND_RESOURCE


@dataclass
class Edge:
    source: str
    target: str
    kind: str = EDGE_KIND_DEPENDENCY        # containment | dependency | reference
    id: str = ""
    config: Dict[str, Any] = field(default_factory=dict)

    def is_containment(self) -> bool:
        return self.kind == EDGE_KIND_CONTAINMENT

    def is_dependency(self) -> bool:
        return self.kind == EDGE_KIND_DEPENDENCY


@dataclass
class Variable:
    name: str
    type: str = "string"                    # e.g. "string", "number", "list(string)"
    description: str = ""
    default: Any = None
    sensitive: bool = False


@dataclass
class Output:
    name: str
    value: str = ""                         # expression like "aws_vpc.main.id"
    description: str = ""
    sensitive: bool = False


@dataclass
class Policy:
    edge_id: str
    source_id: str = ""
    target_id: str = ""
    source_type: str = ""
    target_type: str = ""
    role: str = ""
    policy_template_id: str = ""
    policy_document: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NormalizedGraph:
    """
    Identifier-keyed view over a diagram.

    Lookups return None when an id is unknown; callers check explicitly.
    Nothing here mutates the graph.
    """
    nodes: Dict[str, Node] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    outputs: List[Output] = field(default_factory=list)
    policies: List[Policy] = field(default_factory=list)

    def add_node(self, node: Node) -> None:
        self.nodes[node.id] = node

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    def get_children(self, parent_id: str) -> List[Node]:
        return [n for n in self.nodes.values() if n.parent_id is not None and n.parent_id == parent_id]

    def get_parent(self, child_id: str) -> Optional[Node]:
        child = self.nodes.get(child_id)
        if child is None or child.parent_id is None:
            return None
        return self.nodes.get(child.parent_id)

    def containment_edges(self) -> List[Edge]:
        return [e for e in self.edges if e.is_containment()]

    def dependency_edges(self) -> List[Edge]:
        return [e for e in self.edges if e.is_dependency()]

    def build_containment_tree(self) -> Dict[str, List[Node]]:
        """Map of parent id -> child nodes, built in one pass."""
        tree: Dict[str, List[Node]] = {}
        for node in self.nodes.values():
            if node.parent_id is not None:
                tree.setdefault(node.parent_id, []).append(node)
        return tree

    def root_nodes(self) -> List[Node]:
        return [n for n in self.nodes.values() if n.parent_id is None]

    def region_nodes(self) -> List[Node]:
        return [n for n in self.nodes.values() if n.is_region()]

    def find_region_node(self) -> Optional[Node]:
        for node in self.nodes.values():
            if node.is_region():
                return node
        return None
