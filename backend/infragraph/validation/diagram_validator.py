"""
Diagram Validator - Gates a NormalizedGraph before it is compiled.

Catches issues like:
- Nodes whose parent does not exist
- Containment and dependency cycles
- Edges pointing at unknown nodes
- Unknown or missing resource types
- Config that does not match the provider schema
- Subnet CIDRs outside their VPC or overlapping each other

Every pass runs; issues accumulate and nothing is raised for a finding.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from infragraph import config
from infragraph.diagram.graph import Node, NormalizedGraph
from infragraph.errors import DiagramValidationError, GraphRequiredError
from infragraph.schema.registry import SchemaRegistry, get_schema_registry
from infragraph.schema.types import FieldConstraint, FieldSpec, FieldType
from infragraph.validation.cidr import cidr_overlaps, cidr_within, parse_cidr

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    ERROR = "error"      # Blocks compilation
    WARNING = "warning"  # Reported, never affects validity


@dataclass
class ValidationIssue:
    """A single validation issue found in the graph"""
    code: str           # Machine-readable issue code
    message: str        # Human-readable description
    node_id: Optional[str] = None
    severity: ValidationSeverity = ValidationSeverity.ERROR

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
        }


@dataclass
class ValidationResult:
    """Errors and warnings, each in the order they were found"""
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, code: str, message: str, node_id: Optional[str] = None) -> None:
        self.errors.append(ValidationIssue(code, message, node_id, ValidationSeverity.ERROR))

    def add_warning(self, code: str, message: str, node_id: Optional[str] = None) -> None:
        self.warnings.append(ValidationIssue(code, message, node_id, ValidationSeverity.WARNING))

    def error_codes(self) -> List[str]:
        return [e.code for e in self.errors]

    def warning_codes(self) -> List[str]:
        return [w.code for w in self.warnings]

    def to_dict(self) -> dict:
        return {
            "valid": self.is_valid,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }

    def summary(self) -> str:
        status = "Valid" if self.is_valid else "Invalid"
        return f"{status} | Errors: {len(self.errors)}, Warnings: {len(self.warnings)}"


@dataclass
class ValidationOptions:
    # Known IR types (lower case). None or empty skips the type-existence check.
    valid_resource_types: Optional[Set[str]] = None
    provider: str = ""
    schema_registry: Optional[SchemaRegistry] = None

    def resolved_provider(self) -> str:
        return (self.provider or config.DEFAULT_PROVIDER).lower()


def _find_cycle(start: str, neighbors: Callable[[str], Iterable[str]],
                visited: Set[str], on_stack: Set[str]) -> Optional[str]:
    """
    Depth-first walk from start. Returns the first node reached again
    while still on the current path, or None.

    Nodes on the path at the moment a cycle is found stay in on_stack.
    """
    visited.add(start)
    on_stack.add(start)
    stack = [(start, iter(neighbors(start)))]

    while stack:
        node, pending = stack[-1]
        descended = False
        for nxt in pending:
            if nxt not in visited:
                visited.add(nxt)
                on_stack.add(nxt)
                stack.append((nxt, iter(neighbors(nxt))))
                descended = True
                break
            if nxt in on_stack:
                return nxt
        if not descended:
            stack.pop()
            on_stack.discard(node)
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _matches_type(value: Any, expected: FieldType) -> bool:
    if value is None:
        return False
    if expected in (FieldType.STRING, FieldType.CIDR):
        return isinstance(value, str)
    if expected == FieldType.INT:
        if isinstance(value, float):
            return value.is_integer()
        return _is_number(value)
    if expected == FieldType.FLOAT:
        return _is_number(value)
    if expected == FieldType.BOOL:
        return isinstance(value, bool)
    if expected == FieldType.ARRAY:
        return isinstance(value, (list, tuple))
    if expected == FieldType.OBJECT:
        return isinstance(value, dict)
    return expected == FieldType.ANY


class DiagramValidator:
    """
    Validates a NormalizedGraph for structure, schema and CIDR rules.

    Usage:
        validator = DiagramValidator(ValidationOptions(provider="aws"))
        result = validator.validate(graph)

        if not result.is_valid:
            for issue in result.errors:
                print(f"[{issue.code}] {issue.message}")
    """

    def __init__(self, options: Optional[ValidationOptions] = None):
        self.options = options or ValidationOptions()
        self._registry = self.options.schema_registry

    @property
    def provider(self) -> str:
        return self.options.resolved_provider()

    @property
    def registry(self) -> SchemaRegistry:
        if self._registry is None:
            self._registry = get_schema_registry()
        return self._registry

    def validate(self, graph: NormalizedGraph) -> ValidationResult:
        """Run every pass over the graph."""
        if graph is None:
            raise GraphRequiredError()

        result = ValidationResult()

        self._check_missing_parents(graph, result)
        self._check_containment_cycles(graph, result)
        self._check_edge_references(graph, result)
        self._check_dependency_edges(graph, result)
        self._check_resource_types(graph, result)
        self._check_region(graph, result)
        self._check_config_schemas(graph, result)
        self._check_cidrs(graph, result)
        self._check_containment_types(graph, result)

        logger.info(
            "[VALIDATOR] %d nodes, %d edges: %s",
            len(graph.nodes), len(graph.edges), result.summary(),
        )
        return result

    def _check_missing_parents(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        for node in graph.nodes.values():
            if node.parent_id is not None and not graph.has_node(node.parent_id):
                result.add_error(
                    "MISSING_PARENT",
                    f"Node {node.id} references non-existent parent {node.parent_id}",
                    node.id,
                )

    def _check_containment_cycles(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        tree = graph.build_containment_tree()

        def children(node_id: str) -> List[str]:
            return [child.id for child in tree.get(node_id, [])]

        visited: Set[str] = set()
        on_stack: Set[str] = set()
        for node_id in graph.nodes:
            if node_id in visited:
                continue
            repeated = _find_cycle(node_id, children, visited, on_stack)
            if repeated is not None:
                result.add_error(
                    "CONTAINMENT_CYCLE",
                    f"Containment cycle detected at node {repeated}",
                    repeated,
                )

    def _check_edge_references(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        for edge in graph.edges:
            if not graph.has_node(edge.source):
                result.add_error(
                    "INVALID_EDGE_SOURCE",
                    f"Edge {edge.id} references non-existent source node {edge.source}",
                )
            if not graph.has_node(edge.target):
                result.add_error(
                    "INVALID_EDGE_TARGET",
                    f"Edge {edge.id} references non-existent target node {edge.target}",
                )

    def _check_dependency_edges(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        adjacency: Dict[str, List[str]] = {}

        for edge in graph.dependency_edges():
            if not edge.source or not edge.target:
                result.add_error(
                    "DEPENDENCY_INVALID_ENDPOINT",
                    f"Dependency edge {edge.id} has empty source or target",
                )
                continue
            if edge.source == edge.target:
                result.add_error(
                    "DEPENDENCY_SELF_LOOP",
                    f"Node {edge.source} cannot depend on itself",
                    edge.source,
                )
                continue

            source = graph.get_node(edge.source)
            target = graph.get_node(edge.target)
            if source is None or target is None:
                # reported by the edge reference pass
                continue
            if not source.is_resource() or not target.is_resource():
                result.add_warning(
                    "DEPENDENCY_NON_RESOURCE",
                    f"Dependency edge {edge.id} connects non-resource nodes",
                )
            adjacency.setdefault(edge.source, []).append(edge.target)

        visited: Set[str] = set()
        on_stack: Set[str] = set()
        for node_id in list(adjacency):
            if node_id in visited:
                continue
            repeated = _find_cycle(node_id, lambda n: adjacency.get(n, []), visited, on_stack)
            if repeated is not None:
                result.add_error(
                    "DEPENDENCY_CYCLE",
                    f"Dependency cycle detected involving node {repeated}",
                    repeated,
                )
                break

    def _check_resource_types(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        known = self.options.valid_resource_types
        if not known:
            return
        known = {t.lower() for t in known}

        for node in graph.nodes.values():
            if not node.resource_type:
                result.add_error(
                    "MISSING_RESOURCE_TYPE",
                    f"Node {node.id} has no resource type",
                    node.id,
                )
                continue
            if node.resource_type.lower() not in known:
                result.add_warning(
                    "UNKNOWN_RESOURCE_TYPE",
                    f"Node {node.id} has unknown resource type '{node.resource_type}' "
                    f"for provider '{self.provider}'",
                    node.id,
                )

    def _check_region(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        regions = graph.region_nodes()
        if not regions:
            result.add_warning("NO_REGION_NODE", "Diagram has no region node")
        elif len(regions) > 1:
            result.add_warning(
                "MULTIPLE_REGION_NODES",
                f"Diagram has {len(regions)} region nodes, expected exactly one",
            )

    # --- schema-driven config checks ---

    def _check_config_schemas(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        provider = self.provider
        for node in graph.nodes.values():
            if node.config is None:
                node.config = {}
            schema = self.registry.get(node.resource_type, provider)
            if schema is None:
                continue
            for spec in schema.fields:
                self._check_field(node, spec, result)

    def _check_field(self, node: Node, spec: FieldSpec, result: ValidationResult) -> None:
        if spec.name not in node.config:
            if spec.required:
                result.add_error(
                    "CONFIG_MISSING_FIELD",
                    f"Node {node.id} ({node.resource_type}) is missing required field '{spec.name}'",
                    node.id,
                )
            return

        value = node.config[spec.name]
        if not _matches_type(value, spec.type):
            result.add_error(
                "CONFIG_INVALID_TYPE",
                f"Node {node.id} field '{spec.name}' must be of type {spec.type.value}",
                node.id,
            )
            return

        if spec.type == FieldType.CIDR and parse_cidr(value) is None:
            result.add_error(
                "CONFIG_INVALID_CIDR",
                f"Node {node.id} field '{spec.name}' has invalid CIDR '{value}'",
                node.id,
            )
            return

        if spec.constraints is None:
            return
        for violation in self._constraint_violations(value, spec):
            result.add_error(
                "CONFIG_CONSTRAINT_VIOLATION",
                f"Node {node.id} field '{spec.name}' {violation}",
                node.id,
            )

    def _constraint_violations(self, value: Any, spec: FieldSpec) -> List[str]:
        c: FieldConstraint = spec.constraints
        violations = []

        if isinstance(value, str):
            if c.min_length is not None and len(value) < c.min_length:
                violations.append(f"must be at least {c.min_length} characters")
            if c.max_length is not None and len(value) > c.max_length:
                violations.append(f"must be at most {c.max_length} characters")
            if c.pattern:
                try:
                    if re.search(c.pattern, value) is None:
                        violations.append(f"must match pattern {c.pattern}")
                except re.error:
                    violations.append(f"has an invalid pattern {c.pattern}")
            if c.prefix and not value.startswith(c.prefix):
                violations.append(f"must start with '{c.prefix}'")
            if c.enum and value not in c.enum:
                violations.append(f"must be one of {c.enum}")
            if spec.type == FieldType.CIDR and c.cidr_version:
                network = parse_cidr(value)
                if f"ipv{network.version}" != c.cidr_version.lower():
                    violations.append(f"must be an {c.cidr_version} CIDR")

        elif _is_number(value):
            if c.min_value is not None and value < c.min_value:
                violations.append(f"must be >= {c.min_value:g}")
            if c.max_value is not None and value > c.max_value:
                violations.append(f"must be <= {c.max_value:g}")

        return violations

    # --- network checks ---

    def _check_cidrs(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        vpc_networks = {}
        for node in graph.nodes.values():
            if node.resource_type.lower() != "vpc":
                continue
            cidr = (node.config or {}).get("cidr")
            if not isinstance(cidr, str) or not cidr:
                continue
            network = parse_cidr(cidr)
            if network is None:
                result.add_error("CIDR_INVALID", f"VPC {node.id} has invalid CIDR '{cidr}'", node.id)
                continue
            vpc_networks[node.id] = network

        # subnets grouped by their direct VPC parent, "" when there is none
        groups: Dict[str, List[tuple]] = {}
        for node in graph.nodes.values():
            if node.resource_type.lower() != "subnet":
                continue
            cidr = (node.config or {}).get("cidr")
            if not isinstance(cidr, str) or not cidr:
                continue
            network = parse_cidr(cidr)
            if network is None:
                result.add_error("CIDR_INVALID", f"Subnet {node.id} has invalid CIDR '{cidr}'", node.id)
                continue

            vpc_id = ""
            parent = graph.get_parent(node.id)
            if parent is not None and parent.resource_type.lower() == "vpc":
                vpc_id = parent.id
                vpc_network = vpc_networks.get(vpc_id)
                if vpc_network is not None and not cidr_within(vpc_network, network):
                    result.add_error(
                        "CIDR_OUTSIDE_VPC",
                        f"Subnet {node.id} CIDR {cidr} is not within VPC {vpc_id} CIDR {vpc_network}",
                        node.id,
                    )
            groups.setdefault(vpc_id, []).append((node.id, cidr, network))

        for subnets in groups.values():
            for i, (first_id, first_cidr, first_net) in enumerate(subnets):
                for second_id, second_cidr, second_net in subnets[i + 1:]:
                    if cidr_overlaps(first_net, second_net):
                        result.add_error(
                            "CIDR_OVERLAP",
                            f"Subnet CIDRs overlap: {first_id} ({first_cidr}) and {second_id} ({second_cidr})",
                            second_id,
                        )

    def _check_containment_types(self, graph: NormalizedGraph, result: ValidationResult) -> None:
        provider = self.provider
        for node in graph.nodes.values():
            if node.parent_id is None:
                continue
            parent = graph.get_node(node.parent_id)
            if parent is None:
                continue
            schema = self.registry.get(node.resource_type, provider)
            if schema is None or not schema.valid_parent_types:
                continue
            if parent.resource_type.lower() not in schema.valid_parent_types:
                result.add_warning(
                    "INVALID_CONTAINMENT",
                    f"{node.resource_type} ({node.id}) cannot be placed inside "
                    f"{parent.resource_type} ({parent.id})",
                    node.id,
                )


def validate(graph: NormalizedGraph, options: Optional[ValidationOptions] = None) -> ValidationResult:
    """Convenience function to validate a graph."""
    return DiagramValidator(options).validate(graph)


def raise_on_errors(graph: NormalizedGraph, options: Optional[ValidationOptions] = None) -> ValidationResult:
    """Validate the graph and raise DiagramValidationError if errors were found."""
    result = validate(graph, options)
    if not result.is_valid:
        raise DiagramValidationError(result)
    return result
