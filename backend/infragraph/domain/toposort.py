"""
Provisioning order for an Architecture (Kahn's algorithm).

Edges combine explicit dependencies (dependency -> dependent) and
containment (parent -> child), so a resource is always placed after
everything it depends on and after its container.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List

from infragraph.domain.architecture import Architecture
from infragraph.domain.resource import Resource
from infragraph.errors import ArchitectureRequiredError, DependencyCycleError

logger = logging.getLogger(__name__)


@dataclass
class TopologicalSortResult:
    resources: List[Resource] = field(default_factory=list)   # dependencies first
    levels: List[List[str]] = field(default_factory=list)     # ids per dependency level
    has_cycle: bool = False
    cycle_info: List[str] = field(default_factory=list)       # ids left unprocessed

    def sorted_ids(self) -> List[str]:
        return [r.id for r in self.resources]

    def to_dict(self) -> dict:
        return {
            "order": self.sorted_ids(),
            "levels": [list(level) for level in self.levels],
            "has_cycle": self.has_cycle,
            "cycle_info": list(self.cycle_info),
        }


def topological_sort(architecture: Architecture) -> TopologicalSortResult:
    if architecture is None:
        raise ArchitectureRequiredError()

    by_id: Dict[str, Resource] = {}
    for resource in architecture.resources:
        by_id.setdefault(resource.id, resource)

    if not by_id:
        return TopologicalSortResult()

    adjacency: Dict[str, List[str]] = {rid: [] for rid in by_id}
    in_degree: Dict[str, int] = {rid: 0 for rid in by_id}

    for resource_id, dep_ids in architecture.dependencies.items():
        if resource_id not in by_id:
            continue
        for dep_id in dep_ids:
            if dep_id not in by_id:
                continue
            adjacency[dep_id].append(resource_id)
            in_degree[resource_id] += 1

    for parent_id, child_ids in architecture.containments.items():
        if parent_id not in by_id:
            continue
        for child_id in child_ids:
            if child_id not in by_id:
                continue
            adjacency[parent_id].append(child_id)
            in_degree[child_id] += 1

    # parent ids not mirrored in containments
    for resource in by_id.values():
        parent_id = resource.parent_id
        if parent_id and parent_id in by_id and resource.id not in adjacency[parent_id]:
            adjacency[parent_id].append(resource.id)
            in_degree[resource.id] += 1

    queue = deque(rid for rid in by_id if in_degree[rid] == 0)
    result = TopologicalSortResult()

    while queue:
        level = []
        for _ in range(len(queue)):
            current = queue.popleft()
            result.resources.append(by_id[current])
            level.append(current)
            for dependent in adjacency[current]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)
        result.levels.append(level)

    if len(result.resources) != len(by_id):
        processed = {r.id for r in result.resources}
        result.has_cycle = True
        result.cycle_info = [rid for rid in by_id if rid not in processed]
        logger.warning("[TOPOSORT] Cycle detected among %s", result.cycle_info)

    return result


def get_sorted_resources(architecture: Architecture) -> List[Resource]:
    """Resources in provisioning order; raises DependencyCycleError on a cycle."""
    result = topological_sort(architecture)
    if result.has_cycle:
        raise DependencyCycleError(result.cycle_info)
    return result.resources
