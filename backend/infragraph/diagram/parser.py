"""
Canvas diagram parser.

Turns the JSON the diagram editor saves (React Flow nodes/edges plus
variables, outputs and policies) into a NormalizedGraph. Parsing is
tolerant of the shapes the editor has produced over time: a plain
object, a double-encoded JSON string, or a bare array of nodes.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from infragraph.diagram.graph import (
    EDGE_KIND_CONTAINMENT,
    EDGE_KIND_DEPENDENCY,
    NODE_KIND_CONTAINER,
    NODE_KIND_RESOURCE,
    Edge,
    Node,
    NormalizedGraph,
    Output,
    Policy,
    Variable,
)
from infragraph.errors import DiagramParseError

logger = logging.getLogger(__name__)

CONTAINER_NODE_TYPE = "containerNode"

# React Flow edge renderers that carry no relationship meaning
GENERIC_EDGE_TYPES = {"default", "smoothstep"}

VAR_PATTERN = re.compile(r"var\.([a-zA-Z_][a-zA-Z0-9_]*)")
VAR_REFS_KEY = "_varRefs"


class _CanvasModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CanvasPosition(_CanvasModel):
    x: float = 0
    y: float = 0


class CanvasNodeUI(_CanvasModel):
    position: CanvasPosition = Field(default_factory=CanvasPosition)
    width: Optional[float] = None
    height: Optional[float] = None
    is_visual_only: bool = Field(False, alias="isVisualOnly")


class CanvasNodeData(_CanvasModel):
    label: str = ""
    resource_type: str = Field("", alias="resourceType")
    config: Optional[Dict[str, Any]] = None
    is_visual_only: Optional[bool] = Field(None, alias="isVisualOnly")


class CanvasNode(_CanvasModel):
    id: str
    type: str = "resourceNode"              # containerNode | resourceNode
    position: Optional[CanvasPosition] = None
    parent_id: Optional[str] = Field(None, alias="parentId")
    data: CanvasNodeData = Field(default_factory=CanvasNodeData)
    ui: Optional[CanvasNodeUI] = None


class CanvasEdge(_CanvasModel):
    id: str = ""
    source: str = ""
    target: str = ""
    type: Optional[str] = None              # containment | dependency | reference
    label: str = ""
    data: Optional[Dict[str, Any]] = None
    style: Optional[Dict[str, Any]] = None
    marker_end: Optional[Dict[str, Any]] = Field(None, alias="markerEnd")


class CanvasVariable(_CanvasModel):
    name: str
    type: str = "string"
    description: str = ""
    default: Any = None
    sensitive: bool = False


class CanvasOutput(_CanvasModel):
    name: str
    value: str = ""
    description: str = ""
    sensitive: bool = False


class CanvasPolicy(_CanvasModel):
    edge_id: str = Field("", alias="edgeId")
    source_id: str = Field("", alias="sourceId")
    target_id: str = Field("", alias="targetId")
    source_type: str = Field("", alias="sourceType")
    target_type: str = Field("", alias="targetType")
    role: str = ""
    policy_template_id: str = Field("", alias="policyTemplateId")
    policy_document: Dict[str, Any] = Field(default_factory=dict, alias="policyDocument")


class DiagramDocument(_CanvasModel):
    nodes: List[CanvasNode] = Field(default_factory=list)
    edges: List[CanvasEdge] = Field(default_factory=list)
    variables: List[CanvasVariable] = Field(default_factory=list)
    outputs: List[CanvasOutput] = Field(default_factory=list)
    policies: List[CanvasPolicy] = Field(default_factory=list)
    timestamp: Optional[int] = None


# ============================================================
# Parsing
# ============================================================

def parse_diagram(data: Union[str, bytes, dict, list]) -> DiagramDocument:
    """
    Parse raw diagram JSON into a DiagramDocument and resolve variable
    references. Raises DiagramParseError on malformed input.
    """
    payload = _decode(data)

    if isinstance(payload, list):
        payload = {"nodes": payload}

    if not isinstance(payload, dict):
        raise DiagramParseError(
            f"diagram JSON must be an object or an array of nodes, got {type(payload).__name__}"
        )

    try:
        document = DiagramDocument.model_validate(payload)
    except ValidationError as e:
        raise DiagramParseError(f"failed to parse diagram: {e}") from e

    resolve_variables(document)
    logger.debug(
        "[PARSER] Parsed diagram: %d nodes, %d edges, %d variables",
        len(document.nodes), len(document.edges), len(document.variables),
    )
    return document


def _decode(data: Union[str, bytes, dict, list]) -> Any:
    if isinstance(data, (dict, list)):
        return data

    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DiagramParseError(f"diagram payload is not valid UTF-8: {e}") from e

    try:
        payload = json.loads(data)
        # Double-encoded: the editor sometimes stores the JSON as a string
        if isinstance(payload, str):
            payload = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise DiagramParseError(f"failed to parse diagram JSON: {e}") from e

    return payload


# ============================================================
# Variable resolution
# ============================================================

def resolve_variables(document: DiagramDocument) -> None:
    """
    Replace var.<name> references with the variable's default value.

    Original references are kept per node under config["_varRefs"]
    (field path -> reference text) so generators can emit var.<name>.
    """
    defaults = {v.name: v.default for v in document.variables if v.default is not None}
    if not defaults:
        return

    for node in document.nodes:
        if node.data.config is None:
            node.data.config = {}
        var_refs: Dict[str, str] = {}

        if _has_var_ref(node.id):
            var_refs["_id"] = node.id
            node.id = _resolve_string(node.id, defaults)

        if node.parent_id is not None and _has_var_ref(node.parent_id):
            var_refs["_parentId"] = node.parent_id
            node.parent_id = _resolve_string(node.parent_id, defaults)

        node.data.config = _resolve_map(node.data.config, defaults, "", var_refs)

        if var_refs:
            node.data.config[VAR_REFS_KEY] = var_refs

    for edge in document.edges:
        edge.source = _resolve_string(edge.source, defaults)
        edge.target = _resolve_string(edge.target, defaults)


def _has_var_ref(text: str) -> bool:
    return "var." in text


def _format_default(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _resolve_string(text: str, defaults: Dict[str, Any]) -> str:
    if not _has_var_ref(text):
        return text

    def replace(match: "re.Match") -> str:
        name = match.group(1)
        if name in defaults:
            return _format_default(defaults[name])
        return match.group(0)

    return VAR_PATTERN.sub(replace, text)


def _resolve_map(values: Dict[str, Any], defaults: Dict[str, Any], prefix: str, var_refs: Dict[str, str]) -> Dict[str, Any]:
    resolved = {}
    for key, value in values.items():
        path = f"{prefix}.{key}" if prefix else key
        resolved[key] = _resolve_value(value, defaults, path, var_refs)
    return resolved


def _resolve_value(value: Any, defaults: Dict[str, Any], path: str, var_refs: Dict[str, str]) -> Any:
    if isinstance(value, str):
        if _has_var_ref(value):
            var_refs[path] = value
        resolved = _resolve_string(value, defaults)
        # A whole-string reference keeps the default's own type
        if value.startswith("var.") and not _has_var_ref(resolved):
            name = value[len("var."):]
            if name in defaults:
                return defaults[name]
        return resolved
    if isinstance(value, dict):
        return _resolve_map(value, defaults, path, var_refs)
    if isinstance(value, list):
        return [
            _resolve_value(item, defaults, f"{path}[{i}]", var_refs)
            for i, item in enumerate(value)
        ]
    return value


# ============================================================
# Normalization
# ============================================================

def normalize_to_graph(document: DiagramDocument) -> NormalizedGraph:
    graph = NormalizedGraph()

    graph.variables = [
        Variable(
            name=v.name,
            type=v.type,
            description=v.description,
            default=v.default,
            sensitive=v.sensitive,
        )
        for v in document.variables
    ]
    graph.outputs = [
        Output(name=o.name, value=o.value, description=o.description, sensitive=o.sensitive)
        for o in document.outputs
    ]
    graph.policies = [
        Policy(
            edge_id=p.edge_id,
            source_id=p.source_id,
            target_id=p.target_id,
            source_type=p.source_type,
            target_type=p.target_type,
            role=p.role,
            policy_template_id=p.policy_template_id,
            policy_document=dict(p.policy_document),
        )
        for p in document.policies
    ]

    for canvas_node in document.nodes:
        graph.add_node(_to_node(canvas_node))

    for canvas_edge in document.edges:
        graph.edges.append(_to_edge(canvas_edge))

    _add_implicit_containment_edges(graph)

    logger.info(
        "[PARSER] Normalized graph: %d nodes, %d edges",
        len(graph.nodes), len(graph.edges),
    )
    return graph


def _to_node(canvas_node: CanvasNode) -> Node:
    is_visual_only = bool(canvas_node.data.is_visual_only)
    position = canvas_node.position
    if canvas_node.ui is not None:
        is_visual_only = canvas_node.ui.is_visual_only
        position = canvas_node.ui.position

    kind = NODE_KIND_CONTAINER if canvas_node.type == CONTAINER_NODE_TYPE else NODE_KIND_RESOURCE

    return Node(
        id=canvas_node.id,
        kind=kind,
        resource_type=canvas_node.data.resource_type,
        label=canvas_node.data.label,
        config=canvas_node.data.config,
        position_x=position.x if position else 0,
        position_y=position.y if position else 0,
        parent_id=canvas_node.parent_id,
        is_visual_only=is_visual_only,
    )


def _to_edge(canvas_edge: CanvasEdge) -> Edge:
    kind = canvas_edge.type or EDGE_KIND_DEPENDENCY
    if kind in GENERIC_EDGE_TYPES:
        kind = EDGE_KIND_DEPENDENCY

    config: Dict[str, Any] = {}
    if canvas_edge.label:
        config["label"] = canvas_edge.label
    if canvas_edge.data:
        config.update(canvas_edge.data)
    if canvas_edge.style:
        config["style"] = canvas_edge.style
    if canvas_edge.marker_end:
        config["markerEnd"] = canvas_edge.marker_end

    return Edge(
        id=canvas_edge.id,
        source=canvas_edge.source,
        target=canvas_edge.target,
        kind=kind,
        config=config,
    )


def _add_implicit_containment_edges(graph: NormalizedGraph) -> None:
    existing = {
        (e.source, e.target) for e in graph.edges if e.is_containment()
    }
    for node in graph.nodes.values():
        if node.parent_id is None or node.parent_id not in graph.nodes:
            continue
        key = (node.parent_id, node.id)
        if key in existing:
            continue
        graph.edges.append(Edge(source=node.parent_id, target=node.id, kind=EDGE_KIND_CONTAINMENT))
        existing.add(key)


def parse_and_normalize(data: Union[str, bytes, dict, list]) -> NormalizedGraph:
    return normalize_to_graph(parse_diagram(data))
