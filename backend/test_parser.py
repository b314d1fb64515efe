"""Canvas JSON -> NormalizedGraph"""

import json

import pytest

from infragraph.diagram import parse_and_normalize, parse_diagram
from infragraph.diagram.graph import EDGE_KIND_CONTAINMENT, EDGE_KIND_DEPENDENCY
from infragraph.errors import DiagramParseError


def test_parse_sample(sample_diagram):
    graph = parse_and_normalize(sample_diagram)

    assert list(graph.nodes) == ["region-1", "vpc-1", "subnet-1", "ec2-1", "s3-1"]
    vpc = graph.get_node("vpc-1")
    assert vpc.is_container()
    assert vpc.resource_type == "vpc"
    assert vpc.label == "Main VPC"
    assert vpc.parent_id == "region-1"
    assert (vpc.position_x, vpc.position_y) == (20, 40)
    assert graph.get_node("ec2-1").is_resource()
    assert [v.name for v in graph.variables] == ["environment"]
    assert graph.outputs[0].value == "aws_s3_bucket.assets.bucket"


def test_implicit_containment_edges(sample_diagram):
    graph = parse_and_normalize(sample_diagram)

    containment = {(e.source, e.target) for e in graph.containment_edges()}
    assert containment == {
        ("region-1", "vpc-1"),
        ("vpc-1", "subnet-1"),
        ("subnet-1", "ec2-1"),
        ("region-1", "s3-1"),
    }
    assert [(e.source, e.target) for e in graph.dependency_edges()] == [("ec2-1", "s3-1")]


def test_explicit_containment_edge_not_duplicated(sample_diagram):
    sample_diagram["edges"].append(
        {"id": "c1", "source": "vpc-1", "target": "subnet-1", "type": "containment"}
    )

    graph = parse_and_normalize(sample_diagram)

    pairs = [(e.source, e.target) for e in graph.edges if e.kind == EDGE_KIND_CONTAINMENT]
    assert pairs.count(("vpc-1", "subnet-1")) == 1


def test_string_and_double_encoded_input(sample_diagram):
    encoded = json.dumps(sample_diagram)

    assert len(parse_and_normalize(encoded).nodes) == 5
    assert len(parse_and_normalize(encoded.encode("utf-8")).nodes) == 5
    assert len(parse_and_normalize(json.dumps(encoded)).nodes) == 5


def test_bare_node_array(sample_diagram):
    graph = parse_and_normalize(sample_diagram["nodes"])

    assert len(graph.nodes) == 5
    assert len(graph.dependency_edges()) == 0


@pytest.mark.parametrize("payload", ["{not json", "42", b"\xff\xfe"])
def test_malformed_input(payload):
    with pytest.raises(DiagramParseError):
        parse_diagram(payload)


def test_shape_errors_are_parse_errors():
    with pytest.raises(DiagramParseError):
        parse_diagram({"nodes": [{"data": {"label": "no id"}}]})


def test_generic_edge_types_become_dependencies():
    graph = parse_and_normalize({
        "nodes": [{"id": "a"}, {"id": "b"}, {"id": "c"}],
        "edges": [
            {"id": "e1", "source": "a", "target": "b", "type": "smoothstep", "label": "reads"},
            {"id": "e2", "source": "b", "target": "c"},
            {"id": "e3", "source": "a", "target": "c", "type": "reference"},
        ],
    })

    kinds = [e.kind for e in graph.edges]
    assert kinds == [EDGE_KIND_DEPENDENCY, EDGE_KIND_DEPENDENCY, "reference"]
    assert graph.edges[0].config == {"label": "reads"}


def test_ui_block_overrides_position_and_visual_flag():
    graph = parse_and_normalize({
        "nodes": [
            {
                "id": "note",
                "position": {"x": 1, "y": 2},
                "data": {"label": "Note", "resourceType": "text", "isVisualOnly": False},
                "ui": {"position": {"x": 10, "y": 20}, "isVisualOnly": True},
            },
            {"id": "icon", "data": {"resourceType": "icon", "isVisualOnly": True}},
        ],
    })

    note = graph.get_node("note")
    assert (note.position_x, note.position_y) == (10, 20)
    assert note.is_visual_only
    assert graph.get_node("icon").is_visual_only


def test_variable_references_are_resolved():
    graph = parse_and_normalize({
        "nodes": [
            {
                "id": "vpc-1",
                "data": {
                    "resourceType": "vpc",
                    "config": {
                        "name": "vpc-var.env",
                        "cidr": "var.vpc_cidr",
                        "tags": {"Size": "var.size"},
                    },
                },
            },
        ],
        "variables": [
            {"name": "env", "default": "prod"},
            {"name": "vpc_cidr", "default": "10.0.0.0/16"},
            {"name": "size", "type": "number", "default": 3},
        ],
    })

    config = graph.get_node("vpc-1").config
    assert config["name"] == "vpc-prod"
    assert config["cidr"] == "10.0.0.0/16"
    assert config["tags"] == {"Size": 3}
    assert config["_varRefs"] == {
        "name": "vpc-var.env",
        "cidr": "var.vpc_cidr",
        "tags.Size": "var.size",
    }


def test_unknown_variable_is_left_in_place():
    graph = parse_and_normalize({
        "nodes": [{"id": "a", "data": {"config": {"name": "var.missing"}}}],
        "variables": [{"name": "env", "default": "dev"}],
    })

    assert graph.get_node("a").config["name"] == "var.missing"


def test_bool_defaults_are_lower_case_in_strings():
    graph = parse_and_normalize({
        "nodes": [{"id": "a", "data": {"config": {"flag": "enabled=var.on"}}}],
        "variables": [{"name": "on", "type": "bool", "default": True}],
    })

    assert graph.get_node("a").config["flag"] == "enabled=true"


def test_extra_canvas_data_is_ignored(sample_diagram):
    sample_diagram["nodes"][1]["data"]["status"] = "deployed"

    vpc = parse_and_normalize(sample_diagram).get_node("vpc-1")

    assert not hasattr(vpc, "status")
    assert vpc.config["cidr"] == "10.0.0.0/16"
