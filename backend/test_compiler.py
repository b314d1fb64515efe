"""End-to-end: canvas JSON -> validated, ordered architecture"""

import pytest

from conftest import build_graph, container, resource
from infragraph.diagram import parse_and_normalize
from infragraph.errors import DiagramParseError, DiagramValidationError, GraphRequiredError
from infragraph.pipeline import compile_diagram, compile_document
from infragraph.validation import ValidationOptions


def test_compile_sample(sample_diagram):
    compiled = compile_document(sample_diagram)

    assert compiled.validation.is_valid
    assert compiled.warnings == []
    assert compiled.architecture.region == "us-east-1"
    assert compiled.sort_result.sorted_ids() == ["vpc-1", "s3-1", "subnet-1", "ec2-1"]
    assert compiled.sort_result.levels == [["vpc-1", "s3-1"], ["subnet-1"], ["ec2-1"]]


def test_warnings_do_not_block(sample_diagram):
    sample_diagram["nodes"] = [n for n in sample_diagram["nodes"] if n["id"] != "region-1"]
    for node in sample_diagram["nodes"]:
        if node.get("parentId") == "region-1":
            node.pop("parentId")

    compiled = compile_document(sample_diagram)

    assert [w.code for w in compiled.warnings] == ["NO_REGION_NODE"]
    assert compiled.architecture.region == ""
    assert len(compiled.architecture.resources) == 4


def test_errors_block_compilation(sample_diagram):
    sample_diagram["nodes"][2]["data"]["config"]["cidr"] = "172.16.0.0/24"

    with pytest.raises(DiagramValidationError) as excinfo:
        compile_document(sample_diagram)

    assert excinfo.value.result.error_codes() == ["CIDR_OUTSIDE_VPC"]


def test_known_types_option(sample_diagram):
    graph = parse_and_normalize(sample_diagram)
    options = ValidationOptions(valid_resource_types={"region", "vpc", "subnet", "ec2"})

    compiled = compile_diagram(graph, options=options)

    assert [w.code for w in compiled.warnings] == ["UNKNOWN_RESOURCE_TYPE"]
    assert compiled.warnings[0].node_id == "s3-1"
    assert options.provider == ""


def test_containment_cycle_blocks_compilation():
    graph = build_graph([
        resource("a", "s3", parent_id="b", config={"name": "bucket-a"}),
        resource("b", "s3", config={"name": "bucket-b"}),
    ])
    graph.get_node("b").parent_id = "a"

    with pytest.raises(DiagramValidationError) as excinfo:
        compile_diagram(graph)

    assert "CONTAINMENT_CYCLE" in excinfo.value.result.error_codes()


def test_parse_error_surfaces():
    with pytest.raises(DiagramParseError):
        compile_document("{broken")


def test_none_graph():
    with pytest.raises(GraphRequiredError):
        compile_diagram(None)


def test_mixed_case_provider_still_gates_on_schema_errors():
    graph = build_graph([container("vpc-1", "vpc", config={"name": "x"})])

    with pytest.raises(DiagramValidationError) as excinfo:
        compile_diagram(graph, provider="AWS")

    assert excinfo.value.result.error_codes() == ["CONFIG_MISSING_FIELD"]
