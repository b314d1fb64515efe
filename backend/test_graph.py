"""Normalized graph lookups"""

from conftest import build_graph, container, depends, resource
from infragraph.diagram.graph import Edge


def sample():
    return build_graph(
        [
            container("region", "region"),
            container("vpc", "vpc", parent_id="region"),
            resource("ec2-a", "ec2", parent_id="vpc"),
            resource("ec2-b", "ec2", parent_id="vpc"),
            resource("orphan", "s3", parent_id="missing"),
        ],
        [
            Edge(source="region", target="vpc", kind="containment"),
            depends("ec2-a", "ec2-b"),
        ],
    )


def test_get_node_returns_none_when_unknown():
    graph = sample()

    assert graph.get_node("vpc").resource_type == "vpc"
    assert graph.get_node("nope") is None
    assert not graph.has_node("nope")


def test_children_and_parent():
    graph = sample()

    assert [n.id for n in graph.get_children("vpc")] == ["ec2-a", "ec2-b"]
    assert graph.get_children("ec2-a") == []
    assert graph.get_parent("ec2-a").id == "vpc"
    assert graph.get_parent("region") is None
    assert graph.get_parent("orphan") is None
    assert graph.get_parent("nope") is None


def test_edge_filters():
    graph = sample()

    assert [(e.source, e.target) for e in graph.containment_edges()] == [("region", "vpc")]
    assert [(e.source, e.target) for e in graph.dependency_edges()] == [("ec2-a", "ec2-b")]


def test_containment_tree_matches_children():
    graph = sample()
    tree = graph.build_containment_tree()

    assert set(tree) == {"region", "vpc", "missing"}
    for parent_id, children in tree.items():
        assert children == graph.get_children(parent_id)


def test_roots_and_region():
    graph = sample()

    assert [n.id for n in graph.root_nodes()] == ["region"]
    assert graph.find_region_node().id == "region"
    assert build_graph([resource("a")]).find_region_node() is None


def test_node_kind_helpers():
    graph = sample()

    assert graph.get_node("vpc").is_container()
    assert graph.get_node("ec2-a").is_resource()
    assert graph.get_node("region").is_region()
    assert not graph.get_node("vpc").is_region()
