import copy

import pytest

from infragraph.diagram.graph import (
    EDGE_KIND_DEPENDENCY,
    NODE_KIND_CONTAINER,
    NODE_KIND_RESOURCE,
    Edge,
    Node,
    NormalizedGraph,
)
from infragraph.schema.registry import SchemaRegistry
from infragraph.validation import ValidationOptions


SAMPLE_DIAGRAM = {
    "nodes": [
        {
            "id": "region-1",
            "type": "containerNode",
            "position": {"x": 0, "y": 0},
            "data": {"label": "US East", "resourceType": "region", "config": {"name": "us-east-1"}},
        },
        {
            "id": "vpc-1",
            "type": "containerNode",
            "parentId": "region-1",
            "position": {"x": 20, "y": 40},
            "data": {
                "label": "Main VPC",
                "resourceType": "vpc",
                "config": {"name": "main-vpc", "cidr": "10.0.0.0/16"},
            },
        },
        {
            "id": "subnet-1",
            "type": "containerNode",
            "parentId": "vpc-1",
            "position": {"x": 40, "y": 80},
            "data": {
                "label": "Public Subnet",
                "resourceType": "subnet",
                "config": {"name": "public-a", "cidr": "10.0.1.0/24", "availabilityZoneId": "us-east-1a"},
            },
        },
        {
            "id": "ec2-1",
            "type": "resourceNode",
            "parentId": "subnet-1",
            "position": {"x": 60, "y": 120},
            "data": {
                "label": "Web Server",
                "resourceType": "ec2",
                "config": {"name": "web", "ami": "ami-0abcdef12", "instanceType": "t3.micro"},
            },
        },
        {
            "id": "s3-1",
            "type": "resourceNode",
            "parentId": "region-1",
            "position": {"x": 300, "y": 40},
            "data": {"label": "Assets", "resourceType": "s3", "config": {"name": "assets-bucket"}},
        },
    ],
    "edges": [
        {"id": "e-ec2-s3", "source": "ec2-1", "target": "s3-1", "type": "dependency"},
    ],
    "variables": [
        {"name": "environment", "type": "string", "default": "dev"},
    ],
    "outputs": [
        {"name": "bucket_name", "value": "aws_s3_bucket.assets.bucket"},
    ],
}


@pytest.fixture
def sample_diagram():
    return copy.deepcopy(SAMPLE_DIAGRAM)


@pytest.fixture
def no_schemas():
    """Options that skip schema-driven checks (empty registry)."""
    return ValidationOptions(schema_registry=SchemaRegistry())


def resource(node_id, resource_type="widget", parent_id=None, config=None, **kwargs):
    return Node(
        id=node_id,
        kind=NODE_KIND_RESOURCE,
        resource_type=resource_type,
        label=kwargs.pop("label", node_id),
        config=config if config is not None else {},
        parent_id=parent_id,
        **kwargs,
    )


def container(node_id, resource_type="group", parent_id=None, config=None, **kwargs):
    node = resource(node_id, resource_type, parent_id, config, **kwargs)
    node.kind = NODE_KIND_CONTAINER
    return node


def depends(source, target, edge_id=None):
    return Edge(id=edge_id or f"{source}->{target}", source=source, target=target, kind=EDGE_KIND_DEPENDENCY)


def build_graph(nodes, edges=()):
    graph = NormalizedGraph()
    for node in nodes:
        graph.add_node(node)
    graph.edges.extend(edges)
    return graph
