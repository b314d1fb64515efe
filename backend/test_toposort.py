"""Provisioning order"""

import pytest

from infragraph.domain import (
    Architecture,
    ArchitectureGraph,
    CloudProvider,
    Resource,
    get_sorted_resources,
    resolve_resource_type,
    topological_sort,
)
from infragraph.errors import ArchitectureRequiredError, DependencyCycleError


def res(resource_id, ir_type="ec2", parent_id=None, depends_on=()):
    return Resource(
        id=resource_id,
        name=resource_id,
        type=resolve_resource_type(ir_type, "aws"),
        provider=CloudProvider.AWS,
        parent_id=parent_id,
        depends_on=list(depends_on),
    )


def architecture(*resources, containments=None):
    arch = Architecture(resources=list(resources), containments=containments or {})
    for r in resources:
        if r.depends_on:
            arch.dependencies[r.id] = list(r.depends_on)
    return arch


def test_dependency_chain_sorts_in_levels_of_one():
    arch = architecture(
        res("vpc", "vpc"),
        res("subnet", "subnet", depends_on=["vpc"]),
        res("ec2", "ec2", depends_on=["subnet"]),
    )

    result = topological_sort(arch)

    assert result.sorted_ids() == ["vpc", "subnet", "ec2"]
    assert result.levels == [["vpc"], ["subnet"], ["ec2"]]
    assert not result.has_cycle
    assert result.cycle_info == []


def test_containment_orders_children_after_parents():
    arch = architecture(
        res("ec2", "ec2"),
        res("subnet", "subnet"),
        res("vpc", "vpc"),
        containments={"vpc": ["subnet"], "subnet": ["ec2"]},
    )

    assert topological_sort(arch).sorted_ids() == ["vpc", "subnet", "ec2"]


def test_independent_resources_share_a_level():
    arch = architecture(res("a"), res("b"), res("c", depends_on=["a", "b"]))

    result = topological_sort(arch)

    assert result.levels == [["a", "b"], ["c"]]


def test_parent_id_without_containment_entry():
    arch = architecture(res("vpc", "vpc"), res("subnet", "subnet", parent_id="vpc"))
    arch.resources.reverse()

    assert topological_sort(arch).sorted_ids() == ["vpc", "subnet"]


def test_parent_id_and_containment_count_once():
    arch = architecture(
        res("vpc", "vpc"),
        res("subnet", "subnet", parent_id="vpc"),
        containments={"vpc": ["subnet"]},
    )

    result = topological_sort(arch)

    assert result.sorted_ids() == ["vpc", "subnet"]
    assert not result.has_cycle


def test_unknown_references_are_ignored():
    arch = architecture(res("a", depends_on=["ghost"]), containments={"nowhere": ["a"], "a": ["nobody"]})

    result = topological_sort(arch)

    assert result.sorted_ids() == ["a"]


def test_cycle_reports_unprocessed_resources():
    arch = architecture(
        res("root"),
        res("a", depends_on=["b"]),
        res("b", depends_on=["a"]),
        res("leaf", depends_on=["a"]),
    )

    result = topological_sort(arch)

    assert result.has_cycle
    assert result.sorted_ids() == ["root"]
    assert result.cycle_info == ["a", "b", "leaf"]


def test_empty_architecture():
    result = topological_sort(Architecture())

    assert result.resources == []
    assert result.levels == []
    assert not result.has_cycle


def test_none_architecture():
    with pytest.raises(ArchitectureRequiredError):
        topological_sort(None)


def test_get_sorted_resources():
    arch = architecture(res("vpc", "vpc"), res("subnet", "subnet", depends_on=["vpc"]))

    assert [r.id for r in get_sorted_resources(arch)] == ["vpc", "subnet"]


def test_get_sorted_resources_raises_on_cycle():
    arch = architecture(res("a", depends_on=["b"]), res("b", depends_on=["a"]))

    with pytest.raises(DependencyCycleError) as excinfo:
        get_sorted_resources(arch)

    assert excinfo.value.resource_ids == ["a", "b"]


def test_to_dict():
    arch = architecture(res("vpc", "vpc"), res("subnet", "subnet", depends_on=["vpc"]))

    assert topological_sort(arch).to_dict() == {
        "order": ["vpc", "subnet"],
        "levels": [["vpc"], ["subnet"]],
        "has_cycle": False,
        "cycle_info": [],
    }


# --- query view ---

def test_architecture_graph_queries():
    arch = architecture(
        res("vpc", "vpc"),
        res("subnet", "subnet", parent_id="vpc"),
        res("ec2", "ec2", depends_on=["subnet"]),
        containments={"subnet": ["ec2"]},
    )
    view = ArchitectureGraph(arch)

    assert view.get_resource("ec2").id == "ec2"
    assert view.get_resource("nope") is None
    assert view.get_parent("subnet").id == "vpc"
    assert view.get_parent("ec2").id == "subnet"
    assert view.get_parent("vpc") is None
    assert [r.id for r in view.get_children("vpc")] == ["subnet"]
    assert [r.id for r in view.get_dependencies("ec2")] == ["subnet"]
    assert [r.id for r in view.get_dependents("subnet")] == ["ec2"]
    assert [r.id for r in view.roots()] == ["vpc"]
    assert view.containment_tree() == {"vpc": ["subnet"], "subnet": ["ec2"]}


def test_cycle_across_containment_and_dependency():
    arch = architecture(res("a", "vpc", depends_on=["b"]), res("b", "subnet"), containments={"a": ["b"]})

    result = topological_sort(arch)

    assert result.has_cycle
    assert result.resources == []
    assert result.cycle_info == ["a", "b"]
