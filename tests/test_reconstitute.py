import pytest

from command_kit.errors import TreeReconstitutionTimeout
from command_kit.reconstitute import MAX_ITERATIONS, NodePayload, TreeRecord, reconstitute_tree
from command_kit.tree import Node


def _rec(id, parent=None, remove=False, name=None):
    return TreeRecord(id=id, parent_id=parent, remove=remove,
                      node=NodePayload(selector=f"sel-{id}", name=name or id))


def test_nested_structure_from_flat_records():
    tree = reconstitute_tree([
        _rec("root"),
        _rec("a", "root"),
        _rec("b", "root"),
        _rec("a1", "a"),
    ])
    assert len(tree.roots) == 1
    root = tree.roots[0]
    assert [c.name for c in root.children] == ["a", "b"]
    assert [c.name for c in root.children[0].children] == ["a1"]
    # selectors follow insertion order, not rendering order
    assert tree.selectors == ("sel-root", "sel-a", "sel-b", "sel-a1")


def test_children_listed_before_parent_are_resolved_on_later_pass():
    tree = reconstitute_tree([
        _rec("a1", "a"),
        _rec("a", "root"),
        _rec("root"),
    ])
    assert tree.roots[0].name == "root"
    assert tree.roots[0].children[0].name == "a"
    assert tree.roots[0].children[0].children[0].name == "a1"


def test_removed_root_hoists_children_in_order():
    tree = reconstitute_tree([
        _rec("web", remove=True),
        _rec("x", "web"),
        _rec("y", "web"),
    ])
    assert [n.name for n in tree.roots] == ["x", "y"]
    assert "sel-web" not in tree.selectors


def test_removed_inner_node_preserves_structure_beneath():
    tree = reconstitute_tree([
        _rec("root"),
        _rec("group", "root", remove=True),
        _rec("btn", "group"),
        _rec("inner", "btn"),
        _rec("wrapper", "btn", remove=True),
        _rec("deep", "wrapper"),
    ])
    root = tree.roots[0]
    assert [c.name for c in root.children] == ["btn"]
    assert [c.name for c in root.children[0].children] == ["inner", "deep"]


def test_payload_copied_without_construction_metadata():
    tree = reconstitute_tree([
        TreeRecord(id="1", parent_id=None, remove=False,
                   node=NodePayload(selector=7, name="Go", role="button", state="on",
                                    properties={"k": "v"})),
    ])
    assert tree.roots[0] == Node(selector=7, name="Go", role="button", state="on", properties={"k": "v"})


def test_idempotent():
    records = [_rec("r", remove=True), _rec("a", "r"), _rec("b", "a"), _rec("c", "r")]
    assert reconstitute_tree(records) == reconstitute_tree(records)


def test_missing_parent_times_out():
    with pytest.raises(TreeReconstitutionTimeout) as excinfo:
        reconstitute_tree([_rec("root"), _rec("orphan", "ghost")])
    assert excinfo.value.iterations == MAX_ITERATIONS == 50


def test_parent_cycle_times_out():
    with pytest.raises(TreeReconstitutionTimeout):
        reconstitute_tree([_rec("a", "b"), _rec("b", "a")])


def test_empty_input():
    tree = reconstitute_tree([])
    assert tree.roots == ()
    assert tree.selectors == ()
