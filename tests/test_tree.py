import pytest

from command_kit.tree import VIRTUAL_ID_FACTOR, Node, Tree


def _tree() -> Tree:
    return Tree(
        roots=(
            Node(selector="a", name="Main menu", role="button",
                 properties={"hasPopup": "menu", "invalid": "false"}),
            Node(
                selector="b",
                role="form",
                children=(
                    Node(selector="c", name="Search", role="combobox",
                         description="Search Wikipedia", state="foo"),
                ),
            ),
        ),
        selectors=("a", "b", "c"),
    )


def test_virtual_ids_are_spaced_by_factor():
    tree = _tree()
    assert VIRTUAL_ID_FACTOR == 3
    assert tree.virtual_id("a") == 0
    assert tree.virtual_id("b") == 3
    assert tree.virtual_id("c") == 6
    assert tree.virtual_id("zzz") is None


def test_resolve_virtual_id():
    tree = _tree()
    assert tree.resolve(3) == "b"
    assert tree.resolve(4) is None
    assert tree.resolve(9) is None
    assert tree.resolve(-3) is None


def test_id_map_is_bijection_over_selectors():
    assert _tree().id_map() == {0: "a", 3: "b", 6: "c"}


def test_to_text():
    assert _tree().to_text() == "\n".join([
        '- [0] "Main menu" (button) {hasPopup: menu, invalid: false}',
        '- [3] "<null>" (form)',
        '\t- [6] "Search" (combobox) (Search Wikipedia) with state foo',
    ])


def test_to_text_omits_empty_sections():
    tree = Tree(roots=(Node(selector=1),), selectors=(1,))
    assert tree.to_text() == '- [0] "<null>"'


def test_structural_equality():
    assert _tree() == _tree()
    changed = Tree(roots=_tree().roots[:1], selectors=("a",))
    assert _tree() != changed


def test_equality_sees_nested_state_change():
    other = _tree()
    form = other.roots[1]
    edited = Tree(
        roots=(other.roots[0], Node(selector="b", role="form", children=(
            Node(selector="c", name="Search", role="combobox",
                 description="Search Wikipedia", state="foobar"),
        ))),
        selectors=other.selectors,
    )
    assert form != edited.roots[1]
    assert other != edited


def test_to_text_rejects_selector_missing_from_list():
    tree = Tree(roots=(Node(selector="a", children=(Node(selector="ghost"),)),), selectors=("a",))
    with pytest.raises(ValueError, match="ghost"):
        tree.to_text()


def test_nodes_are_values_but_not_hashable():
    node = Node(selector="a", properties={"k": "v"})
    assert node == Node(selector="a", properties={"k": "v"})
    with pytest.raises(TypeError):
        hash(node)
